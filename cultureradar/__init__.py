"""CultureRadar: discover, submit and curate cultural events."""

__version__ = "1.0.0"
