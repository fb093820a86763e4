"""Configuration of the external event sources and their HTTP clients."""

from .eventbrite import EventbriteConfig
from .canada_gov import CanadaGovConfig
from .http import HttpClientConfig

__all__ = [
    'EventbriteConfig',
    'CanadaGovConfig',
    'HttpClientConfig',
]
