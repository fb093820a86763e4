"""Domain exceptions raised by the stores and services.

The API layer maps these to HTTP responses; nothing below it knows about HTTP.
"""


class CultureRadarError(Exception):
    """Base exception for domain errors."""
    pass


class NotFound(CultureRadarError):
    """Raised when a requested record does not exist."""
    pass


class ValidationFailed(CultureRadarError):
    """Raised when input is missing a required field or is malformed."""
    pass


class Unauthorized(CultureRadarError):
    """Raised when credentials are missing or invalid."""
    pass


class Forbidden(CultureRadarError):
    """Raised when an authenticated actor is not allowed to perform an operation."""
    pass


class Conflict(CultureRadarError):
    """Raised when a unique value (username, email) is already taken."""
    pass
