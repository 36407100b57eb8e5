"""
Exception types raised by the caption services.
Routes map each type to an HTTP status code.
"""


class CaptionStudioError(Exception):
    """Base class for all caption studio errors."""
    status_code = 500


class ValidationError(CaptionStudioError):
    """Raised when required request input is missing."""
    status_code = 400


class DataError(CaptionStudioError):
    """Raised when the reference caption dataset is missing, unreadable or empty."""
    pass


class UpstreamError(CaptionStudioError):
    """Raised when the completion API call fails (transport, auth, or malformed response)."""
    pass
