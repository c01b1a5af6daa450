"""
errors.py

Error types raised while analyzing a check.

ValidationError is a ValueError (bad input, reported as HTTP 400).
All other errors are RuntimeErrors (reported as HTTP 500).
"""


class CheckVisionError(Exception):
    """Base class for every error raised by this service."""


class ValidationError(CheckVisionError, ValueError):
    """Missing fields, unsupported media type or oversized payload."""


class ConfigurationError(CheckVisionError, RuntimeError):
    """The Gemini API key is not configured."""


class ServiceError(CheckVisionError, RuntimeError):
    """Gemini answered with a non-success status or could not be reached."""


class EmptyResponseError(CheckVisionError, RuntimeError):
    """Gemini answered but generated no text."""


class UnparseableResponseError(CheckVisionError, RuntimeError):
    """No JSON object could be recovered from the generated text."""
