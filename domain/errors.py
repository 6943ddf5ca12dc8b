"""Exception classes raised by the classifieds client."""

from typing import Any


class ClassifiedsError(Exception):
    """Base exception for the client."""

    def __init__(self, message: str, detail: Any = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ResponseError(ClassifiedsError):
    """The API answered with an unexpected or malformed payload."""

    pass


class AuthenticationError(ResponseError):
    """The login endpoint did not return a usable token."""

    pass


class ValidationFailedError(ClassifiedsError):
    """An operation was refused locally or by the API."""

    pass


class ConfigurationError(ClassifiedsError):
    """Required settings are missing or invalid."""

    pass
