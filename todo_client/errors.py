from __future__ import annotations

from typing import Optional


GENERIC_ERROR = "An error occurred"


class TodoClientError(Exception):
    """Base class for every failure raised by the client."""

    def __init__(self, message: str = GENERIC_ERROR):
        super().__init__(message)
        self.message = message


class AuthenticationFailure(TodoClientError):
    """Sign-in or sign-up was rejected by the service."""


class SessionInvalid(TodoClientError):
    """The persisted token could not be turned into an identity."""


class RequestFailure(TodoClientError):
    def __init__(self, message: str = GENERIC_ERROR, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkFailure(RequestFailure):
    """The request never produced an HTTP response."""
