"""Error taxonomy for the authentication services."""

from __future__ import annotations

from http import HTTPStatus


class AuthError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = HTTPStatus.BAD_REQUEST
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return type(self).__name__


class ValidationError(AuthError):
    default_message = "Invalid request data"


class DuplicateEmail(AuthError):
    default_message = "User already exists"


class UserNotFound(AuthError):
    default_message = "User not found"


class InvalidCredentials(AuthError):
    default_message = "Invalid password"


class InvalidOrExpired(AuthError):
    default_message = "Invalid or expired token"


class InvalidAssertion(AuthError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid Google token"


class InternalError(AuthError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
