"""Authentication services wired together by the application factory."""

from .auth_service import AuthService
from .credential_store import CredentialStore
from .errors import (
    AuthError,
    DuplicateEmail,
    InternalError,
    InvalidAssertion,
    InvalidCredentials,
    InvalidOrExpired,
    UserNotFound,
    ValidationError,
)
from .federation import FederatedProfile, GoogleIdentityVerifier
from .mailer import Mailer
from .passwords import PasswordHasher
from .reset_tokens import ResetTokenManager
from .tokens import TokenIssuer

__all__ = [
    "AuthService",
    "CredentialStore",
    "AuthError",
    "DuplicateEmail",
    "InternalError",
    "InvalidAssertion",
    "InvalidCredentials",
    "InvalidOrExpired",
    "UserNotFound",
    "ValidationError",
    "FederatedProfile",
    "GoogleIdentityVerifier",
    "Mailer",
    "PasswordHasher",
    "ResetTokenManager",
    "TokenIssuer",
]
