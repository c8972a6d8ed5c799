"""Authentication flows: register, login, Google sign-in and password resets."""

from __future__ import annotations

import logging
import re

from models.user import User, normalize_email

from .credential_store import CredentialStore
from .errors import DuplicateEmail, InvalidCredentials, UserNotFound, ValidationError
from .federation import GoogleIdentityVerifier
from .mailer import Mailer
from .passwords import PasswordHasher
from .reset_tokens import ResetTokenManager
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
RESET_EMAIL_SUBJECT = "Reset Password"


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'"{field}" is required')
    return value.strip()


def _validate_email(value) -> str:
    email = normalize_email(_require_text(value, "email"))
    if not EMAIL_PATTERN.match(email):
        raise ValidationError('"email" must be a valid email')
    return email


def _validate_password(value, field: str = "password") -> str:
    if not isinstance(value, str) or value == "":
        raise ValidationError(f'"{field}" is required')
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f'"{field}" length must be at least {MIN_PASSWORD_LENGTH} characters long'
        )
    return value


class AuthService:
    """Compose the credential store, hasher, token issuer and federation verifier."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        federation: GoogleIdentityVerifier,
        resets: ResetTokenManager,
        mailer: Mailer,
        reset_url_template: str,
        suppress_enumeration: bool = False,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.federation = federation
        self.resets = resets
        self.mailer = mailer
        self.reset_url_template = reset_url_template
        self.suppress_enumeration = suppress_enumeration

    def register(self, name, email, password) -> User:
        """Create a password account. The role is always ``user``."""

        name = _require_text(name, "name")
        email = _validate_email(email)
        password = _validate_password(password)

        if self.store.get_by_email(email) is not None:
            raise DuplicateEmail()

        user = self.store.create_user(
            name=name,
            email=email,
            password_hash=self.hasher.hash(password),
            role="user",
            login_method="email",
        )
        logger.info("Registered user %s", user.id)
        return user

    def login(self, email, password) -> tuple[str, User]:
        email = _validate_email(email)
        if not isinstance(password, str) or password == "":
            raise ValidationError('"password" is required')

        user = self.store.get_by_email(email)
        if user is None:
            self.hasher.burn(password)
            raise UserNotFound()
        if not self.hasher.verify(password, user.password_hash):
            logger.info("Failed login for user %s", user.id)
            raise InvalidCredentials()

        return self.tokens.issue(user.id), user

    def federated_login(self, assertion: str) -> tuple[str, User]:
        """Sign in with a Google ID token, creating or linking the account."""

        profile = self.federation.verify(assertion)

        user = self.store.get_by_federated_id(profile.federated_id)
        if user is None:
            user = self.store.get_by_email(profile.email)

        if user is None:
            try:
                user = self.store.create_user(
                    name=profile.name,
                    email=profile.email,
                    google_id=profile.federated_id,
                    avatar=profile.picture_url,
                    login_method="google",
                    is_verified=True,
                    password_hash=None,
                )
                logger.info("Created Google user %s", user.id)
            except DuplicateEmail:
                # A concurrent sign-in for the same email inserted the row first.
                user = self.store.get_by_email(profile.email)

        if user.google_id is None:
            avatar = profile.picture_url if not user.avatar and profile.picture_url else None
            if self.store.link_federated_identity(user.id, profile.federated_id, avatar):
                logger.info("Linked Google identity to existing user %s", user.id)
            user = self.store.get_by_id(user.id)

        return self.tokens.issue(user.id), user

    def forgot_password(self, email) -> None:
        """Issue a reset ticket and email the reset link."""

        email = _validate_email(email)
        user = self.store.get_by_email(email)
        if user is None:
            if self.suppress_enumeration:
                logger.info("Password reset requested for unknown email")
                return
            raise UserNotFound("Email not found", status_code=404)

        secret = self.resets.create(user)
        reset_url = self.reset_url_template.format(token=secret)
        self.mailer.send_email(user.email, RESET_EMAIL_SUBJECT, f"Reset using: {reset_url}")

    def reset_password(self, secret, password) -> None:
        password = _validate_password(password)
        self.resets.consume(secret, self.hasher.hash(password))
        logger.info("Password reset completed")

    def change_password(self, user_id: int, current_password, new_password) -> None:
        new_password = _validate_password(new_password, "newPassword")
        user = self.get_profile(user_id)
        if user.password_hash is not None:
            if not isinstance(current_password, str) or current_password == "":
                raise ValidationError('"currentPassword" is required')
            if not self.hasher.verify(current_password, user.password_hash):
                raise InvalidCredentials("Current password is incorrect")
        self.store.update_password(user.id, self.hasher.hash(new_password))
        logger.info("Password changed for user %s", user.id)

    def get_profile(self, user_id) -> User:
        try:
            user = self.store.get_by_id(int(user_id))
        except (TypeError, ValueError):
            user = None
        if user is None:
            raise UserNotFound(status_code=404)
        return user

    def update_profile(self, user_id, payload: dict) -> User:
        user = self.get_profile(user_id)
        changes = {}
        if "name" in payload:
            changes["name"] = _require_text(payload["name"], "name")
        for field in ("phone", "avatar"):
            if field in payload:
                value = payload[field]
                if not isinstance(value, str):
                    raise ValidationError(f'"{field}" must be a string')
                changes[field] = value.strip()
        self.store.update_profile(user.id, **changes)
        return self.store.get_by_id(user.id)
