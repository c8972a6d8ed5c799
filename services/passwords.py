"""Password hashing."""

from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from .errors import InternalError

logger = logging.getLogger(__name__)

# scrypt with N=2**15, r=8, p=1.
PASSWORD_HASH_METHOD = "scrypt:32768:8:1"
SALT_LENGTH = 16


class PasswordHasher:
    """Salted, adaptive one-way hashing for account passwords."""

    def __init__(self, method: str = PASSWORD_HASH_METHOD, salt_length: int = SALT_LENGTH) -> None:
        self.method = method
        self.salt_length = salt_length
        self._dummy_hash = self.hash("not-a-real-password")

    def hash(self, password: str) -> str:
        """Hash a password; failures are fatal to the calling operation."""
        try:
            return generate_password_hash(
                password, method=self.method, salt_length=self.salt_length
            )
        except (TypeError, ValueError) as exc:
            logger.error("Password hashing failed: %s", type(exc).__name__)
            raise InternalError("Could not hash password") from exc

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password against its hash. A missing hash never matches."""
        if not password_hash:
            return False
        return check_password_hash(password_hash, password)

    def burn(self, password: str) -> bool:
        """Run a verification against a throwaway hash and return False.

        Used when the account is unknown so the response takes as long as a
        real password check.
        """
        check_password_hash(self._dummy_hash, password)
        return False
