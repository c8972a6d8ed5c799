"""Password reset tickets."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable

from models.user import User, utcnow

from .credential_store import CredentialStore
from .errors import InvalidOrExpired

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32
RESET_TOKEN_TTL = timedelta(minutes=15)


class ResetTokenManager:
    """Create, expire and consume single-use password reset secrets."""

    def __init__(
        self,
        store: CredentialStore,
        ttl: timedelta = RESET_TOKEN_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.ttl = ttl
        self.clock = clock

    def create(self, user: User) -> str:
        """Store a fresh secret on ``user`` and return it for out-of-band delivery."""

        secret = secrets.token_hex(RESET_TOKEN_BYTES)
        expires_at = self.clock() + self.ttl
        self.store.set_reset_ticket(user.id, secret, expires_at)
        logger.info("Reset ticket issued for user %s, expires %s", user.id, expires_at.isoformat())
        return secret

    def consume(self, secret: str, new_password_hash: str) -> None:
        if not secret or not self.store.consume_reset_ticket(
            secret, new_password_hash, self.clock()
        ):
            raise InvalidOrExpired()
