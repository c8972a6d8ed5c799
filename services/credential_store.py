"""Persistence for user credentials.

Mutations are issued as explicit UPDATE statements against the ``users``
table instead of loading and re-saving whole rows, so that, for example, a
reset ticket is consumed and the password replaced by a single statement.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from models import db
from models.user import User, normalize_email, utcnow

from .errors import DuplicateEmail, UserNotFound

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "phone", "avatar")


class CredentialStore:
    """Thin repository over the ``users`` table."""

    def __init__(self, session=None) -> None:
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    # Queries

    def get_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        return self.session.execute(
            select(User).where(User.email == normalize_email(email))
        ).scalar_one_or_none()

    def get_by_federated_id(self, federated_id: str) -> User | None:
        return self.session.execute(
            select(User).where(User.google_id == federated_id)
        ).scalar_one_or_none()

    def count(self) -> int:
        return self.session.query(User).count()

    # Commands

    def create_user(self, **fields) -> User:
        """Insert a user; a clash on the unique email index raises :class:`DuplicateEmail`."""

        user = User(**fields)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if self.get_by_email(fields.get("email", "")) is not None:
                raise DuplicateEmail() from exc
            raise
        return user

    def _update(self, *criteria, **values) -> int:
        values.setdefault("updated_at", utcnow())
        result = self.session.execute(
            update(User)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount

    def link_federated_identity(
        self, user_id: int, federated_id: str, avatar: str | None = None
    ) -> bool:
        """Attach a Google id to an account that has none yet.

        Returns False when the row already carries a federated id, which
        keeps linking one-directional under concurrent logins.
        """

        values = {
            "google_id": federated_id,
            "login_method": "google",
            "is_verified": True,
        }
        if avatar is not None:
            values["avatar"] = avatar
        return self._update(User.id == user_id, User.google_id.is_(None), **values) == 1

    def update_password(self, user_id: int, password_hash: str) -> None:
        """Replace the password hash and drop any outstanding reset ticket."""

        updated = self._update(
            User.id == user_id,
            password_hash=password_hash,
            reset_password_token=None,
            reset_password_expires=None,
        )
        if updated != 1:
            raise UserNotFound()

    def set_reset_ticket(self, user_id: int, secret: str, expires_at: datetime) -> None:
        updated = self._update(
            User.id == user_id,
            reset_password_token=secret,
            reset_password_expires=expires_at,
        )
        if updated != 1:
            raise UserNotFound()

    def consume_reset_ticket(self, secret: str, password_hash: str, now: datetime) -> bool:
        """Set a new password for the holder of an unexpired ticket and clear it.

        Returns False when no row holds ``secret`` with an expiry after ``now``.
        """

        updated = self._update(
            User.reset_password_token == secret,
            User.reset_password_expires > now,
            password_hash=password_hash,
            reset_password_token=None,
            reset_password_expires=None,
        )
        return updated == 1

    def update_profile(self, user_id: int, **fields) -> None:
        values = {key: value for key, value in fields.items() if key in PROFILE_FIELDS}
        if not values:
            return
        if self._update(User.id == user_id, **values) != 1:
            raise UserNotFound()
