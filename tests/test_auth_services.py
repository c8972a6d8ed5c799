"""Unit tests for the password hasher, token issuer, reset tickets and store."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from models import db
from models.user import User
from services.credential_store import CredentialStore
from services.errors import DuplicateEmail, InvalidOrExpired
from services.passwords import PasswordHasher
from services.reset_tokens import ResetTokenManager
from services.tokens import TokenIssuer


class _Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.mark.parametrize("password", ["secret1", "pässwörd-☾", " leading space"])
def test_hash_verifies_only_the_original_password(password):
    hasher = PasswordHasher()
    digest = hasher.hash(password)

    assert digest != password
    assert hasher.verify(password, digest) is True
    assert hasher.verify(password + "x", digest) is False


def test_hash_is_salted():
    hasher = PasswordHasher()

    assert hasher.hash("secret1") != hasher.hash("secret1")


def test_dummy_hash_is_ready_before_first_login():
    hasher = PasswordHasher()

    assert hasher._dummy_hash.startswith("scrypt:")


def test_verify_without_hash_is_false():
    hasher = PasswordHasher()

    assert hasher.verify("secret1", None) is False
    assert hasher.burn("secret1") is False


def test_token_round_trip_and_rejections(app):
    issuer = TokenIssuer(timedelta(days=7))

    with app.app_context():
        token = issuer.issue(42)
        assert issuer.verify(token) == 42
        assert issuer.verify(token + "tampered") is None
        assert issuer.verify("not-a-token") is None

        expired = TokenIssuer(timedelta(seconds=-30)).issue(42)
        assert issuer.verify(expired) is None


def test_reset_ticket_expires_after_fifteen_minutes(app, make_user):
    user_id = make_user("a@x.com", "secret1")
    clock = _Clock(datetime(2026, 1, 1, 12, 0, 0))
    hasher = PasswordHasher()

    with app.app_context():
        store = CredentialStore()
        resets = ResetTokenManager(store, clock=clock)

        early = resets.create(store.get_by_id(user_id))
        clock.advance(minutes=14)
        resets.consume(early, hasher.hash("fresh-one"))
        assert hasher.verify("fresh-one", store.get_by_id(user_id).password_hash)

        with pytest.raises(InvalidOrExpired):
            resets.consume(early, hasher.hash("second-use"))

        late = resets.create(store.get_by_id(user_id))
        clock.advance(minutes=16)
        with pytest.raises(InvalidOrExpired):
            resets.consume(late, hasher.hash("too-late"))

        user = store.get_by_id(user_id)
        assert hasher.verify("fresh-one", user.password_hash)
        assert user.reset_password_token == late


def test_new_reset_ticket_replaces_previous_one(app, make_user):
    user_id = make_user("a@x.com", "secret1")

    with app.app_context():
        store = CredentialStore()
        resets = ResetTokenManager(store)
        first = resets.create(store.get_by_id(user_id))
        second = resets.create(store.get_by_id(user_id))

        assert first != second
        assert len(second) == 64
        with pytest.raises(InvalidOrExpired):
            resets.consume(first, "hash")
        with pytest.raises(InvalidOrExpired):
            resets.consume("", "hash")


def test_password_change_clears_pending_ticket(app, make_user):
    user_id = make_user("a@x.com", "secret1")

    with app.app_context():
        store = CredentialStore()
        ResetTokenManager(store).create(store.get_by_id(user_id))
        store.update_password(user_id, PasswordHasher().hash("changed1"))

        user = store.get_by_id(user_id)
        assert user.reset_password_token is None
        assert user.reset_password_expires is None


def test_store_maps_unique_violation_to_duplicate_email(app, make_user):
    """A concurrent insert that slips past the lookup is caught by the index."""

    make_user("a@x.com", "secret1")

    with app.app_context():
        store = CredentialStore()
        with pytest.raises(DuplicateEmail):
            store.create_user(name="B", email="A@x.com", password_hash="hash")
        assert store.count() == 1


def test_linking_is_one_directional(app, make_user):
    user_id = make_user("a@x.com", "secret1")

    with app.app_context():
        store = CredentialStore()
        assert store.link_federated_identity(user_id, "google-1") is True
        assert store.link_federated_identity(user_id, "google-2") is False
        assert store.get_by_federated_id("google-1").id == user_id


def test_reset_ticket_fields_must_be_paired(app):
    with app.app_context():
        user = User(
            name="A",
            email="a@x.com",
            password_hash="hash",
            reset_password_token="abc",
        )
        db.session.add(user)
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()
