"""Tests for Google ID token verification and federated login."""

from __future__ import annotations

import time

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt import PyJWKClientError

from models.user import User
from services.errors import InvalidAssertion
from services.federation import FederatedProfile, GoogleIdentityVerifier

CLIENT_ID = "test-client.apps.googleusercontent.com"


class _SigningKey:
    def __init__(self, key):
        self.key = key


class _StubJWKSClient:
    """Stands in for ``PyJWKClient`` and hands back a fixed public key."""

    def __init__(self, public_key, error: Exception | None = None):
        self.public_key = public_key
        self.error = error
        self.calls = 0

    def get_signing_key_from_jwt(self, token):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return _SigningKey(self.public_key)


@pytest.fixture(scope="module")
def private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture()
def verifier(private_key):
    return GoogleIdentityVerifier(
        CLIENT_ID, jwks_client=_StubJWKSClient(private_key.public_key())
    )


def _google_token(private_key, **overrides) -> str:
    now = int(time.time())
    claims = {
        "iss": "https://accounts.google.com",
        "aud": CLIENT_ID,
        "sub": "109876543210",
        "email": "Star@Gazer.com",
        "email_verified": True,
        "name": "Star Gazer",
        "picture": "https://lh3.googleusercontent.com/a/star",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    claims = {key: value for key, value in claims.items() if value is not None}
    return jwt.encode(claims, private_key, algorithm="RS256", headers={"kid": "test"})


def test_verify_extracts_profile(verifier, private_key):
    profile = verifier.verify(_google_token(private_key))

    assert profile == FederatedProfile(
        email="star@gazer.com",
        name="Star Gazer",
        picture_url="https://lh3.googleusercontent.com/a/star",
        federated_id="109876543210",
    )


@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "someone-else.apps.googleusercontent.com"},
        {"iss": "https://evil.example"},
        {"exp": int(time.time()) - 10},
        {"email": None},
        {"email_verified": False},
        {"email_verified": "false"},
        {"email_verified": None},
    ],
)
def test_verify_rejects_bad_claims(verifier, private_key, overrides):
    with pytest.raises(InvalidAssertion):
        verifier.verify(_google_token(private_key, **overrides))


def test_verify_rejects_foreign_signature(verifier):
    other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    with pytest.raises(InvalidAssertion):
        verifier.verify(_google_token(other_key))


def test_verify_rejects_garbage(verifier):
    with pytest.raises(InvalidAssertion):
        verifier.verify("definitely.not.a-jwt")


def test_key_fetch_failure_is_invalid_assertion(private_key):
    verifier = GoogleIdentityVerifier(
        CLIENT_ID,
        jwks_client=_StubJWKSClient(None, error=PyJWKClientError("timed out")),
    )

    with pytest.raises(InvalidAssertion):
        verifier.verify(_google_token(private_key))


def test_missing_client_id_is_invalid_assertion(private_key):
    verifier = GoogleIdentityVerifier(
        None, jwks_client=_StubJWKSClient(private_key.public_key())
    )

    with pytest.raises(InvalidAssertion):
        verifier.verify(_google_token(private_key))


@pytest.fixture()
def google_login(client, auth_service, verifier, private_key):
    auth_service.federation = verifier

    def _post(**overrides):
        return client.post(
            "/api/auth/google", json={"token": _google_token(private_key, **overrides)}
        )

    return _post


def test_google_login_creates_verified_user(google_login, app, auth_service):
    response = google_login()

    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["message"] == "Google login successful"
    assert data["user"]["loginMethod"] == "google"
    assert data["user"]["isVerified"] is True
    assert data["user"]["googleId"] == "109876543210"

    with app.app_context():
        users = User.query.all()
        assert len(users) == 1
        assert users[0].password_hash is None
        assert users[0].avatar == "https://lh3.googleusercontent.com/a/star"
        assert auth_service.tokens.verify(data["token"]) == users[0].id

    again = google_login()
    assert again.status_code == 200
    assert again.get_json()["user"]["id"] == data["user"]["id"]
    with app.app_context():
        assert User.query.count() == 1


def test_google_login_links_existing_email_account(google_login, app, make_user):
    user_id = make_user("star@gazer.com", "secret1", name="Star")

    response = google_login()

    assert response.status_code == 200
    assert response.get_json()["user"]["id"] == user_id
    with app.app_context():
        assert User.query.count() == 1
        user = User.query.get(user_id)
        assert user.google_id == "109876543210"
        assert user.login_method == "google"
        assert user.is_verified is True
        assert user.avatar == "https://lh3.googleusercontent.com/a/star"
        assert user.name == "Star"


def test_google_login_keeps_existing_avatar(google_login, app, make_user):
    user_id = make_user("star@gazer.com", "secret1", avatar="https://cdn.example/me.png")

    assert google_login().status_code == 200

    with app.app_context():
        assert User.query.get(user_id).avatar == "https://cdn.example/me.png"


def test_google_login_with_invalid_token_is_unauthorized(google_login, app):
    response = google_login(aud="another-client")

    assert response.status_code == 401
    assert response.get_json()["success"] is False
    with app.app_context():
        assert User.query.count() == 0


def test_google_login_requires_token(client):
    response = client.post("/api/auth/google", json={})

    assert response.status_code == 400
    assert response.get_json() == {"success": False, "message": "Token missing"}


def test_verify_accepts_string_email_verified(verifier, private_key):
    profile = verifier.verify(_google_token(private_key, email_verified="true"))

    assert profile.email == "star@gazer.com"


def test_google_login_with_unverified_email_does_not_link(google_login, app, make_user):
    user_id = make_user("star@gazer.com", "secret1")

    response = google_login(email_verified=False, sub="someone-else")

    assert response.status_code == 401
    assert "token" not in response.get_json()
    with app.app_context():
        user = User.query.get(user_id)
        assert user.google_id is None
        assert user.login_method == "email"
        assert user.is_verified is False


def test_google_login_recovers_from_concurrent_signup(
    google_login, app, auth_service, make_user, monkeypatch
):
    """When another sign-in inserts the same email first, the login still succeeds."""

    user_id = make_user(
        "star@gazer.com",
        None,
        login_method="google",
        google_id="109876543210",
        is_verified=True,
    )
    store = auth_service.store
    real_get_by_email = store.get_by_email
    calls = []

    def _lookup_misses_once(email):
        calls.append(email)
        if len(calls) == 1:
            return None
        return real_get_by_email(email)

    monkeypatch.setattr(store, "get_by_federated_id", lambda federated_id: None)
    monkeypatch.setattr(store, "get_by_email", _lookup_misses_once)

    response = google_login()

    assert response.status_code == 200
    assert response.get_json()["user"]["id"] == user_id
    with app.app_context():
        assert User.query.count() == 1
