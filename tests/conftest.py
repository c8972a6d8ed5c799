"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from services.passwords import PasswordHasher  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-signing-key-with-enough-length-for-hs256"
    GOOGLE_CLIENT_ID = "test-client.apps.googleusercontent.com"
    MAIL_SUPPRESS_SEND = True
    AUTH_SUPPRESS_ENUMERATION = False
    PASSWORD_RESET_URL = "https://oracle.example/reset-password/{token}"
    CORS_ORIGINS = ["https://client.example"]


@pytest.fixture()
def app(tmp_path) -> Flask:
    """Create a Flask application instance for tests."""

    upload_dir = tmp_path / "uploads"

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def auth_service(app: Flask):
    return app.extensions["auth_service"]


@pytest.fixture()
def make_user(app: Flask):
    """Persist a user directly, bypassing registration."""

    hasher = PasswordHasher()

    def _make_user(
        email: str = "seeker@example.com",
        password: str | None = "secret1",
        *,
        name: str = "Seeker",
        role: str = "user",
        **fields,
    ) -> int:
        with app.app_context():
            user = User(
                name=name,
                email=email,
                role=role,
                password_hash=hasher.hash(password) if password else None,
                **fields,
            )
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user
