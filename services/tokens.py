"""Session token issuance backed by Flask-JWT-Extended."""

from __future__ import annotations

from datetime import timedelta

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError


class TokenIssuer:
    """Mint and check stateless signed session tokens.

    The signing key and algorithm come from the Flask config consumed by
    ``JWTManager``; both calls need an application context.
    """

    def __init__(self, expires: timedelta) -> None:
        self.expires = expires

    def issue(self, user_id: int) -> str:
        return create_access_token(identity=str(user_id), expires_delta=self.expires)

    def verify(self, token: str) -> int | None:
        """Return the user id encoded in ``token`` or ``None`` when it is invalid."""

        try:
            claims = decode_token(token)
        except (PyJWTError, JWTExtendedException):
            return None
        try:
            return int(claims["sub"])
        except (KeyError, TypeError, ValueError):
            return None
