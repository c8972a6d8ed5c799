"""Google identity federation.

Google ID tokens are RS256 JWTs signed with keys published at the provider's
JWKS endpoint. Verification checks the signature, the audience (our OAuth
client id), the issuer and the expiry, then extracts the profile claims used
to find or create the local account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import jwt
from jwt import PyJWKClient, PyJWTError

from .errors import InvalidAssertion

logger = logging.getLogger(__name__)

GOOGLE_CERTS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


@dataclass(frozen=True)
class FederatedProfile:
    """Verified identity extracted from a Google ID token."""

    email: str
    name: str
    picture_url: str
    federated_id: str


class GoogleIdentityVerifier:
    """Verify Google ID tokens against the provider's published keys."""

    def __init__(
        self,
        client_id: str | None,
        *,
        certs_url: str = GOOGLE_CERTS_URL,
        timeout: float = 5,
        jwks_client: PyJWKClient | None = None,
        leeway: int = 0,
    ) -> None:
        self.client_id = client_id
        self.leeway = leeway
        self._jwks_client = jwks_client or PyJWKClient(
            certs_url, cache_keys=True, timeout=timeout
        )

    def verify(self, assertion: str) -> FederatedProfile:
        """Return the verified profile or raise :class:`InvalidAssertion`.

        Fetching the signing keys is a network call; connection failures and
        timeouts are reported as an invalid assertion.
        """

        if not self.client_id:
            logger.error("Google sign-in attempted without GOOGLE_CLIENT_ID configured")
            raise InvalidAssertion("Google sign-in is not configured")

        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(assertion)
            claims = jwt.decode(
                assertion,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.client_id,
                leeway=self.leeway,
                options={"require": ["exp", "iat", "iss", "aud", "sub"]},
            )
        except PyJWTError as exc:
            logger.warning("Google token rejected: %s", exc)
            raise InvalidAssertion() from exc

        if claims.get("iss") not in GOOGLE_ISSUERS:
            logger.warning("Google token rejected: unexpected issuer %r", claims.get("iss"))
            raise InvalidAssertion()

        email = (claims.get("email") or "").strip().lower()
        if not email:
            raise InvalidAssertion("Google account has no email address")

        if claims.get("email_verified") not in (True, "true"):
            logger.warning("Google token rejected: email %s is not verified", email)
            raise InvalidAssertion("Google account email is not verified")

        return FederatedProfile(
            email=email,
            name=claims.get("name") or email.split("@", 1)[0],
            picture_url=claims.get("picture") or "",
            federated_id=str(claims["sub"]),
        )
