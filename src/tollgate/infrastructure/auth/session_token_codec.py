"""Session token codec.

Issues and verifies HS256-signed JWTs carrying the account ID. The codec
is stateless; revocation is layered on top by the token store's blacklist.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from tollgate.core.clock import Clock, utc_now
from tollgate.domain.exceptions import InvalidTokenError, SessionExpiredError
from tollgate.domain.ports import SessionClaims, TokenCodec

REQUIRED_CLAIMS = ["iss", "sub", "iat", "exp", "jti"]


class SessionTokenCodec(TokenCodec):
    """Signs and verifies session tokens with one shared secret."""

    ALGORITHM = "HS256"
    ISSUER = "tollgate"

    def __init__(self, secret_key: str, clock: Clock = utc_now) -> None:
        """Initialize the codec.

        Args:
            secret_key: Shared HMAC secret.
            clock: Time source for issued-at and expiry checks.
        """
        if not secret_key:
            raise ValueError("Secret key is required")
        self._secret_key = secret_key
        self._clock = clock

    def issue(self, account_id: str, ttl: timedelta) -> str:
        """Create a signed session token.

        Args:
            account_id: Subject of the token.
            ttl: Lifetime of the token.

        Returns:
            Encoded JWT.
        """
        now = self._clock().replace(microsecond=0)
        payload = {
            "iss": self.ISSUER,
            "sub": account_id,
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify(self, token: str, verify_expiry: bool = True) -> SessionClaims:
        """Verify a token's signature and structure, then its expiry.

        Args:
            token: Encoded JWT.
            verify_expiry: Set False to accept expired tokens (used by logout).

        Returns:
            The typed claims.

        Raises:
            InvalidTokenError: Bad signature, unexpected algorithm, wrong issuer,
                or missing/mistyped claims.
            SessionExpiredError: The token is expired and verify_expiry is True.
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError() from e
        if header.get("alg") != self.ALGORITHM:
            raise InvalidTokenError("Unexpected signing algorithm")

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                options={
                    "require": REQUIRED_CLAIMS,
                    # Expiry and issued-at are checked against the injected clock below
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError() from e

        claims = self._to_claims(payload)
        if verify_expiry and self._clock() >= claims.expires_at:
            raise SessionExpiredError()
        return claims

    @staticmethod
    def _to_claims(payload: dict[str, Any]) -> SessionClaims:
        subject, token_id = payload["sub"], payload["jti"]
        issued_at, expires_at = payload["iat"], payload["exp"]
        if not isinstance(subject, str) or not subject or not isinstance(token_id, str):
            raise InvalidTokenError("Malformed token claims")
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (issued_at, expires_at)):
            raise InvalidTokenError("Malformed token claims")
        return SessionClaims(
            subject=subject,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
            token_id=token_id,
        )
