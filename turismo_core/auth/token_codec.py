"""
Bearer token signing and verification.

Tokens are HS256 JWTs with a fixed 24 hour lifetime. Expiry is checked
against an injectable clock rather than PyJWT's own, so a token verified at
exactly `iat + 24h` is expired and one verified a second earlier is not.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from turismo_core.auth.exceptions import TokenExpired, TokenMalformed, TokenSignatureInvalid
from turismo_core.domain.auth import Role, TokenClaims

TOKEN_TTL = timedelta(hours=24)

REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """Issues and verifies signed bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        """Initialize the codec.

        Args:
            secret: Symmetric signing key, loaded once at startup.
            algorithm: JWT signing algorithm.
        """
        if not secret:
            raise ValueError("JWT_SECRET must be configured")
        self.secret = secret
        self.algorithm = algorithm

    @property
    def ttl_seconds(self) -> int:
        return int(TOKEN_TTL.total_seconds())

    def issue(self, claims: TokenClaims, now: datetime | None = None) -> str:
        """Sign a claim set.

        Any issued_at/expires_at on `claims` are ignored: the token is
        stamped with `now` (whole seconds) and expires exactly 24h later.

        Args:
            claims: Identity, role and scoping claims.
            now: Issuance time; defaults to the current UTC time.

        Returns:
            Encoded JWT string.
        """
        issued_at = int((now or utc_now()).timestamp())
        payload: dict[str, Any] = {
            "sub": str(claims.principal_id),
            "role": Role(claims.role).value,
            "identifier": claims.identifier,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        if claims.business_id is not None:
            payload["business_id"] = claims.business_id
        if claims.access_level is not None:
            payload["access_level"] = claims.access_level
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str, now: datetime | None = None) -> TokenClaims:
        """Verify a token and decode its claims.

        Raises:
            TokenSignatureInvalid: The signature does not match the key.
            TokenExpired: `now` is at or past the embedded expiry.
            TokenMalformed: The token or its claims cannot be parsed.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            raise TokenSignatureInvalid(message_debug=str(e), cause=e) from e
        except jwt.InvalidTokenError as e:
            raise TokenMalformed(message_debug=str(e), cause=e) from e

        claims = self._to_claims(payload)
        current = (now or utc_now()).timestamp()
        if current >= claims.expires_at.timestamp():
            raise TokenExpired()
        return claims

    def _to_claims(self, payload: dict[str, Any]) -> TokenClaims:
        try:
            role = Role(payload["role"])
            business_id = payload.get("business_id")
            return TokenClaims(
                principal_id=int(payload["sub"]),
                role=role,
                identifier=str(payload.get("identifier", "")),
                business_id=int(business_id) if business_id is not None else None,
                access_level=payload.get("access_level"),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TokenMalformed(message_debug=str(e), cause=e) from e
