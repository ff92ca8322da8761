"""HS256 JWT access/refresh token issuer backed by PyJWT."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from account_auth.application.ports.token_issuer_port import (
    InvalidSignatureError,
    IssuedTokenPair,
    MalformedClaimsError,
    SigningError,
    TokenClaims,
    TokenExpiredError,
    TokenIssuerPort,
)

NowCallable = Callable[[], datetime]
logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class JwtTokenIssuer(TokenIssuerPort):
    """Mint and verify compact HS256 tokens carrying `sub` and `exp` claims."""

    def __init__(
        self,
        *,
        secret_key: str,
        access_ttl_seconds: int,
        refresh_ttl_seconds: int,
        now: NowCallable = _utc_now,
    ) -> None:
        self._secret_key = secret_key
        self._access_ttl = timedelta(seconds=access_ttl_seconds)
        self._refresh_ttl = timedelta(seconds=refresh_ttl_seconds)
        self._now = now
        self._jws = jwt.PyJWS(algorithms=[_ALGORITHM])

    def issue_pair(self, *, subject_id: str) -> IssuedTokenPair:
        """Mint independently signed access and refresh tokens for one subject."""

        now = self._now().replace(microsecond=0)
        access_expires_at = now + self._access_ttl
        refresh_expires_at = now + self._refresh_ttl
        return IssuedTokenPair(
            subject_id=subject_id,
            access_token=self._sign(subject_id=subject_id, expires_at=access_expires_at),
            access_expires_at=access_expires_at,
            refresh_token=self._sign(subject_id=subject_id, expires_at=refresh_expires_at),
            refresh_expires_at=refresh_expires_at,
        )

    def verify_token(self, token: str) -> TokenClaims:
        """Verify signature, claim shape, and strict expiry of one token."""

        try:
            raw_payload = self._jws.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except jwt.PyJWTError as exc:
            raise InvalidSignatureError("token signature verification failed") from exc

        claims = _parse_claims(raw_payload)
        if claims.expires_at <= int(self._now().timestamp()):
            raise TokenExpiredError("token has expired")
        return claims

    def _sign(self, *, subject_id: str, expires_at: datetime) -> str:
        payload = {"sub": subject_id, "exp": int(expires_at.timestamp())}
        try:
            return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.error("token_signing_failed error_type=%s", type(exc).__name__)
            raise SigningError("failed to sign token") from exc


def _parse_claims(raw_payload: bytes) -> TokenClaims:
    try:
        payload: Any = json.loads(raw_payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedClaimsError("token payload is not JSON") from exc

    if not isinstance(payload, dict):
        raise MalformedClaimsError("token payload is not a claim set")
    subject_id = payload.get("sub")
    expires_at = payload.get("exp")
    if not isinstance(subject_id, str) or not subject_id:
        raise MalformedClaimsError("token `sub` claim must be a non-empty string")
    if isinstance(expires_at, bool) or not isinstance(expires_at, int):
        raise MalformedClaimsError("token `exp` claim must be an integer")
    return TokenClaims(subject_id=subject_id, expires_at=expires_at)
