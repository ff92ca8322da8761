"""Port and value types for signed access/refresh token issuance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class TokenError(Exception):
    """Base class for token lifecycle failures."""


class SigningError(TokenError):
    """Raised when a token cannot be signed with the configured key."""


class InvalidSignatureError(TokenError):
    """Raised when a token is tampered, undecodable, or signed with another key."""


class MalformedClaimsError(TokenError):
    """Raised when a verified token does not carry the expected claim set."""


class TokenExpiredError(TokenError):
    """Raised when a token expiry is not strictly in the future."""


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by one signed token."""

    subject_id: str
    expires_at: int


@dataclass(frozen=True)
class IssuedTokenPair:
    """Access and refresh tokens minted together for one subject."""

    subject_id: str
    access_token: str
    access_expires_at: datetime
    refresh_token: str
    refresh_expires_at: datetime


class TokenIssuerPort(Protocol):
    """Token issuance/verification contract."""

    def issue_pair(self, *, subject_id: str) -> IssuedTokenPair:
        """Mint a signed access/refresh pair for one subject."""

    def verify_token(self, token: str) -> TokenClaims:
        """Verify signature and expiry and return the token claims."""
