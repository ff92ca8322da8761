"""Bearer JWT parsing and active-account guard for protected endpoints."""

from __future__ import annotations

from uuid import UUID

from account_auth.application.ports.account_repository_port import (
    AccountRecord,
    AccountRepositoryPort,
)
from account_auth.application.ports.token_issuer_port import (
    InvalidSignatureError,
    MalformedClaimsError,
    TokenIssuerPort,
)
from account_auth.application.ports.token_pair_repository_port import TokenPairRepositoryPort


class MissingAuthTokenError(PermissionError):
    """Raised when a bearer token is required but not provided."""


class InvalidAuthTokenError(PermissionError):
    """Raised when bearer token header, signature, or persisted pair is invalid."""


def extract_bearer_token(authorization_header: str | None) -> str:
    """Extract the JWT from a standard `Authorization: Bearer <token>` header."""

    if authorization_header is None or not authorization_header.strip():
        raise MissingAuthTokenError("missing bearer token")

    parts = authorization_header.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise InvalidAuthTokenError("invalid bearer token header")

    return parts[1]


class BearerTokenGuard:
    """Resolve the active account behind an issued access token.

    `TokenExpiredError` propagates unchanged so callers can ask for a refresh.
    """

    def __init__(
        self,
        *,
        token_issuer: TokenIssuerPort,
        token_pairs: TokenPairRepositoryPort,
        accounts: AccountRepositoryPort,
    ) -> None:
        self._token_issuer = token_issuer
        self._token_pairs = token_pairs
        self._accounts = accounts

    async def require_active_account(self, *, authorization_header: str | None) -> AccountRecord:
        """Verify bearer access token and return its active, persisted account."""

        token = extract_bearer_token(authorization_header)
        try:
            claims = self._token_issuer.verify_token(token)
        except (InvalidSignatureError, MalformedClaimsError) as exc:
            raise InvalidAuthTokenError("invalid auth token") from exc

        stored = await self._token_pairs.get_by_access_token(access_token=token)
        if stored is None or str(stored.account_id) != claims.subject_id:
            raise InvalidAuthTokenError("invalid or revoked auth token")

        account = await self._accounts.get_by_id(account_id=UUID(claims.subject_id))
        if account is None or not account.is_active:
            raise InvalidAuthTokenError("invalid or revoked auth token")

        return account
