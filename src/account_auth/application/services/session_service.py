"""Token session use cases: login, refresh, and logout."""

from __future__ import annotations

import logging
from uuid import UUID

from account_auth.application.ports.account_repository_port import AccountRepositoryPort
from account_auth.application.ports.token_issuer_port import IssuedTokenPair, TokenIssuerPort
from account_auth.application.ports.token_pair_repository_port import (
    TokenPairCreateInput,
    TokenPairRecord,
    TokenPairRepositoryPort,
)
from account_auth.application.services.auth_service import AuthService
from account_auth.application.services.internal_errors import internal_failure
from account_auth.domain.auth.credentials import RawPassword, normalize_email

logger = logging.getLogger(__name__)


class InvalidCredentialsError(PermissionError):
    """Raised for any failed login or refresh, without saying which factor failed."""

    def __init__(self) -> None:
        super().__init__("email address or password is incorrect")


class SessionService:
    """Issue, rotate, and revoke access/refresh token pairs."""

    def __init__(
        self,
        *,
        accounts: AccountRepositoryPort,
        token_pairs: TokenPairRepositoryPort,
        auth_service: AuthService,
        token_issuer: TokenIssuerPort,
    ) -> None:
        self._accounts = accounts
        self._token_pairs = token_pairs
        self._auth_service = auth_service
        self._token_issuer = token_issuer

    async def obtain_tokens(self, *, email: str, password: str) -> TokenPairRecord:
        """Authenticate credentials, then mint and persist a fresh token pair.

        Email and password policy failures raise before any store is touched.
        """

        normalized_email = normalize_email(email=email)
        raw_password = RawPassword.parse(password)

        with internal_failure("authenticate"):
            account = await self._auth_service.authenticate(
                email=normalized_email,
                password=raw_password.value,
            )
        if account is None:
            raise InvalidCredentialsError()

        pair = self._issue_pair(subject_id=str(account.account_id))
        with internal_failure("insert_token_pair"):
            record = await self._token_pairs.insert_pair(_to_create_input(account.account_id, pair))

        logger.info("tokens_issued account_id=%s pair_id=%s", account.account_id, record.pair_id)
        return record

    async def refresh_tokens(self, *, refresh_token: str) -> TokenPairRecord:
        """Exchange a stored, valid refresh token for a new pair.

        Signature and expiry failures propagate as `TokenError` subclasses so
        callers can prompt re-login on expiry.
        """

        claims = self._token_issuer.verify_token(refresh_token)

        with internal_failure("lookup_refresh_token"):
            stored = await self._token_pairs.get_by_refresh_token(refresh_token=refresh_token)
            account = (
                await self._accounts.get_by_id(account_id=stored.account_id)
                if stored is not None
                else None
            )
        if (
            stored is None
            or account is None
            or not account.is_active
            or str(account.account_id) != claims.subject_id
        ):
            raise InvalidCredentialsError()

        pair = self._issue_pair(subject_id=claims.subject_id)
        with internal_failure("replace_token_pair"):
            record = await self._token_pairs.replace_for_account(
                _to_create_input(account.account_id, pair)
            )

        logger.info("tokens_refreshed account_id=%s pair_id=%s", account.account_id, record.pair_id)
        return record

    async def revoke_tokens(self, *, account_id: UUID) -> int:
        """Delete every stored pair of one account and return the deleted count."""

        with internal_failure("delete_token_pairs"):
            deleted = await self._token_pairs.delete_by_account_id(account_id=account_id)

        logger.info("tokens_revoked account_id=%s count=%s", account_id, deleted)
        return deleted

    def _issue_pair(self, *, subject_id: str) -> IssuedTokenPair:
        with internal_failure("issue_token_pair"):
            return self._token_issuer.issue_pair(subject_id=subject_id)


def _to_create_input(account_id: UUID, pair: IssuedTokenPair) -> TokenPairCreateInput:
    return TokenPairCreateInput(
        account_id=account_id,
        access_token=pair.access_token,
        access_expires_at=pair.access_expires_at,
        refresh_token=pair.refresh_token,
        refresh_expires_at=pair.refresh_expires_at,
    )
