"""Application authentication service for credential verification."""

from __future__ import annotations

import logging
from enum import StrEnum

from account_auth.application.ports.account_repository_port import (
    AccountRecord,
    AccountRepositoryPort,
)
from account_auth.application.ports.password_hasher_port import PasswordHasherPort

logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Server-side authentication outcomes, collapsed before reaching callers."""

    SUCCESS = "success"
    UNKNOWN_ACCOUNT = "unknown_account"
    INACTIVE_ACCOUNT = "inactive_account"
    WRONG_PASSWORD = "wrong_password"


class AuthService:
    """Authenticate credentials against the account store.

    Unknown email, inactive account, and wrong password all yield ``None`` so
    callers cannot tell which factor failed. A malformed stored password record
    is data corruption and propagates as `PasswordRecordDecodeError`.
    """

    def __init__(
        self,
        *,
        accounts: AccountRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher

    async def authenticate(self, *, email: str, password: str) -> AccountRecord | None:
        """Return the active account matching the credentials, else None."""

        account = await self._accounts.get_by_email(email=email)
        if account is None:
            self._log_outcome(AuthOutcome.UNKNOWN_ACCOUNT, account=None)
            return None

        if not account.is_active:
            self._log_outcome(AuthOutcome.INACTIVE_ACCOUNT, account=account)
            return None

        is_valid = self._password_hasher.verify_password(
            password=password,
            password_hash=account.password_hash,
        )
        if not is_valid:
            self._log_outcome(AuthOutcome.WRONG_PASSWORD, account=account)
            return None

        self._log_outcome(AuthOutcome.SUCCESS, account=account)
        return account

    def _log_outcome(self, outcome: AuthOutcome, *, account: AccountRecord | None) -> None:
        logger.info(
            "authentication_attempt outcome=%s account_id=%s",
            outcome.value,
            account.account_id if account is not None else None,
        )
