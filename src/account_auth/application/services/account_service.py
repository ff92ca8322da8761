"""Account use cases that create or replace stored password records."""

from __future__ import annotations

import logging
from uuid import UUID

from account_auth.application.ports.account_repository_port import (
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
)
from account_auth.application.ports.password_hasher_port import PasswordHasherPort
from account_auth.application.services.internal_errors import internal_failure
from account_auth.domain.auth.credentials import (
    InvalidPasswordError,
    RawPassword,
    normalize_account_name,
    normalize_email,
)

logger = logging.getLogger(__name__)


class AccountAlreadyExistsError(ValueError):
    """Raised when registering an email that already has an account."""

    def __init__(self, *, email: str) -> None:
        super().__init__(f"account already exists: {email}")
        self.email = email


class AccountNotFoundError(LookupError):
    """Raised when a target account cannot be found."""

    def __init__(self, *, account_id: UUID) -> None:
        super().__init__(f"account not found: {account_id}")
        self.account_id = account_id


class InvalidOldPasswordError(InvalidPasswordError):
    """Raised when the current password fails the password policy."""


class InvalidNewPasswordError(InvalidPasswordError):
    """Raised when the replacement password fails the password policy."""


class WrongPasswordError(PermissionError):
    """Raised when the current password does not match the stored record."""

    def __init__(self) -> None:
        super().__init__("current password is incorrect")


class AccountService:
    """Register accounts and change their passwords."""

    def __init__(
        self,
        *,
        accounts: AccountRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher

    async def register_account(self, *, email: str, name: str, password: str) -> AccountRecord:
        """Validate inputs, hash the password, and create one active account."""

        normalized_email = normalize_email(email=email)
        normalized_name = normalize_account_name(name=name)
        raw_password = RawPassword.parse(password)

        with internal_failure("lookup_account_email"):
            existing = await self._accounts.get_by_email(email=normalized_email)
        if existing is not None:
            raise AccountAlreadyExistsError(email=normalized_email)

        password_hash = self._password_hasher.hash_password(raw_password.value)
        with internal_failure("create_account"):
            account = await self._accounts.create_account(
                AccountCreateInput(
                    email=normalized_email,
                    name=normalized_name,
                    password_hash=password_hash,
                )
            )

        logger.info("account_registered account_id=%s", account.account_id)
        return account

    async def change_password(
        self,
        *,
        account_id: UUID,
        old_password: str,
        new_password: str,
    ) -> None:
        """Replace the stored record after verifying the current password."""

        try:
            old_raw = RawPassword.parse(old_password)
        except InvalidPasswordError as exc:
            raise InvalidOldPasswordError(f"old password is invalid: {exc}") from exc
        try:
            new_raw = RawPassword.parse(new_password)
        except InvalidPasswordError as exc:
            raise InvalidNewPasswordError(f"new password is invalid: {exc}") from exc

        with internal_failure("lookup_account"):
            account = await self._accounts.get_by_id(account_id=account_id)
        if account is None:
            raise AccountNotFoundError(account_id=account_id)

        with internal_failure("verify_current_password"):
            matches = self._password_hasher.verify_password(
                password=old_raw.value,
                password_hash=account.password_hash,
            )
        if not matches:
            raise WrongPasswordError()

        password_hash = self._password_hasher.hash_password(new_raw.value)
        with internal_failure("update_password_hash"):
            updated = await self._accounts.update_password_hash(
                account_id=account_id,
                password_hash=password_hash,
            )
        if not updated:
            raise AccountNotFoundError(account_id=account_id)

        logger.info("password_changed account_id=%s", account_id)
