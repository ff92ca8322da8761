"""Port for account lookup and password persistence used by auth services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class AccountCreateInput:
    """Input payload for inserting one account."""

    email: str
    name: str
    password_hash: str
    is_active: bool = True


@dataclass(frozen=True)
class AccountRecord:
    """Account persistence model."""

    account_id: UUID
    email: str
    name: str
    password_hash: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AccountRepositoryPort(Protocol):
    """Account repository contract."""

    async def get_by_id(self, *, account_id: UUID) -> AccountRecord | None:
        """Return account by id, including inactive accounts."""

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        """Return account by normalized email, including inactive accounts."""

    async def create_account(self, payload: AccountCreateInput) -> AccountRecord:
        """Persist one account and return the inserted row."""

    async def update_password_hash(self, *, account_id: UUID, password_hash: str) -> bool:
        """Replace stored password record text; return False when no row matched."""
