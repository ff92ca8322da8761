"""Port for issued access/refresh token pair persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class TokenPairCreateInput:
    """Input payload for inserting one issued token pair."""

    account_id: UUID
    access_token: str
    access_expires_at: datetime
    refresh_token: str
    refresh_expires_at: datetime


@dataclass(frozen=True)
class TokenPairRecord:
    """Persisted token pair model."""

    pair_id: UUID
    account_id: UUID
    access_token: str
    access_expires_at: datetime
    refresh_token: str
    refresh_expires_at: datetime
    created_at: datetime


class TokenPairRepositoryPort(Protocol):
    """Token pair persistence contract."""

    async def insert_pair(self, payload: TokenPairCreateInput) -> TokenPairRecord:
        """Persist one token pair and return the inserted row."""

    async def get_by_id(self, *, pair_id: UUID) -> TokenPairRecord | None:
        """Return token pair by id."""

    async def get_by_access_token(self, *, access_token: str) -> TokenPairRecord | None:
        """Return token pair holding this access token."""

    async def get_by_refresh_token(self, *, refresh_token: str) -> TokenPairRecord | None:
        """Return token pair holding this refresh token."""

    async def replace_for_account(self, payload: TokenPairCreateInput) -> TokenPairRecord:
        """Atomically delete the account's pairs and insert this one."""

    async def delete_by_account_id(self, *, account_id: UUID) -> int:
        """Delete every pair issued to one account and return affected count."""
