"""SQLAlchemy adapter for account lookup and password updates."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from account_auth.application.ports.account_repository_port import (
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
)
from account_auth.infrastructure.db.metadata import accounts


class SqlAlchemyAccountRepository(AccountRepositoryPort):
    """Account repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, account_id: UUID) -> AccountRecord | None:
        """Return account by id, including inactive accounts."""

        statement = sa.select(*accounts.c).where(accounts.c.id == account_id).limit(1)
        return await self._fetch_one(statement)

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        """Return account by normalized email, including inactive accounts."""

        statement = sa.select(*accounts.c).where(accounts.c.email == email).limit(1)
        return await self._fetch_one(statement)

    async def create_account(self, payload: AccountCreateInput) -> AccountRecord:
        """Insert one account row and return it."""

        statement = sa.insert(accounts).values(
            id=uuid4(),
            email=payload.email,
            name=payload.name,
            password_hash=payload.password_hash,
            is_active=payload.is_active,
        ).returning(*accounts.c)

        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()

        row = result.mappings().one()
        return _to_account_record(row)

    async def update_password_hash(self, *, account_id: UUID, password_hash: str) -> bool:
        """Replace stored password record text for one account."""

        statement = (
            sa.update(accounts)
            .where(accounts.c.id == account_id)
            .values(password_hash=password_hash, updated_at=sa.text("CURRENT_TIMESTAMP"))
        )
        async with self._session_factory() as session:
            result = cast(CursorResult[Any], await session.execute(statement))
            await session.commit()

        return int(result.rowcount or 0) > 0

    async def _fetch_one(self, statement: sa.Select[Any]) -> AccountRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_account_record(row)


def _to_account_record(row: sa.RowMapping) -> AccountRecord:
    raw_account_id = row["id"]
    account_id = (
        raw_account_id if isinstance(raw_account_id, UUID) else UUID(str(raw_account_id))
    )
    return AccountRecord(
        account_id=account_id,
        email=cast(str, row["email"]),
        name=cast(str, row["name"]),
        password_hash=cast(str, row["password_hash"]),
        is_active=bool(row["is_active"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
