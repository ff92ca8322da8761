"""SQLAlchemy adapter for issued token pair persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from account_auth.application.ports.token_pair_repository_port import (
    TokenPairCreateInput,
    TokenPairRecord,
    TokenPairRepositoryPort,
)
from account_auth.infrastructure.db.metadata import token_pairs


class SqlAlchemyTokenPairRepository(TokenPairRepositoryPort):
    """Token pair repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert_pair(self, payload: TokenPairCreateInput) -> TokenPairRecord:
        """Persist one token pair row and return it."""

        async with self._session_factory() as session:
            result = await session.execute(_insert_statement(payload))
            await session.commit()

        row = result.mappings().one()
        return _to_token_pair_record(row)

    async def replace_for_account(self, payload: TokenPairCreateInput) -> TokenPairRecord:
        """Delete existing pairs of the account and insert one, in one transaction."""

        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    sa.delete(token_pairs).where(token_pairs.c.account_id == payload.account_id)
                )
                result = await session.execute(_insert_statement(payload))
                row = result.mappings().one()

        return _to_token_pair_record(row)

    async def get_by_id(self, *, pair_id: UUID) -> TokenPairRecord | None:
        statement = sa.select(*token_pairs.c).where(token_pairs.c.id == pair_id).limit(1)
        return await self._fetch_one(statement)

    async def get_by_access_token(self, *, access_token: str) -> TokenPairRecord | None:
        statement = (
            sa.select(*token_pairs.c)
            .where(token_pairs.c.access_token == access_token)
            .limit(1)
        )
        return await self._fetch_one(statement)

    async def get_by_refresh_token(self, *, refresh_token: str) -> TokenPairRecord | None:
        statement = (
            sa.select(*token_pairs.c)
            .where(token_pairs.c.refresh_token == refresh_token)
            .limit(1)
        )
        return await self._fetch_one(statement)

    async def delete_by_account_id(self, *, account_id: UUID) -> int:
        """Delete all pairs issued to one account; zero when none exist."""

        statement = sa.delete(token_pairs).where(token_pairs.c.account_id == account_id)

        async with self._session_factory() as session:
            result = cast(CursorResult[Any], await session.execute(statement))
            await session.commit()

        return int(result.rowcount or 0)

    async def _fetch_one(self, statement: sa.Select[Any]) -> TokenPairRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_token_pair_record(row)


def _insert_statement(payload: TokenPairCreateInput) -> sa.Insert:
    return sa.insert(token_pairs).values(
        id=uuid4(),
        account_id=payload.account_id,
        access_token=payload.access_token,
        access_expires_at=payload.access_expires_at,
        refresh_token=payload.refresh_token,
        refresh_expires_at=payload.refresh_expires_at,
    ).returning(*token_pairs.c)


def _as_uuid(value: object) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _to_token_pair_record(row: sa.RowMapping) -> TokenPairRecord:
    return TokenPairRecord(
        pair_id=_as_uuid(row["id"]),
        account_id=_as_uuid(row["account_id"]),
        access_token=cast(str, row["access_token"]),
        access_expires_at=cast(datetime, row["access_expires_at"]),
        refresh_token=cast(str, row["refresh_token"]),
        refresh_expires_at=cast(datetime, row["refresh_expires_at"]),
        created_at=cast(datetime, row["created_at"]),
    )
