from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from account_auth.application.ports.account_repository_port import AccountRecord
from account_auth.application.ports.token_issuer_port import TokenExpiredError
from account_auth.application.ports.token_pair_repository_port import TokenPairRecord
from account_auth.infrastructure.http.auth_guard import (
    BearerTokenGuard,
    InvalidAuthTokenError,
    MissingAuthTokenError,
    extract_bearer_token,
)
from account_auth.infrastructure.security.jwt_token_issuer import JwtTokenIssuer

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
SECRET = "guard-test-secret-key-0123456789abcdef"


class FakeAccountRepository:
    def __init__(self, account: AccountRecord) -> None:
        self.account: AccountRecord | None = account

    async def get_by_id(self, *, account_id: UUID) -> AccountRecord | None:
        if self.account is None or self.account.account_id != account_id:
            return None
        return self.account


class FakeTokenPairRepository:
    def __init__(self) -> None:
        self.pairs: list[TokenPairRecord] = []

    async def get_by_access_token(self, *, access_token: str) -> TokenPairRecord | None:
        for pair in self.pairs:
            if pair.access_token == access_token:
                return pair
        return None


class MutableClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _account() -> AccountRecord:
    return AccountRecord(
        account_id=uuid4(),
        email="owner@example.com",
        name="Owner",
        password_hash="SHA-256$1$0$$digest",
        is_active=True,
        created_at=NOW,
        updated_at=NOW,
    )


def _setup() -> tuple[
    BearerTokenGuard,
    FakeAccountRepository,
    FakeTokenPairRepository,
    str,
    MutableClock,
]:
    clock = MutableClock(NOW)
    issuer = JwtTokenIssuer(
        secret_key=SECRET,
        access_ttl_seconds=60,
        refresh_ttl_seconds=3600,
        now=clock,
    )
    account = _account()
    accounts = FakeAccountRepository(account)
    token_pairs = FakeTokenPairRepository()
    issued = issuer.issue_pair(subject_id=str(account.account_id))
    token_pairs.pairs.append(
        TokenPairRecord(
            pair_id=uuid4(),
            account_id=account.account_id,
            access_token=issued.access_token,
            access_expires_at=issued.access_expires_at,
            refresh_token=issued.refresh_token,
            refresh_expires_at=issued.refresh_expires_at,
            created_at=NOW,
        )
    )
    guard = BearerTokenGuard(token_issuer=issuer, token_pairs=token_pairs, accounts=accounts)
    return guard, accounts, token_pairs, issued.access_token, clock


def test_extract_bearer_token_accepts_case_insensitive_scheme() -> None:
    assert extract_bearer_token("bearer abc.def.ghi") == "abc.def.ghi"
    assert extract_bearer_token("  Bearer token  ") == "token"


@pytest.mark.parametrize("header", [None, "", "   "])
def test_extract_bearer_token_rejects_missing_header(header: str | None) -> None:
    with pytest.raises(MissingAuthTokenError):
        extract_bearer_token(header)


@pytest.mark.parametrize("header", ["Basic abc", "Bearer", "Bearer a b", "token"])
def test_extract_bearer_token_rejects_malformed_header(header: str) -> None:
    with pytest.raises(InvalidAuthTokenError):
        extract_bearer_token(header)


@pytest.mark.asyncio
async def test_guard_returns_active_account_for_stored_access_token() -> None:
    guard, accounts, _, access_token, _ = _setup()

    account = await guard.require_active_account(authorization_header=f"Bearer {access_token}")

    assert account == accounts.account


@pytest.mark.asyncio
async def test_guard_rejects_revoked_token() -> None:
    guard, _, token_pairs, access_token, _ = _setup()
    token_pairs.pairs.clear()

    with pytest.raises(InvalidAuthTokenError):
        await guard.require_active_account(authorization_header=f"Bearer {access_token}")


@pytest.mark.asyncio
async def test_guard_rejects_forged_token() -> None:
    guard, _, _, access_token, _ = _setup()
    header, payload, signature = access_token.split(".")
    forged = ".".join([header, payload, signature[::-1]])

    with pytest.raises(InvalidAuthTokenError):
        await guard.require_active_account(authorization_header=f"Bearer {forged}")


@pytest.mark.asyncio
async def test_guard_rejects_inactive_or_missing_account() -> None:
    guard, accounts, _, access_token, _ = _setup()
    assert accounts.account is not None
    accounts.account = replace(accounts.account, is_active=False)

    with pytest.raises(InvalidAuthTokenError):
        await guard.require_active_account(authorization_header=f"Bearer {access_token}")

    accounts.account = None
    with pytest.raises(InvalidAuthTokenError):
        await guard.require_active_account(authorization_header=f"Bearer {access_token}")


@pytest.mark.asyncio
async def test_guard_propagates_expired_access_token() -> None:
    guard, _, _, access_token, clock = _setup()
    clock.now = NOW + timedelta(seconds=60)

    with pytest.raises(TokenExpiredError):
        await guard.require_active_account(authorization_header=f"Bearer {access_token}")
