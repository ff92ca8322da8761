from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.config import Config

from account_auth.application.services.account_service import WrongPasswordError
from account_auth.application.services.internal_errors import AuthInternalError
from account_auth.application.services.session_service import InvalidCredentialsError
from account_auth.config.settings import Settings
from account_auth.domain.auth.password_record import decode_password_record
from account_auth.infrastructure.http.auth_guard import InvalidAuthTokenError
from alembic import command
from apps.password_tool.main import AuthRuntime, build_auth_runtime


def _runtime(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AuthRuntime:
    db_path = tmp_path / "login_flow.db"
    alembic_config = Config("alembic.ini")
    alembic_config.set_main_option("sqlalchemy.url", f"sqlite+pysqlite:///{db_path}")
    command.upgrade(alembic_config, "head")

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("PASSWORD_HASH_FUNC", "SHA-256")
    monkeypatch.setenv("PASSWORD_HASH_ROUND", "10")
    monkeypatch.setenv("PASSWORD_SALT_LEN", "8")
    monkeypatch.setenv("PASSWORD_PEPPER", "pepper123")
    monkeypatch.setenv("JWT_TOKEN_SECRET_KEY", "login-flow-secret-key-0123456789abcdef")
    monkeypatch.setenv("ACCESS_TOKEN_SECONDS", "300")
    monkeypatch.setenv("REFRESH_TOKEN_SECONDS", "3600")
    return build_auth_runtime(settings=Settings(_env_file=None))


@pytest.mark.asyncio
async def test_register_login_guard_refresh_and_revoke(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    runtime = _runtime(tmp_path, monkeypatch)
    account = await runtime.account_service.register_account(
        email="owner@example.com",
        name="Owner",
        password="Passw0rd!",
    )
    record = decode_password_record(account.password_hash)
    assert (record.rounds, record.salt_length, len(record.digest)) == (10, 8, 64)

    pair = await runtime.session_service.obtain_tokens(
        email="Owner@Example.com",
        password="Passw0rd!",
    )
    assert pair.account_id == account.account_id

    guarded = await runtime.bearer_guard.require_active_account(
        authorization_header=f"Bearer {pair.access_token}"
    )
    assert guarded.account_id == account.account_id

    refreshed = await runtime.session_service.refresh_tokens(refresh_token=pair.refresh_token)
    assert refreshed.account_id == account.account_id
    guarded = await runtime.bearer_guard.require_active_account(
        authorization_header=f"Bearer {refreshed.access_token}"
    )
    assert guarded.account_id == account.account_id

    assert await runtime.session_service.revoke_tokens(account_id=account.account_id) == 1
    with pytest.raises(InvalidAuthTokenError):
        await runtime.bearer_guard.require_active_account(
            authorization_header=f"Bearer {refreshed.access_token}"
        )
    with pytest.raises(InvalidCredentialsError):
        await runtime.session_service.refresh_tokens(refresh_token=refreshed.refresh_token)


@pytest.mark.asyncio
async def test_login_rejects_wrong_password_and_unknown_email_alike(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    runtime = _runtime(tmp_path, monkeypatch)
    await runtime.account_service.register_account(
        email="owner@example.com",
        name="Owner",
        password="Passw0rd!",
    )

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await runtime.session_service.obtain_tokens(
            email="owner@example.com",
            password="Wr0ng-pass",
        )
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        await runtime.session_service.obtain_tokens(
            email="nobody@example.com",
            password="Passw0rd!",
        )

    assert str(wrong_password.value) == str(unknown_email.value)


@pytest.mark.asyncio
async def test_change_password_then_login_with_new_password(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    runtime = _runtime(tmp_path, monkeypatch)
    account = await runtime.account_service.register_account(
        email="owner@example.com",
        name="Owner",
        password="Passw0rd!",
    )

    with pytest.raises(WrongPasswordError):
        await runtime.account_service.change_password(
            account_id=account.account_id,
            old_password="Wr0ng-pass",
            new_password="N3w-Passw0rd",
        )
    await runtime.account_service.change_password(
        account_id=account.account_id,
        old_password="Passw0rd!",
        new_password="N3w-Passw0rd",
    )

    with pytest.raises(InvalidCredentialsError):
        await runtime.session_service.obtain_tokens(
            email="owner@example.com",
            password="Passw0rd!",
        )
    pair = await runtime.session_service.obtain_tokens(
        email="owner@example.com",
        password="N3w-Passw0rd",
    )
    assert pair.account_id == account.account_id


@pytest.mark.asyncio
async def test_rotated_pepper_rejects_existing_records(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    runtime = _runtime(tmp_path, monkeypatch)
    account = await runtime.account_service.register_account(
        email="owner@example.com",
        name="Owner",
        password="Passw0rd!",
    )
    monkeypatch.setenv("PASSWORD_PEPPER", "rotated-pepper")
    rotated = build_auth_runtime(settings=Settings(_env_file=None))

    with pytest.raises(InvalidCredentialsError):
        await rotated.session_service.obtain_tokens(
            email=account.email,
            password="Passw0rd!",
        )


@pytest.mark.asyncio
async def test_corrupted_stored_record_surfaces_as_internal_error(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    runtime = _runtime(tmp_path, monkeypatch)
    account = await runtime.account_service.register_account(
        email="owner@example.com",
        name="Owner",
        password="Passw0rd!",
    )
    engine = sa.create_engine(f"sqlite+pysqlite:///{tmp_path / 'login_flow.db'}")
    with engine.begin() as connection:
        connection.execute(
            sa.text("UPDATE accounts SET password_hash = :value"),
            {"value": account.password_hash.replace("SHA-256", "SHA-999", 1)},
        )

    with pytest.raises(AuthInternalError) as exc_info:
        await runtime.session_service.obtain_tokens(
            email="owner@example.com",
            password="Passw0rd!",
        )

    assert str(exc_info.value) == "internal authentication error"
