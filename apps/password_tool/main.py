"""password tool entrypoint and auth runtime composition root."""

from __future__ import annotations

import getpass
import logging
import sys
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from account_auth.application.ports.salt_generator_port import SaltGeneratorPort
from account_auth.application.services.account_service import AccountService
from account_auth.application.services.auth_service import AuthService
from account_auth.application.services.session_service import SessionService
from account_auth.config.settings import Settings, load_settings
from account_auth.domain.auth.credentials import InvalidPasswordError, RawPassword
from account_auth.infrastructure.db.account_repository import SqlAlchemyAccountRepository
from account_auth.infrastructure.db.session import create_session_factory
from account_auth.infrastructure.db.token_pair_repository import SqlAlchemyTokenPairRepository
from account_auth.infrastructure.http.auth_guard import BearerTokenGuard
from account_auth.infrastructure.logging import configure_logging
from account_auth.infrastructure.security.jwt_token_issuer import JwtTokenIssuer
from account_auth.infrastructure.security.password_hasher import DigestPasswordHasher
from account_auth.infrastructure.security.salt_generator import SecretsSaltGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthRuntime:
    """Wired authentication services sharing one settings snapshot."""

    password_hasher: DigestPasswordHasher
    token_issuer: JwtTokenIssuer
    auth_service: AuthService
    session_service: SessionService
    account_service: AccountService
    bearer_guard: BearerTokenGuard


def build_password_hasher(
    settings: Settings,
    *,
    salt_generator: SaltGeneratorPort | None = None,
) -> DigestPasswordHasher:
    """Build the password hasher from configured algorithm, rounds, salt, and pepper."""

    return DigestPasswordHasher(
        algorithm=settings.password_hash_func,
        rounds=settings.password_hash_round,
        salt_length=settings.password_salt_len,
        pepper=settings.password_pepper,
        salt_generator=salt_generator or SecretsSaltGenerator(),
    )


def build_auth_runtime(
    *,
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AuthRuntime:
    """Wire repositories, hasher, issuer, and use cases for one process."""

    factory = session_factory or create_session_factory(settings.database_url)
    accounts = SqlAlchemyAccountRepository(factory)
    token_pairs = SqlAlchemyTokenPairRepository(factory)
    password_hasher = build_password_hasher(settings)
    token_issuer = JwtTokenIssuer(
        secret_key=settings.jwt_token_secret_key,
        access_ttl_seconds=settings.access_token_seconds,
        refresh_ttl_seconds=settings.refresh_token_seconds,
    )
    auth_service = AuthService(accounts=accounts, password_hasher=password_hasher)
    return AuthRuntime(
        password_hasher=password_hasher,
        token_issuer=token_issuer,
        auth_service=auth_service,
        session_service=SessionService(
            accounts=accounts,
            token_pairs=token_pairs,
            auth_service=auth_service,
            token_issuer=token_issuer,
        ),
        account_service=AccountService(accounts=accounts, password_hasher=password_hasher),
        bearer_guard=BearerTokenGuard(
            token_issuer=token_issuer,
            token_pairs=token_pairs,
            accounts=accounts,
        ),
    )


def main() -> None:
    """Prompt for a password and print its stored record for account seeding."""

    settings = load_settings()
    configure_logging(level=settings.log_level)
    logger.info(
        "password_tool_starting algorithm=%s rounds=%s salt_length=%s",
        settings.password_hash_func.value,
        settings.password_hash_round,
        settings.password_salt_len,
    )

    try:
        raw_password = RawPassword.parse(getpass.getpass("Password: "))
    except InvalidPasswordError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    print(build_password_hasher(settings).hash_password(raw_password.value))


if __name__ == "__main__":
    main()
