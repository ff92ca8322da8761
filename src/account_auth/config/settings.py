"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from account_auth.domain.auth.hash_algorithm import HashAlgorithm
from account_auth.domain.auth.password_record import MAX_ROUNDS

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
HashRounds = Annotated[int, Field(gt=0, le=MAX_ROUNDS)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    password_hash_func: HashAlgorithm = Field(validation_alias="PASSWORD_HASH_FUNC")
    password_hash_round: HashRounds = Field(validation_alias="PASSWORD_HASH_ROUND")
    password_salt_len: PositiveInt = Field(validation_alias="PASSWORD_SALT_LEN")
    password_pepper: NonEmptyStr = Field(validation_alias="PASSWORD_PEPPER")
    jwt_token_secret_key: NonEmptyStr = Field(validation_alias="JWT_TOKEN_SECRET_KEY")
    access_token_seconds: PositiveInt = Field(validation_alias="ACCESS_TOKEN_SECONDS")
    refresh_token_seconds: PositiveInt = Field(validation_alias="REFRESH_TOKEN_SECONDS")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
