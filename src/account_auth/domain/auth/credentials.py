"""Validation helpers for account credential inputs."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass, field

ACCOUNT_NAME_MIN_LENGTH = 2
ACCOUNT_NAME_MAX_LENGTH = 20
RAW_PASSWORD_MIN_LENGTH = 8
RAW_PASSWORD_SYMBOLS = " !\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class InvalidEmailError(ValueError):
    """Raised when an email address is blank or malformed."""


class InvalidPasswordError(ValueError):
    """Raised when a plaintext password does not meet the password policy."""


class InvalidAccountNameError(ValueError):
    """Raised when an account display name is outside the allowed length."""


def normalize_account_name(*, name: str) -> str:
    """Strip one account name and require 2 to 20 characters."""

    normalized = name.strip()
    if not ACCOUNT_NAME_MIN_LENGTH <= len(normalized) <= ACCOUNT_NAME_MAX_LENGTH:
        raise InvalidAccountNameError(
            f"account name must be {ACCOUNT_NAME_MIN_LENGTH} to "
            f"{ACCOUNT_NAME_MAX_LENGTH} characters"
        )
    return normalized


def normalize_email(*, email: str) -> str:
    """Normalize one account email and reject blank or malformed values."""

    normalized = email.strip().lower()
    if not normalized:
        raise InvalidEmailError("email cannot be blank")
    if _EMAIL_PATTERN.fullmatch(normalized) is None:
        raise InvalidEmailError(f"email is malformed: {normalized}")
    return normalized


@dataclass(frozen=True)
class RawPassword:
    """Validated plaintext password; exists only transiently for hashing."""

    value: str = field(repr=False)

    @classmethod
    def parse(cls, value: str) -> RawPassword:
        """Validate one plaintext password against the password policy."""

        if len(value) < RAW_PASSWORD_MIN_LENGTH:
            raise InvalidPasswordError(
                f"password must be at least {RAW_PASSWORD_MIN_LENGTH} characters"
            )
        if not any(ch in string.ascii_lowercase for ch in value):
            raise InvalidPasswordError("password must contain a lowercase letter")
        if not any(ch in string.ascii_uppercase for ch in value):
            raise InvalidPasswordError("password must contain an uppercase letter")
        if not any(ch in string.digits for ch in value):
            raise InvalidPasswordError("password must contain a digit")
        if not any(ch in RAW_PASSWORD_SYMBOLS for ch in value):
            raise InvalidPasswordError("password must contain a symbol")
        return cls(value=value)
