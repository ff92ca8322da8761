"""Stored password record model and its `$`-delimited text codec.

Record layout: ``<algorithm>$<rounds>$<salt_length>$<salt>$<digest>``.

The salt is length-prefixed and sliced by position, while the digest is the
trailing field and is taken verbatim. Both properties are part of the at-rest
format and must not change.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from account_auth.domain.auth.hash_algorithm import HashAlgorithm

RECORD_DELIMITER = "$"
MAX_ROUNDS = 2**32 - 1


class DecodeErrorKind(StrEnum):
    """Reasons a stored password record cannot be decoded."""

    MISSING_ALGORITHM = "missing_algorithm"
    UNKNOWN_ALGORITHM = "unknown_algorithm"
    MISSING_ROUNDS = "missing_rounds"
    INVALID_ROUNDS = "invalid_rounds"
    MISSING_SALT_LENGTH = "missing_salt_length"
    INVALID_SALT_LENGTH = "invalid_salt_length"
    SALT_TOO_SHORT = "salt_too_short"


class PasswordRecordDecodeError(ValueError):
    """Raised when stored password record text is malformed."""

    def __init__(self, kind: DecodeErrorKind, message: str) -> None:
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind


@dataclass(frozen=True)
class StoredPasswordRecord:
    """Hashed password plus the parameters needed to recompute it."""

    algorithm: HashAlgorithm
    rounds: int
    salt_length: int
    salt: str
    digest: str

    def __post_init__(self) -> None:
        if not 0 <= self.rounds <= MAX_ROUNDS:
            raise ValueError("rounds must fit an unsigned 32-bit integer")
        if self.salt_length < 0:
            raise ValueError("salt_length cannot be negative")
        if len(self.salt) != self.salt_length:
            raise ValueError("salt length does not match salt_length")


def encode_password_record(record: StoredPasswordRecord) -> str:
    """Render one record in its stored text form."""

    return (
        f"{record.algorithm.value}${record.rounds}${record.salt_length}"
        f"${record.salt}${record.digest}"
    )


def decode_password_record(text: str) -> StoredPasswordRecord:
    """Parse stored record text, raising `PasswordRecordDecodeError` on malformed input."""

    algorithm_end = text.find(RECORD_DELIMITER)
    if algorithm_end < 0:
        raise PasswordRecordDecodeError(
            DecodeErrorKind.MISSING_ALGORITHM,
            "record has no algorithm field",
        )
    algorithm_name = text[:algorithm_end]
    try:
        algorithm = HashAlgorithm.from_name(algorithm_name)
    except ValueError as exc:
        raise PasswordRecordDecodeError(
            DecodeErrorKind.UNKNOWN_ALGORITHM,
            f"unsupported algorithm {algorithm_name!r}",
        ) from exc
    start = algorithm_end + 1

    rounds_end = text.find(RECORD_DELIMITER, start)
    if rounds_end < 0:
        raise PasswordRecordDecodeError(
            DecodeErrorKind.MISSING_ROUNDS,
            "record has no rounds field",
        )
    rounds = _parse_unsigned(text[start:rounds_end], upper_bound=MAX_ROUNDS)
    if rounds is None:
        raise PasswordRecordDecodeError(
            DecodeErrorKind.INVALID_ROUNDS,
            "rounds field is not an unsigned 32-bit integer",
        )
    start = rounds_end + 1

    salt_length_end = text.find(RECORD_DELIMITER, start)
    if salt_length_end < 0:
        raise PasswordRecordDecodeError(
            DecodeErrorKind.MISSING_SALT_LENGTH,
            "record has no salt length field",
        )
    salt_length = _parse_unsigned(text[start:salt_length_end])
    if salt_length is None:
        raise PasswordRecordDecodeError(
            DecodeErrorKind.INVALID_SALT_LENGTH,
            "salt length field is not an unsigned integer",
        )
    start = salt_length_end + 1

    if len(text) - start < salt_length:
        raise PasswordRecordDecodeError(
            DecodeErrorKind.SALT_TOO_SHORT,
            f"expected {salt_length} salt characters, found {len(text) - start}",
        )
    salt = text[start : start + salt_length]
    start += salt_length + 1

    # Trailing field; may legitimately contain the delimiter.
    digest = text[start:]

    return StoredPasswordRecord(
        algorithm=algorithm,
        rounds=rounds,
        salt_length=salt_length,
        salt=salt,
        digest=digest,
    )


def _parse_unsigned(raw: str, *, upper_bound: int | None = None) -> int | None:
    """Parse ASCII decimal digits only; return None for anything else."""

    if not raw or not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    if upper_bound is not None and value > upper_bound:
        return None
    return value
