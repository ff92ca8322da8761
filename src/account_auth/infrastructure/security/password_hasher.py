"""Salted, peppered, multi-round digest password hasher adapter."""

from __future__ import annotations

import hmac

from account_auth.application.ports.password_hasher_port import PasswordHasherPort
from account_auth.application.ports.salt_generator_port import SaltGeneratorPort
from account_auth.domain.auth.hash_algorithm import HashAlgorithm
from account_auth.domain.auth.password_record import (
    StoredPasswordRecord,
    decode_password_record,
    encode_password_record,
)


def compute_password_digest(
    raw: str,
    salt: str,
    pepper: str,
    algorithm: HashAlgorithm,
    rounds: int,
) -> str:
    """Digest `raw + salt + pepper` `rounds` times; zero rounds returns the concatenation."""

    hashed = f"{raw}{salt}{pepper}"
    for _ in range(rounds):
        hashed = algorithm.digest_hex(hashed)
    return hashed


class DigestPasswordHasher(PasswordHasherPort):
    """Password hashing adapter producing `$`-delimited stored records.

    The pepper is read from configuration at verification time and is never
    stored, so rotating it invalidates every existing record.
    """

    def __init__(
        self,
        *,
        algorithm: HashAlgorithm,
        rounds: int,
        salt_length: int,
        pepper: str,
        salt_generator: SaltGeneratorPort,
    ) -> None:
        self._algorithm = algorithm
        self._rounds = rounds
        self._salt_length = salt_length
        self._pepper = pepper
        self._salt_generator = salt_generator

    def new_record(self, password: str) -> StoredPasswordRecord:
        """Hash one plaintext password with a fresh salt and configured parameters."""

        salt = self._salt_generator.generate(self._salt_length)
        digest = compute_password_digest(
            password,
            salt,
            self._pepper,
            self._algorithm,
            self._rounds,
        )
        return StoredPasswordRecord(
            algorithm=self._algorithm,
            rounds=self._rounds,
            salt_length=self._salt_length,
            salt=salt,
            digest=digest,
        )

    def hash_password(self, password: str) -> str:
        return encode_password_record(self.new_record(password))

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Recompute with stored parameters; malformed records raise `PasswordRecordDecodeError`."""

        record = decode_password_record(password_hash)
        candidate = compute_password_digest(
            password,
            record.salt,
            self._pepper,
            record.algorithm,
            record.rounds,
        )
        return hmac.compare_digest(candidate.encode("utf-8"), record.digest.encode("utf-8"))
