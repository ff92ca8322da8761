"""CSPRNG-backed salt generator adapter."""

from __future__ import annotations

import secrets

from account_auth.application.ports.salt_generator_port import SaltGeneratorPort
from account_auth.domain.auth.password_record import RECORD_DELIMITER

# Printable ASCII without whitespace, NUL, or the record delimiter.
SALT_ALPHABET = (
    "!\"#%&'()*-./0123456789:;<=>?@"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_`"
    "abcdefghijklmnopqrstuvwxyz{|}~"
)

assert RECORD_DELIMITER not in SALT_ALPHABET
assert not any(ch.isspace() for ch in SALT_ALPHABET)


class SecretsSaltGenerator(SaltGeneratorPort):
    """Generate salts with independent uniform picks from `SALT_ALPHABET`."""

    def generate(self, length: int) -> str:
        if length < 0:
            raise ValueError("salt length cannot be negative")
        return "".join(secrets.choice(SALT_ALPHABET) for _ in range(length))
