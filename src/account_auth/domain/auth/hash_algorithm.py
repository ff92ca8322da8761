"""Closed set of digest algorithms supported by stored password records."""

from __future__ import annotations

import hashlib
from enum import StrEnum


class HashAlgorithm(StrEnum):
    """Digest algorithm identified by its canonical record/config name."""

    SHA224 = "SHA-224"
    SHA256 = "SHA-256"
    SHA384 = "SHA-384"
    SHA512 = "SHA-512"
    SHA512_224 = "SHA-512/224"
    SHA512_256 = "SHA-512/256"

    @classmethod
    def from_name(cls, name: str) -> HashAlgorithm:
        """Resolve one canonical name, rejecting anything outside the closed set."""

        try:
            return cls(name)
        except ValueError as exc:
            raise ValueError(f"unknown hash algorithm: {name!r}") from exc

    def digest_hex(self, text: str) -> str:
        """Digest UTF-8 text and render it as lowercase hexadecimal."""

        hasher = hashlib.new(_HASHLIB_NAMES[self])
        hasher.update(text.encode("utf-8"))
        return hasher.hexdigest()


_HASHLIB_NAMES: dict[HashAlgorithm, str] = {
    HashAlgorithm.SHA224: "sha224",
    HashAlgorithm.SHA256: "sha256",
    HashAlgorithm.SHA384: "sha384",
    HashAlgorithm.SHA512: "sha512",
    HashAlgorithm.SHA512_224: "sha512_224",
    HashAlgorithm.SHA512_256: "sha512_256",
}
