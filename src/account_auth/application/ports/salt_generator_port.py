"""Port for random salt generation."""

from __future__ import annotations

from typing import Protocol


class SaltGeneratorPort(Protocol):
    """Salt generation contract."""

    def generate(self, length: int) -> str:
        """Return a salt of exactly `length` characters."""
