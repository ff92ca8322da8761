"""Opaque internal failure wrapping shared by auth use cases."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class AuthInternalError(RuntimeError):
    """Raised when a collaborator fails; the cause is chained but never exposed."""

    def __init__(self) -> None:
        super().__init__("internal authentication error")


@contextmanager
def internal_failure(operation: str) -> Iterator[None]:
    """Log any failure inside the block and re-raise it as `AuthInternalError`."""

    try:
        yield
    except Exception as exc:
        logger.exception("auth_internal_failure operation=%s", operation)
        raise AuthInternalError() from exc
