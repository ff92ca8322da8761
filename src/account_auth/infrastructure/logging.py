"""Process logging setup shared by account-auth entrypoints."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_QUIET_LOGGERS = ("aiosqlite", "asyncio", "sqlalchemy.engine")


def resolve_log_level(level: str) -> int:
    """Map a textual level to a logging constant, falling back to INFO."""

    normalized = level.strip().upper()
    resolved = logging.getLevelName(normalized) if normalized else logging.INFO
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str) -> int:
    """Configure root logging once and keep driver loggers at WARNING or above."""

    resolved_level = resolve_log_level(level)
    logging.basicConfig(level=resolved_level, format=_LOG_FORMAT)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))
    return resolved_level
