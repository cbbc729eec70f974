"""Central logging utilities for the Policy Registry API.

This module enforces a consistent logging configuration across the entire
code-base and provides a helper for retrieving module-scoped loggers.

Key Features
------------
1. configure_logging(): idempotent initialization of the root logger.
2. get_logger(name): typed helper that always returns a configured logger.

Prefer explicit ``logger.<level>()`` calls over ``print`` everywhere.
"""

from __future__ import annotations

import logging
from typing import Final

from beartype import beartype

__all__: Final = [
    "configure_logging",
    "get_logger",
    "reset_logging",
]

_DEFAULT_LOG_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_is_configured: bool = False


@beartype
def configure_logging(
    *,
    level: int | str = logging.INFO,
    fmt: str = _DEFAULT_LOG_FORMAT,
    force: bool = False,
) -> None:
    """Configure the root logger exactly once.

    Calling this function multiple times is safe – configuration will only
    be applied on the first invocation, unless ``force`` replaces it (the
    application factory does this once settings are loaded).
    """
    global _is_configured
    if _is_configured and not force:
        return

    logging.basicConfig(level=level, format=fmt, force=force)
    _is_configured = True


@beartype
def reset_logging() -> None:
    """Allow the next configure_logging() call to apply again (for testing)."""
    global _is_configured
    _is_configured = False


@beartype
def get_logger(name: str | None = None, *, level: int | None = None) -> logging.Logger:
    """Return a module-scoped logger that is guaranteed to be configured."""
    configure_logging()
    logger = logging.getLogger(name or "policy_registry")
    if level is not None:
        logger.setLevel(level)
    return logger
