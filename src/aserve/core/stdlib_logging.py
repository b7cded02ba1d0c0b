from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from aserve.core.utils.io import ensure_directory

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_STDERR_HANDLER: logging.Handler | None = None
_FILE_HANDLER: logging.Handler | None = None
_CONFIGURED_LOG_PATH: str | None = None


def _level_from_name(name: str) -> int:
    try:
        return int(getattr(logging, name.upper()))
    except (AttributeError, TypeError, ValueError):
        return logging.WARNING


def configure_stdlib_logging(
    *,
    level: str = "WARNING",
    log_path: Optional[Path] = None,
    fmt: str = "%(levelname)s: %(message)s",
) -> None:
    """Configure the ``aserve`` logger tree.

    Installs one stderr handler at ``level`` (this is how best-effort
    warnings reach the operator) and, when ``log_path`` is given, one file
    handler that records everything down to DEBUG.

    Idempotent per-process: calling again replaces the handlers installed by
    a previous call and leaves foreign handlers alone.
    """
    global _STDERR_HANDLER, _FILE_HANDLER, _CONFIGURED_LOG_PATH

    logger = logging.getLogger("aserve")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    if _STDERR_HANDLER is not None:
        logger.removeHandler(_STDERR_HANDLER)
    _STDERR_HANDLER = logging.StreamHandler(sys.stderr)
    _STDERR_HANDLER.setLevel(_level_from_name(level))
    _STDERR_HANDLER.setFormatter(logging.Formatter(fmt))
    logger.addHandler(_STDERR_HANDLER)

    resolved = str(Path(log_path).expanduser().resolve()) if log_path else None
    if resolved == _CONFIGURED_LOG_PATH and _FILE_HANDLER is not None:
        return

    if _FILE_HANDLER is not None:
        logger.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None
        _CONFIGURED_LOG_PATH = None

    if resolved is None:
        return

    try:
        ensure_directory(Path(resolved).parent)
        fh = logging.FileHandler(resolved, encoding="utf-8")
    except OSError as exc:
        logger.warning("Cannot open log file %s: %s", resolved, exc)
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(fh)
    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the handlers installed by ``configure_stdlib_logging``."""
    global _STDERR_HANDLER, _FILE_HANDLER, _CONFIGURED_LOG_PATH
    logger = logging.getLogger("aserve")
    for h in (_STDERR_HANDLER, _FILE_HANDLER):
        if h is None:
            continue
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    _STDERR_HANDLER = None
    _FILE_HANDLER = None
    _CONFIGURED_LOG_PATH = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
