"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
import logging
from typing import Callable, Optional

from aserve.core import identity
from aserve.core.config.domains import LoggingConfig
from aserve.core.exceptions import UsageError
from aserve.core.stdlib_logging import configure_stdlib_logging

PRIVILEGE_MESSAGE = "Operation cannot be completed without root level access. Please use sudo."


def require_privilege(check: Optional[Callable[[], bool]] = None) -> None:
    """Raise ``UsageError`` unless running with root privileges.

    Called before anything touches the filesystem.
    """
    privileged = check() if check is not None else identity.is_privileged()
    if not privileged:
        raise UsageError(PRIVILEGE_MESSAGE)


def configure_logging(args: argparse.Namespace) -> None:
    """Apply the ``logging`` config section, honouring ``--verbose``."""
    cfg = LoggingConfig()
    level = "DEBUG" if getattr(args, "verbose", False) else cfg.level
    configure_stdlib_logging(level=level, log_path=cfg.path, fmt=cfg.format)
    logging.getLogger(__name__).debug("logging configured at %s", level)


__all__ = ["PRIVILEGE_MESSAGE", "configure_logging", "require_privilege"]
