"""Source path resolution.

``PathResolver.resolve`` turns whatever the operator typed into a canonical
absolute path *without* requiring it to exist, so the "does not exist"
error can show the canonical form.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from aserve.core.exceptions import PublishValidationError

logger = logging.getLogger(__name__)


def _strict_canonical(raw: str) -> str:
    # realpath(strict=False) resolves symlinks for the existing prefix and
    # keeps the missing tail lexically, like ``realpath -m``.
    return os.path.realpath(os.path.expanduser(raw), strict=False)


def _abspath(raw: str) -> str:
    return os.path.abspath(os.path.expanduser(raw))


def _degraded(raw: str) -> str:
    # Last resort: cwd joined with the final component. Wrong for paths like
    # ``../a/b``; only reached when both primitives above blew up.
    name = os.path.basename(raw.rstrip("/")) or raw
    return os.path.join(os.getcwd(), name)


class PathResolver:
    """Canonicalize operator-supplied paths.

    Tries a sequence of canonicalization strategies, strongest first.
    """

    def __init__(self, strategies: Optional[list[Callable[[str], str]]] = None) -> None:
        self.strategies = strategies or [_strict_canonical, _abspath, _degraded]

    def resolve(self, raw: str) -> Path:
        """Return the canonical absolute form of ``raw``."""
        if not raw or not str(raw).strip():
            raise PublishValidationError("A path is required.")
        last_error: Optional[Exception] = None
        for idx, strategy in enumerate(self.strategies):
            try:
                resolved = strategy(str(raw))
            except (OSError, ValueError) as exc:
                last_error = exc
                continue
            if idx > 0:
                logger.debug("Resolved %r with fallback strategy %s", raw, strategy.__name__)
            return Path(resolved)
        raise PublishValidationError(f"Cannot resolve path {raw!r}: {last_error}")

    def resolve_directory(self, raw: str) -> Path:
        """Resolve ``raw`` and require it to be an existing directory."""
        path = self.resolve(raw)
        if not path.is_dir():
            raise PublishValidationError(
                f"The directory {path} does not exist.",
                context={"path": str(path)},
            )
        return path


__all__ = ["PathResolver"]
