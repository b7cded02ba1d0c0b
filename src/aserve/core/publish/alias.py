"""Alias allocation under the document root."""
from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from aserve.core.exceptions import ResourceError, UsageError


@dataclass(frozen=True)
class Allocation:
    alias: str
    destination: Path


def validate_alias(name: str) -> str:
    """Reject aliases that are not a single path component."""
    if not name or not name.strip():
        raise UsageError("Alias must not be empty.")
    if "/" in name or name in (".", "..") or "\0" in name:
        raise UsageError(f"Invalid alias {name!r}: must be a single directory name.")
    return name


class AliasAllocator:
    """Pick a name under ``docroot`` that nothing currently occupies.

    The first candidate is the requested alias verbatim, else the source's
    final path component. If that is taken, ``<candidate>-<unix seconds>``
    is tried exactly once.
    """

    def __init__(self, docroot: Path, *, clock: Callable[[], float] = time.time) -> None:
        self.docroot = Path(docroot)
        self.clock = clock

    def _occupied(self, name: str) -> bool:
        # lexists: a dangling symlink still occupies the name.
        return os.path.lexists(self.docroot / name)

    def allocate(self, source: Path, requested: Optional[str] = None) -> Allocation:
        """Return the alias and destination path; creates nothing."""
        candidate = validate_alias(requested) if requested else validate_alias(Path(source).name)
        if self._occupied(candidate):
            candidate = f"{candidate}-{int(self.clock())}"
            if self._occupied(candidate):
                raise ResourceError(
                    f"{self.docroot / candidate} already exists; pass an explicit alias.",
                    context={"alias": candidate},
                )
        return Allocation(alias=candidate, destination=self.docroot / candidate)


__all__ = ["AliasAllocator", "Allocation", "validate_alias"]
