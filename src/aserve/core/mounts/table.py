"""Live mount table queries backed by ``/proc/self/mountinfo``.

``os.path.ismount`` cannot see a bind mount of a directory from the same
filesystem (same device, different inode), so mount-point checks go
through the kernel's mount table instead.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


def _unescape(field: str) -> str:
    return _OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), field)


@dataclass(frozen=True)
class MountEntry:
    mount_id: int
    parent_id: int
    device: str
    root: str
    mount_point: str
    fstype: str
    source: str


def parse_mountinfo(lines: Iterable[str]) -> List[MountEntry]:
    """Parse mountinfo lines, skipping any that do not match the format.

    Format (see proc(5))::

        36 35 98:0 /mnt1 /mnt2 rw,noatime master:1 - ext3 /dev/root rw
        id pid dev root mount-point options [optional...] - fstype source super
    """
    entries: List[MountEntry] = []
    for line in lines:
        parts = line.split()
        if len(parts) < 7 or "-" not in parts[6:]:
            continue
        sep = parts.index("-", 6)
        tail = parts[sep + 1:]
        try:
            entries.append(
                MountEntry(
                    mount_id=int(parts[0]),
                    parent_id=int(parts[1]),
                    device=parts[2],
                    root=_unescape(parts[3]),
                    mount_point=_unescape(parts[4]),
                    fstype=tail[0] if tail else "",
                    source=_unescape(tail[1]) if len(tail) > 1 else "",
                )
            )
        except ValueError:
            logger.debug("Skipping malformed mountinfo line: %r", line)
    return entries


def _is_within(child: str, parent: str) -> bool:
    if parent == "/":
        return child.startswith("/")
    return child == parent or child.startswith(parent.rstrip("/") + "/")


class MountTable:
    """Read-only view of the current mount namespace."""

    def __init__(self, mountinfo_path: Path = Path("/proc/self/mountinfo")) -> None:
        self.mountinfo_path = Path(mountinfo_path)

    def entries(self) -> List[MountEntry]:
        """Re-read the table; it changes under us as mounts come and go."""
        try:
            with open(self.mountinfo_path, "r", encoding="utf-8", errors="surrogateescape") as f:
                return parse_mountinfo(f)
        except OSError as exc:
            logger.warning("Cannot read mount table %s: %s", self.mountinfo_path, exc)
            return []

    def find(self, mount_point: Path) -> Optional[MountEntry]:
        """Return the topmost entry mounted at ``mount_point``."""
        target = os.path.normpath(str(mount_point))
        found: Optional[MountEntry] = None
        for entry in self.entries():
            if entry.mount_point == target:
                found = entry
        return found

    def is_mount_point(self, path: Path) -> bool:
        return self.find(path) is not None

    def resolve_source(self, mount_point: Path) -> Optional[Path]:
        """Return the directory bind-mounted at ``mount_point``, if any.

        A bind mount's ``root`` field is relative to its filesystem, so it is
        mapped back through another mount of the same device whose root
        contains it. The mount with the shortest root wins (normally the
        filesystem's primary mount at ``/``); another bind of the same
        subtree, such as a second publish of one source, reaches the same
        directory under the wrong path.
        """
        entries = self.entries()
        target = os.path.normpath(str(mount_point))
        entry: Optional[MountEntry] = None
        for e in entries:
            if e.mount_point == target:
                entry = e
        if entry is None:
            return None

        best: Optional[MountEntry] = None
        for other in entries:
            if other is entry or other.device != entry.device:
                continue
            if other.mount_point == target:
                continue
            if not _is_within(entry.root, other.root):
                continue
            if best is None or (len(other.root), other.mount_id) < (len(best.root), best.mount_id):
                best = other
        if best is None:
            logger.debug("No parent mount found for device %s at %s", entry.device, target)
            return None

        rel = PurePosixPath(entry.root).relative_to(PurePosixPath(best.root))
        return Path(best.mount_point) / rel


__all__ = ["MountEntry", "MountTable", "parse_mountinfo"]
