"""Durable alias -> source records.

One small file per active publish, ``<state dir>/<alias><suffix>``, holding
exactly the source path. This is the only state that survives the
foreground process and the only thing recovery can trust by alias.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from aserve.core.models import PublishRecord
from aserve.core.utils.io import ensure_directory, read_text, write_text

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, directory: Path, suffix: str = ".source") -> None:
        self.directory = Path(directory)
        self.suffix = suffix

    def path_for(self, alias: str) -> Path:
        return self.directory / f"{alias}{self.suffix}"

    def write(self, alias: str, source: Path) -> Path:
        """Persist ``alias -> source``; creates the store directory on first use."""
        ensure_directory(self.directory)
        path = self.path_for(alias)
        write_text(path, str(source))
        logger.debug("Recorded %s -> %s in %s", alias, source, path)
        return path

    def read(self, alias: str) -> Optional[Path]:
        """Return the recorded source path, or None when there is no record."""
        path = self.path_for(alias)
        try:
            content = read_text(path).strip()
        except FileNotFoundError:
            return None
        return Path(content) if content else None

    def delete(self, alias: str) -> bool:
        """Remove the record; returns False if it was already gone."""
        path = self.path_for(alias)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def list_aliases(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        names = [
            p.name[: -len(self.suffix)]
            for p in self.directory.iterdir()
            if p.is_file() and p.name.endswith(self.suffix) and len(p.name) > len(self.suffix)
        ]
        return sorted(names)

    def records(self) -> List[PublishRecord]:
        out: List[PublishRecord] = []
        for alias in self.list_aliases():
            source = self.read(alias)
            if source is not None:
                out.append(PublishRecord(alias=alias, source_path=source))
        return out


__all__ = ["RecordStore"]
