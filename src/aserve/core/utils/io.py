"""File I/O helpers.

Plain reads and writes: records and configuration are tiny, single-operator
files, so there is no locking and no temp-file rename here.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Union

import yaml

PathLike = Union[str, Path]


def ensure_directory(path: PathLike) -> Path:
    """Create ``path`` (and parents) unless it already exists.

    Returns:
        Path: The directory path

    Raises:
        NotADirectoryError: If path exists but is not a directory
    """
    path = Path(path)

    if path.exists():
        if not path.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")
        return path

    path.mkdir(parents=True, exist_ok=True)
    return path


def read_text(path: PathLike) -> str:
    """Read a UTF-8 text file."""
    return Path(path).read_text(encoding="utf-8")


def write_text(path: PathLike, content: str) -> None:
    """Write a UTF-8 text file, creating the parent directory when missing."""
    target = Path(path)
    ensure_directory(target.parent)
    target.write_text(content, encoding="utf-8")


def read_yaml(path: PathLike, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns ``default`` if the file is missing or invalid, unless
    ``raise_on_error`` is True.

    Examples:
        >>> config = read_yaml(Path("/etc/aserve/config.yaml"), default={})
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if data is not None else default
    except Exception:
        if raise_on_error:
            raise
        return default


def iter_yaml_files(directory: PathLike) -> list[Path]:
    """Return ``*.yaml``/``*.yml`` files in ``directory`` in alphabetical order."""
    d = Path(directory)
    if not d.is_dir():
        return []
    return sorted(p for p in d.iterdir() if p.is_file() and p.suffix in (".yaml", ".yml"))


__all__ = ["ensure_directory", "read_text", "write_text", "read_yaml", "iter_yaml_files"]
