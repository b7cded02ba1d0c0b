"""Bind mounts and the live mount table."""

from .manager import MountManager
from .table import MountEntry, MountTable, parse_mountinfo

__all__ = ["MountEntry", "MountManager", "MountTable", "parse_mountinfo"]
