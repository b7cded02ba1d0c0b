"""
aserve data resource helpers.

Provides access to the bundled configuration files and schemas through
importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Args:
        subpackage: Name of the data subpackage (e.g., "config", "schemas")
        filename: Optional filename within the subpackage

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/aserve/data/config/defaults.yaml')
    """
    pkg = resources.files("aserve.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
