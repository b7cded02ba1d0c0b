"""Centralized configuration caching.

All domain configs read through ``get_cached_config`` so a single CLI
invocation loads and validates YAML once.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

_config_cache: Dict[str, Dict[str, Any]] = {}


def _cache_key(system_config: Optional[Path]) -> str:
    from .manager import ENV_PREFIX, system_config_path

    path = system_config or system_config_path()
    try:
        st = path.stat()
        file_fp = f"{int(st.st_mtime_ns)}:{int(st.st_size)}"
    except OSError:
        file_fp = "absent"

    # Tests and long-running processes may mutate ASERVE_* env vars.
    env_items = sorted((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]
    return f"{path}|{file_fp}|{env_fp}"


def get_cached_config(system_config: Optional[Path] = None) -> Dict[str, Any]:
    """Return the validated configuration, loading it on first use."""
    key = _cache_key(system_config)
    cached = _config_cache.get(key)
    if cached is None:
        from .manager import ConfigManager

        cached = ConfigManager(system_config).load_config(validate=True)
        _config_cache[key] = cached
    return cached


def clear_all_caches() -> None:
    """Drop every cached configuration (used by tests)."""
    _config_cache.clear()


__all__ = ["get_cached_config", "clear_all_caches"]
