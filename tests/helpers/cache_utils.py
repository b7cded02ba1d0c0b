"""Cache utilities for test isolation."""
from __future__ import annotations


def reset_aserve_caches() -> None:
    """Reset module-level caches so each test sees its own configuration."""
    from aserve.cli._dispatcher import discover_commands
    from aserve.core.config.cache import clear_all_caches

    clear_all_caches()
    discover_commands.cache_clear()


__all__ = ["reset_aserve_caches"]
