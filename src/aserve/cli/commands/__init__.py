"""Top-level aserve commands (auto-discovered)."""
