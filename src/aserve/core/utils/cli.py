"""Interactive prompt helpers used by ``clean``."""
from __future__ import annotations

import os
from typing import Optional

from aserve.core.config.domains import CliConfig


def confirm(message: str, default: bool = False, *, cli_config: Optional[CliConfig] = None) -> bool:
    """Prompt the user for a yes/no answer.

    The configured ``cli.confirm.default`` wins over ``default``. When
    ``cli.confirm.assume_yes_env`` names a set environment variable, the
    message is printed and the answer is yes without prompting.
    """
    cfg = cli_config or CliConfig()
    effective_default = cfg.confirm_default if "default" in cfg.confirm else default
    assume_env = cfg.assume_yes_env

    if assume_env and os.environ.get(assume_env):
        print(message)
        return True

    suffix = "[Y/n]" if effective_default else "[y/N]"
    try:
        resp = input(f"{message} {suffix} ").strip().lower()
    except EOFError:
        resp = ""

    if resp in ("y", "yes"):
        return True
    if resp in ("n", "no"):
        return False
    return effective_default


def prompt(message: str) -> str:
    """Read one line; end-of-input counts as an empty answer."""
    try:
        return input(message)
    except EOFError:
        return ""


__all__ = ["confirm", "prompt"]
