"""Domain-specific configuration for CLI prompts and output."""

from __future__ import annotations

from functools import cached_property
from typing import Any, Dict

from ..base import BaseDomainConfig


class CliConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "cli"

    @cached_property
    def confirm(self) -> Dict[str, Any]:
        return dict(self.section.get("confirm") or {})

    @cached_property
    def confirm_default(self) -> bool:
        return bool(self.confirm.get("default", False))

    @cached_property
    def assume_yes_env(self) -> str:
        return str(self.confirm.get("assume_yes_env") or "")

    @cached_property
    def error_prefix(self) -> str:
        output = self.section.get("output") or {}
        return str(output.get("error_prefix") or "Error:")

    @cached_property
    def json_indent(self) -> int:
        js = self.section.get("json") or {}
        return int(js.get("indent", 2))

    @cached_property
    def json_sort_keys(self) -> bool:
        js = self.section.get("json") or {}
        return bool(js.get("sort_keys", False))


__all__ = ["CliConfig"]
