"""Unified CLI output formatting utilities.

Text goes to stdout, errors to stderr; ``--json`` switches both to
machine-readable payloads.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Optional

from aserve.core.exceptions import AserveError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(
        self,
        json_mode: bool = False,
        indent: int = 2,
        *,
        sort_keys: bool = False,
        error_prefix: str = "Error:",
    ):
        self.json_mode = json_mode
        self.indent = indent
        self.sort_keys = sort_keys
        self.error_prefix = error_prefix

    @classmethod
    def from_config(cls, json_mode: bool = False) -> "OutputFormatter":
        """Build a formatter using the ``cli`` configuration section."""
        from aserve.core.config.domains import CliConfig

        cfg = CliConfig()
        return cls(
            json_mode=json_mode,
            indent=cfg.json_indent,
            sort_keys=cfg.json_sort_keys,
            error_prefix=cfg.error_prefix,
        )

    def _dumps(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, sort_keys=self.sort_keys, default=str)

    def error(self, error: Exception, message: Optional[str] = None) -> None:
        """Output a one-line error to stderr."""
        msg = message or str(error)
        if self.json_mode:
            if isinstance(error, AserveError):
                payload = error.to_json_error()
                payload["message"] = msg
            else:
                payload = {"message": msg, "code": error.__class__.__name__, "context": {}}
            print(self._dumps({"error": payload}), file=sys.stderr)
        else:
            print(f"{self.error_prefix} {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(self._dumps(data))

    def text(self, message: str) -> None:
        print(message)


__all__ = ["OutputFormatter"]
