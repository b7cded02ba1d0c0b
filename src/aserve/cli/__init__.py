"""
aserve CLI package.

Commands live in ``commands/`` and are auto-discovered by the dispatcher.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Privilege check and logging setup
"""
from ._output import OutputFormatter
from ._args import add_json_flag, add_open_flag, add_target_arg, add_verbose_flag
from ._utils import PRIVILEGE_MESSAGE, configure_logging, require_privilege

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_open_flag",
    "add_target_arg",
    "add_verbose_flag",
    # Utilities
    "PRIVILEGE_MESSAGE",
    "configure_logging",
    "require_privilege",
]
