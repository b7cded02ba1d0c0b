"""
Auto-discovery CLI dispatcher for aserve.

Every module under ``cli/commands`` that exposes ``register_args`` and
``main`` becomes a subcommand. Adding a command = adding a .py file.

The original single-purpose invocation forms still work:

    aserve /path/to/site [alias]   ->  aserve publish /path/to/site [alias]
    aserve --clean [target]        ->  aserve clean [target]
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any

from aserve.core.exceptions import AserveError

logger = logging.getLogger(__name__)

LEGACY_CLEAN_FLAG = "--clean"
PASSTHROUGH_FLAGS = ("-h", "--help", "--version")


@lru_cache(maxsize=1)
def discover_commands() -> dict[str, dict[str, Any]]:
    """Discover commands under cli/commands."""
    commands_dir = Path(__file__).parent / "commands"
    commands: dict[str, dict[str, Any]] = {}

    if not commands_dir.exists():
        return commands

    for item in sorted(commands_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue

        cmd_name = item.stem
        try:
            module = importlib.import_module(f"aserve.cli.commands.{cmd_name}")
        except ImportError as e:
            print(f"Warning: Could not import command {cmd_name}: {e}", file=sys.stderr)
            continue
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", cmd_name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }

    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered commands."""
    parser = argparse.ArgumentParser(
        prog="aserve",
        description=(
            "Temporarily serve a local directory through the running web server.\n"
            "Needs root: it bind-mounts the directory under the document root and\n"
            "grants the server user minimal ACLs, undoing both on Ctrl+C."
        ),
        epilog=(
            "Shorthand:\n"
            "  sudo aserve /path/to/site [alias]   same as 'publish'\n"
            "  sudo aserve --clean [target]        same as 'clean'"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_name, cmd_info in discover_commands().items():
        cmd_parser = subparsers.add_parser(cmd_name, help=cmd_info["summary"])
        if cmd_info["register_args"]:
            cmd_info["register_args"](cmd_parser)
        if cmd_info["main"]:
            cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    from aserve import __version__

    return __version__


def route_legacy_argv(argv: list[str]) -> list[str]:
    """Rewrite the shorthand invocation forms onto subcommands.

    A first argument that is neither a known command nor a global flag is
    taken as the path to publish.
    """
    if not argv:
        return argv
    first = argv[0]
    if first == LEGACY_CLEAN_FLAG:
        return ["clean", *argv[1:]]
    if first in PASSTHROUGH_FLAGS or first in discover_commands():
        return argv
    return ["publish", *argv]


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the aserve CLI.

    Returns:
        Exit code: 0 success (including help, version and an aborted clean),
        1 validation/resource/recovery failure, 2 usage error or missing
        privilege, 130 interrupted outside a publish session.
    """
    if argv is None:
        argv = sys.argv[1:]

    argv = route_legacy_argv(list(argv))
    parser = build_parser()
    if not argv:
        parser.print_usage(sys.stderr)
        return 2

    args = parser.parse_args(argv)

    func: Callable[[argparse.Namespace], int] | None = getattr(args, "_func", None)
    if func is None:
        parser.print_help()
        return 2

    try:
        from aserve.cli._utils import configure_logging

        configure_logging(args)
        return int(func(args) or 0)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except AserveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        logger.debug("Unhandled error in %s", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
