"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every step (including external commands) to stderr",
    )


def add_open_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--open",
        dest="open_browser",
        action="store_true",
        help="Open the published URL in the invoking user's browser",
    )


def add_target_arg(parser: argparse.ArgumentParser, *, required: bool = False) -> None:
    """Add the positional alias-or-path argument used by ``clean``."""
    parser.add_argument(
        "target",
        nargs=None if required else "?",
        help="Alias under the document root, or the published source path",
    )


__all__ = [
    "add_json_flag",
    "add_verbose_flag",
    "add_open_flag",
    "add_target_arg",
]
