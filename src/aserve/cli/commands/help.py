"""aserve help command.

SUMMARY: Show usage and exit
"""

from __future__ import annotations

import argparse
import sys

SUMMARY = "Show usage and exit"


def register_args(parser: argparse.ArgumentParser) -> None:
    return None


def main(args: argparse.Namespace) -> int:
    from aserve.cli._dispatcher import build_parser

    build_parser().print_help()
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
