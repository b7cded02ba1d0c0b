"""aserve version command.

SUMMARY: Print the aserve version
"""

from __future__ import annotations

import argparse
import sys

from aserve import __version__

SUMMARY = "Print the aserve version"


def register_args(parser: argparse.ArgumentParser) -> None:
    return None


def main(args: argparse.Namespace) -> int:
    print(f"aserve {__version__}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
