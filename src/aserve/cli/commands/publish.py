"""aserve publish command.

SUMMARY: Serve a directory under the document root until interrupted

Runs in the foreground: grant ACLs, bind-mount, record, reload, then wait.
Ctrl+C (or SIGTERM/SIGHUP) undoes all of it.
"""

from __future__ import annotations

import argparse
import sys

from aserve.cli import OutputFormatter, add_open_flag, add_verbose_flag, require_privilege
from aserve.core.exceptions import AserveError
from aserve.core.publish import PublishSession, build_services, validate_alias

SUMMARY = "Serve a directory under the document root until interrupted"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Directory to publish (absolute or relative)")
    parser.add_argument(
        "alias",
        nargs="?",
        help="Name under the document root (default: the directory's basename)",
    )
    add_open_flag(parser)
    add_verbose_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter.from_config()
    try:
        require_privilege()
        if args.alias is not None:
            validate_alias(args.alias)
        session = PublishSession(
            build_services(),
            args.path,
            args.alias,
            open_browser=bool(getattr(args, "open_browser", False)),
            out=formatter.text,
        )
        return session.run()
    except AserveError as e:
        formatter.error(e)
        return e.exit_code


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
