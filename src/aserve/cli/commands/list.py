"""aserve list command.

SUMMARY: Show recorded publishes and whether each is still mounted
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List

from aserve.cli import OutputFormatter, add_json_flag
from aserve.core.exceptions import AserveError
from aserve.core.publish import PublishServices, build_services

SUMMARY = "Show recorded publishes and whether each is still mounted"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)


def collect_rows(services: PublishServices) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for record in services.records.records():
        destination = services.serve.docroot / record.alias
        rows.append(
            {
                "alias": record.alias,
                "source": str(record.source_path),
                "destination": str(destination),
                "url": services.public_url(record.alias),
                "mounted": services.mounts.is_mounted(destination),
            }
        )
    return rows


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter.from_config(json_mode=getattr(args, "json", False))
    try:
        rows = collect_rows(build_services())
    except AserveError as e:
        formatter.error(e)
        return e.exit_code

    if formatter.json_mode:
        formatter.json_output({"publishes": rows})
        return 0

    if not rows:
        formatter.text("No active publishes recorded.")
        return 0
    for row in rows:
        state = "mounted" if row["mounted"] else "not mounted"
        formatter.text(f"{row['alias']}: {row['source']} -> {row['destination']} ({state})")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
