"""aserve clean command.

SUMMARY: Tear down a publish whose session did not clean up after itself

With no target, lists recorded publishes and asks which one to clean.
A target that names an existing directory is taken as the published
source; anything else is looked up as an alias.
"""

from __future__ import annotations

import argparse
import sys

from aserve.cli import OutputFormatter, add_target_arg, add_verbose_flag, require_privilege
from aserve.core.config.domains import CliConfig
from aserve.core.exceptions import AserveError
from aserve.core.publish import RecoveryController, build_services
from aserve.core.utils.cli import confirm

SUMMARY = "Tear down a publish left behind by an interrupted session"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_target_arg(parser)
    add_verbose_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter.from_config()
    try:
        require_privilege()
        cli_cfg = CliConfig()
        controller = RecoveryController(
            build_services(),
            out=formatter.text,
            confirm=lambda message: confirm(message, cli_config=cli_cfg),
        )
        result = controller.clean(getattr(args, "target", None))
    except AserveError as e:
        formatter.error(e)
        return e.exit_code

    if result.report is not None and result.report.warnings:
        formatter.text(
            f"{len(result.report.warnings)} cleanup step(s) reported problems; see warnings above."
        )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
