"""Web server reload notification (fire-and-forget)."""
from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from aserve.core.models import StepOutcome
from aserve.core.utils.subprocess import CommandRunner, describe_failure, run_command

logger = logging.getLogger(__name__)


class ReloadNotifier:
    """Ask the server to reload. Never raises.

    A publish or unpublish counts as done whether or not the server picked
    the change up, so failures here are only warnings.
    """

    def __init__(
        self,
        command: Sequence[str] = ("systemctl", "reload", "apache2"),
        *,
        runner: CommandRunner = run_command,
        timeout: float = 30.0,
    ) -> None:
        self.command = list(command)
        self.runner = runner
        self.timeout = timeout

    def reload(self) -> StepOutcome:
        label = " ".join(self.command)
        if not self.command:
            return StepOutcome.skip("reload", "-", "no reload command configured")
        try:
            result = self.runner(self.command, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as exc:
            outcome = StepOutcome.failure("reload", label, str(exc))
        else:
            if result.returncode == 0:
                return StepOutcome.success("reload", label)
            outcome = StepOutcome.failure("reload", label, describe_failure(result))
        logger.warning("server reload failed: %s (%s)", label, outcome.detail)
        return outcome


__all__ = ["ReloadNotifier"]
