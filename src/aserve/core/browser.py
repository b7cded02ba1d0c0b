"""Open the published URL in the invoking user's desktop session."""
from __future__ import annotations

import logging
import os
import subprocess
from typing import Any, Callable, Optional, Sequence

from aserve.core.identity import InvokingUser, is_privileged
from aserve.core.models import StepOutcome

logger = logging.getLogger(__name__)

Launcher = Callable[[Sequence[str]], Any]


def browser_argv(url: str, user: InvokingUser, command: Sequence[str], *, privileged: bool) -> list[str]:
    """Build the launcher argv, dropping to the invoking user when running as root."""
    argv = [*command, url]
    if privileged and user.name:
        return ["sudo", "-u", user.name, *argv]
    return argv


def _popen_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    return {}


def spawn_detached(argv: Sequence[str]) -> subprocess.Popen:
    """Start ``argv`` without waiting for it or sharing our stdio.

    A browser forked by ``xdg-open`` outlives the launcher; holding pipes to
    it would block until the browser exits.
    """
    cmd = [str(a) for a in argv]
    logger.debug("spawn: %s", " ".join(cmd))
    return subprocess.Popen(  # noqa: S603
        cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        **_popen_kwargs(),
    )


def open_url(
    url: str,
    user: InvokingUser,
    *,
    command: Sequence[str] = ("xdg-open",),
    launcher: Optional[Launcher] = None,
) -> StepOutcome:
    """Best-effort: a browser that fails to start never affects the publish.

    Fire-and-forget, so only a launcher that cannot be started is reported.
    """
    argv = browser_argv(url, user, command, privileged=is_privileged())
    launch = launcher if launcher is not None else spawn_detached
    try:
        launch(argv)
    except (OSError, subprocess.SubprocessError) as exc:
        outcome = StepOutcome.failure("browser", url, str(exc))
        logger.warning("Could not open a browser for %s (%s)", url, outcome.detail)
        return outcome
    return StepOutcome.success("browser", url)


__all__ = ["browser_argv", "open_url", "spawn_detached"]
