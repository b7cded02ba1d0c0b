"""Subprocess helper used for every external tool (setfacl, mount, systemctl...).

No ``shell=True``: commands are always argv lists.
"""
from __future__ import annotations

import logging
import subprocess
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]


def run_command(
    argv: Sequence[str],
    *,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``argv`` and capture its output.

    Never raises on a non-zero exit status; callers inspect ``returncode``.

    Raises:
        FileNotFoundError: When the executable does not exist.
        subprocess.TimeoutExpired: When the command outlives ``timeout``.
    """
    cmd = [str(a) for a in argv]
    logger.debug("run: %s", " ".join(cmd))
    return subprocess.run(  # noqa: S603
        cmd,
        capture_output=True,
        text=True,
        timeout=max(0.1, float(timeout or DEFAULT_TIMEOUT_SECONDS)),
        check=False,
    )


def describe_failure(result: subprocess.CompletedProcess[str]) -> str:
    """One-line description of a failed command for warnings."""
    msg = (result.stderr or result.stdout or "").strip().splitlines()
    detail = msg[-1] if msg else "no output"
    return f"exit={result.returncode}: {detail}"


__all__ = ["CommandRunner", "DEFAULT_TIMEOUT_SECONDS", "run_command", "describe_failure"]
