"""Minimal ACL grants for the web server identity.

The server needs read+traverse on the published tree and traverse-only on
every directory between it and the invoking user's home (or ``/``). The
chain is derived from ``source`` and ``home`` on every call and never
stored, so ``revoke`` works from recovery without the original session.
"""
from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional

from aserve.core.models import GrantReport, StepOutcome
from aserve.core.utils.subprocess import CommandRunner, describe_failure, run_command

logger = logging.getLogger(__name__)

ROOT = Path("/")


def _normalize(path: Optional[Path]) -> Optional[Path]:
    if path is None:
        return None
    return Path(os.path.realpath(str(path), strict=False))


def grant_chain(source: Path, home: Optional[Path]) -> List[Path]:
    """Return the ancestor directories that need traverse permission.

    Walks up from ``source`` one parent at a time, including the directory
    where the walk stops (``home`` or ``/``). When ``home`` is known but the
    walk stopped elsewhere (source outside home), ``home`` is appended.

    Examples:
        >>> grant_chain(Path("/home/u/www/site"), Path("/home/u"))
        [PosixPath('/home/u/www'), PosixPath('/home/u')]
        >>> grant_chain(Path("/srv/site"), None)
        [PosixPath('/srv'), PosixPath('/')]
    """
    chain: List[Path] = []
    cur = Path(source)
    while cur != ROOT and cur != home:
        cur = cur.parent
        chain.append(cur)
    if home is not None and home != cur:
        chain.append(home)
    return chain


class PermissionGrantor:
    """Grant/revoke the server identity's ACL entries along a grant chain.

    Every per-path operation is best-effort: failures are logged and
    reported, and the remaining chain is still processed. A missing
    ``setfacl`` turns every call into a silent skip.
    """

    def __init__(
        self,
        server_user: str,
        *,
        setfacl: str = "setfacl",
        runner: CommandRunner = run_command,
        timeout: float = 30.0,
    ) -> None:
        self.server_user = server_user
        self.setfacl = setfacl
        self.runner = runner
        self.timeout = timeout

    def _apply(self, step: str, target: Path, args: List[str]) -> StepOutcome:
        argv = [self.setfacl, *args, str(target)]
        try:
            result = self.runner(argv, timeout=self.timeout)
        except FileNotFoundError:
            return StepOutcome.skip(step, target, f"{self.setfacl} not available")
        except (OSError, subprocess.SubprocessError) as exc:
            outcome = StepOutcome.failure(step, target, str(exc))
        else:
            if result.returncode == 0:
                return StepOutcome.success(step, target)
            outcome = StepOutcome.failure(step, target, describe_failure(result))
        logger.warning("%s failed on %s (%s)", step, target, outcome.detail)
        return outcome

    def grant(self, source: Path, home: Optional[Path] = None) -> GrantReport:
        """Give the server read+traverse on ``source`` and traverse on its chain."""
        source = _normalize(source)
        home = _normalize(home)
        report = GrantReport()
        report.outcomes.append(
            self._apply("acl.grant", source, ["-R", "-m", f"u:{self.server_user}:rx"])
        )
        for directory in grant_chain(source, home):
            report.outcomes.append(
                self._apply("acl.grant", directory, ["-m", f"u:{self.server_user}:x"])
            )
        return report

    def revoke(self, source: Path, home: Optional[Path] = None) -> GrantReport:
        """Remove the server's ACL entries from ``source`` and its chain."""
        source = _normalize(source)
        home = _normalize(home)
        report = GrantReport()
        report.outcomes.append(
            self._apply("acl.revoke", source, ["-R", "-x", f"u:{self.server_user}"])
        )
        for directory in grant_chain(source, home):
            report.outcomes.append(
                self._apply("acl.revoke", directory, ["-x", f"u:{self.server_user}"])
            )
        return report


__all__ = ["PermissionGrantor", "grant_chain"]
