"""Bind-mount lifecycle for publish destinations."""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from aserve.core.exceptions import ResourceError
from aserve.core.models import StepOutcome
from aserve.core.utils.subprocess import CommandRunner, describe_failure, run_command

from .table import MountTable

logger = logging.getLogger(__name__)


class MountManager:
    """Create, bind, unmount and remove destination directories.

    ``mount`` is all-or-nothing and raises ``ResourceError``; ``unmount`` is
    best-effort and reports ``StepOutcome`` values instead.
    """

    def __init__(
        self,
        table: Optional[MountTable] = None,
        *,
        runner: CommandRunner = run_command,
        mount_command: Sequence[str] = ("mount", "--bind"),
        umount_command: Sequence[str] = ("umount",),
        timeout: float = 30.0,
    ) -> None:
        self.table = table or MountTable()
        self.runner = runner
        self.mount_command = list(mount_command)
        self.umount_command = list(umount_command)
        self.timeout = timeout

    def mount(self, source: Path, destination: Path) -> None:
        """Create ``destination`` and bind-mount ``source`` onto it.

        Raises:
            ResourceError: If the directory cannot be created or the mount
                fails. A directory created here is removed again first.
        """
        created = not destination.exists()
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ResourceError(
                f"Cannot create {destination}: {exc.strerror or exc}",
                context={"destination": str(destination)},
            ) from exc

        argv = [*self.mount_command, str(source), str(destination)]
        try:
            result = self.runner(argv, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as exc:
            detail = str(exc)
        else:
            if result.returncode == 0:
                logger.info("Mounted %s -> %s", source, destination)
                return
            detail = describe_failure(result)

        if created:
            self._remove_directory(destination)
        raise ResourceError(
            f"Bind mount of {source} onto {destination} failed ({detail})",
            context={"source": str(source), "destination": str(destination)},
        )

    def is_mounted(self, destination: Path) -> bool:
        return self.table.is_mount_point(destination)

    def unmount(self, destination: Path) -> List[StepOutcome]:
        """Unmount ``destination`` if mounted, then try to remove it.

        Safe to call repeatedly: a missing mount or directory is not an error.
        """
        outcomes: List[StepOutcome] = []
        if self.is_mounted(destination):
            argv = [*self.umount_command, str(destination)]
            try:
                result = self.runner(argv, timeout=self.timeout)
            except (OSError, subprocess.SubprocessError) as exc:
                outcome = StepOutcome.failure("unmount", destination, str(exc))
            else:
                if result.returncode == 0:
                    outcome = StepOutcome.success("unmount", destination)
                else:
                    outcome = StepOutcome.failure("unmount", destination, describe_failure(result))
            if not outcome.ok:
                logger.warning("failed to unmount %s (%s)", destination, outcome.detail)
            outcomes.append(outcome)
        else:
            outcomes.append(StepOutcome.skip("unmount", destination, "not a mount point"))

        outcomes.append(self._remove_directory(destination))
        return outcomes

    def _remove_directory(self, destination: Path) -> StepOutcome:
        # rmdir only: never recurse into something that may still be a live mount.
        try:
            destination.rmdir()
        except FileNotFoundError:
            return StepOutcome.skip("rmdir", destination, "already gone")
        except OSError as exc:
            logger.debug("Leaving %s in place: %s", destination, exc)
            return StepOutcome.skip("rmdir", destination, exc.strerror or str(exc))
        return StepOutcome.success("rmdir", destination)

    def resolve_mount_source(self, destination: Path) -> Optional[Path]:
        """Ask the live mount table what is mounted at ``destination``."""
        return self.table.resolve_source(destination)


__all__ = ["MountManager"]
