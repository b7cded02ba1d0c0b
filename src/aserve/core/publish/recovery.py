"""Out-of-process cleanup (``aserve clean``).

Finds a publish by source path, by alias (record first, then live mount
table) or by interactive selection, stops lingering foreground sessions
that reference it, and runs the same teardown a session runs on exit.
There is no rollback: steps already performed stay performed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from aserve.core.exceptions import RecoveryAmbiguityError, UsageError
from aserve.core.identity import InvokingUser, resolve_invoking_user
from aserve.core.models import PublishTarget, TeardownReport
from aserve.core.process import (
    ProcessMatch,
    TerminationResult,
    find_candidate_processes,
    terminate_processes,
)
from aserve.core.utils.cli import confirm as default_confirm
from aserve.core.utils.cli import prompt as default_prompt

from .alias import validate_alias
from .services import PublishServices
from .teardown import teardown_publish

logger = logging.getLogger(__name__)

CLEANED = "cleaned"
ABORTED = "aborted"
NOTHING = "nothing"


@dataclass
class CleanResult:
    status: str
    target: Optional[PublishTarget] = None
    report: Optional[TeardownReport] = None
    candidates: List[ProcessMatch] = field(default_factory=list)
    termination: Optional[TerminationResult] = None


def lingering_patterns(target: PublishTarget) -> List[str]:
    """Strings whose presence in a process marks it as a possible session."""
    return [
        str(target.source_path),
        str(target.destination),
        target.alias,
        target.source_path.name,
    ]


class RecoveryController:
    def __init__(
        self,
        services: PublishServices,
        *,
        user: Optional[InvokingUser] = None,
        prompt: Callable[[str], str] = default_prompt,
        confirm: Callable[[str], bool] = default_confirm,
        out: Callable[[str], None] = print,
        finder: Callable[..., List[ProcessMatch]] = find_candidate_processes,
        terminator: Callable[..., TerminationResult] = terminate_processes,
    ) -> None:
        self.services = services
        self.user = user if user is not None else resolve_invoking_user()
        self.prompt = prompt
        self.confirm = confirm
        self.out = out
        self.finder = finder
        self.terminator = terminator

    # ---- target resolution ---------------------------------------------

    def _target(self, alias: str, source: Path) -> PublishTarget:
        return PublishTarget(
            alias=alias,
            source_path=source,
            destination=self.services.serve.docroot / alias,
            home_dir=self.user.home,
        )

    def resolve_alias(self, alias: str) -> PublishTarget:
        """Record first, then whatever the mount table says is at the destination."""
        try:
            validate_alias(alias)
        except UsageError as exc:
            raise RecoveryAmbiguityError(f"Cannot determine source for {alias!r}: {exc}") from exc

        source = self.services.records.read(alias)
        if source is None:
            destination = self.services.serve.docroot / alias
            source = self.services.mounts.resolve_mount_source(destination)
            if source is not None:
                logger.info("No record for %s; mount table says %s", alias, source)
        if source is None:
            raise RecoveryAmbiguityError(
                f"Cannot determine source for '{alias}': no record and nothing mounted at "
                f"{self.services.serve.docroot / alias}.",
                context={"alias": alias},
            )
        return self._target(alias, source)

    def resolve_target(self, argument: str) -> PublishTarget:
        """An existing path is taken as the source itself; anything else is an alias."""
        resolved = self.services.resolver.resolve(argument)
        if resolved.exists():
            return self._target(resolved.name, resolved)
        return self.resolve_alias(argument)

    def select_alias(self, aliases: Sequence[str]) -> Optional[str]:
        """Show recorded publishes and read one alias name. None means abort."""
        self.out("Active publishes:")
        for alias in aliases:
            source = self.services.records.read(alias)
            self.out(f"  {alias}  ->  {source if source is not None else '?'}")
        choice = self.prompt("Alias to clean (empty to abort): ").strip()
        if not choice:
            return None
        if choice not in aliases:
            raise RecoveryAmbiguityError(f"No recorded publish named '{choice}'.")
        return choice

    # ---- lingering sessions --------------------------------------------

    def stop_lingering(self, target: PublishTarget) -> tuple[List[ProcessMatch], Optional[TerminationResult]]:
        candidates = self.finder(
            lingering_patterns(target),
            include_environment=self.services.recovery.match_environment,
        )
        if not candidates:
            logger.debug("No processes reference %s", target.alias)
            return [], None

        self.out("These processes look like they still reference this publish:")
        for match in candidates:
            self.out(f"  {match.pid}  {match.cmdline}")
        if not self.confirm("Terminate them?"):
            self.out("Leaving them running.")
            return candidates, None

        grace = self.services.recovery.terminate_grace_seconds
        result = self.terminator([m.pid for m in candidates], grace_seconds=grace)
        if result.terminated:
            self.out(f"Terminated: {', '.join(str(p) for p in result.terminated)}")
        if result.killed:
            self.out(f"Killed after {grace:g}s: {', '.join(str(p) for p in result.killed)}")
        return candidates, result

    # ---- entry point ---------------------------------------------------

    def clean(self, argument: Optional[str] = None) -> CleanResult:
        if argument is None or not argument.strip():
            aliases = self.services.records.list_aliases()
            if not aliases:
                self.out("No active publishes recorded; nothing to clean.")
                return CleanResult(status=NOTHING)
            choice = self.select_alias(aliases)
            if choice is None:
                self.out("Aborted.")
                return CleanResult(status=ABORTED)
            target = self.resolve_alias(choice)
        else:
            target = self.resolve_target(argument.strip())

        if not self.confirm(
            f"Remove publish '{target.alias}' (source {target.source_path}, "
            f"mounted at {target.destination})?"
        ):
            self.out("Aborted.")
            return CleanResult(status=ABORTED, target=target)

        candidates, termination = self.stop_lingering(target)

        self.out("Cleaning up...")
        report = teardown_publish(target, self.services)
        self.out("Done.")
        return CleanResult(
            status=CLEANED,
            target=target,
            report=report,
            candidates=candidates,
            termination=termination,
        )


__all__ = [
    "ABORTED",
    "CLEANED",
    "NOTHING",
    "CleanResult",
    "RecoveryController",
    "lingering_patterns",
]
