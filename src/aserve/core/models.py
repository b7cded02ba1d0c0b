from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class PublishRecord:
    """Persisted alias -> source mapping for one active publish."""

    alias: str
    source_path: Path


@dataclass(frozen=True)
class PublishTarget:
    """Everything teardown needs to know about one publish.

    Built once at session start (or reconstructed by recovery) and passed
    explicitly to every teardown step.
    """

    alias: str
    source_path: Path
    destination: Path
    home_dir: Optional[Path] = None


class SessionState(str, Enum):
    RESOLVING = "resolving"
    VALIDATED = "validated"
    GRANTED = "granted"
    MOUNTED = "mounted"
    RECORDED = "recorded"
    SERVING = "serving"
    TEARING_DOWN = "tearing_down"
    DONE = "done"


@dataclass(frozen=True)
class StepOutcome:
    """Result of one best-effort sub-operation.

    ``skipped`` means the capability was not available (for example
    ``setfacl`` is not installed); it is neither a success nor a warning.
    """

    step: str
    target: str
    ok: bool
    skipped: bool = False
    detail: str = ""

    @classmethod
    def success(cls, step: str, target: object, detail: str = "") -> "StepOutcome":
        return cls(step=step, target=str(target), ok=True, detail=detail)

    @classmethod
    def failure(cls, step: str, target: object, detail: str) -> "StepOutcome":
        return cls(step=step, target=str(target), ok=False, detail=detail)

    @classmethod
    def skip(cls, step: str, target: object, detail: str = "") -> "StepOutcome":
        return cls(step=step, target=str(target), ok=True, skipped=True, detail=detail)


@dataclass
class GrantReport:
    """Outcomes of a grant or revoke over a whole grant chain."""

    outcomes: List[StepOutcome] = field(default_factory=list)

    @property
    def failures(self) -> List[StepOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def unavailable(self) -> bool:
        """True when every step was skipped because ACL tooling is missing."""
        return bool(self.outcomes) and all(o.skipped for o in self.outcomes)


@dataclass
class TeardownReport:
    outcomes: List[StepOutcome] = field(default_factory=list)

    def add(self, outcome: StepOutcome) -> StepOutcome:
        self.outcomes.append(outcome)
        return outcome

    def extend(self, outcomes: List[StepOutcome]) -> None:
        self.outcomes.extend(outcomes)

    @property
    def warnings(self) -> List[StepOutcome]:
        return [o for o in self.outcomes if not o.ok]


__all__ = [
    "GrantReport",
    "PublishRecord",
    "PublishTarget",
    "SessionState",
    "StepOutcome",
    "TeardownReport",
]
