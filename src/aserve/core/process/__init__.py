"""Process inspection for lingering publish sessions."""

from .inspector import (
    ProcessMatch,
    TerminationResult,
    ancestor_pids,
    find_candidate_processes,
    terminate_processes,
)

__all__ = [
    "ProcessMatch",
    "TerminationResult",
    "ancestor_pids",
    "find_candidate_processes",
    "terminate_processes",
]
