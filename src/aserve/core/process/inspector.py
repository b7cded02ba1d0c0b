"""
Heuristic discovery of lingering publish sessions.

A foreground ``aserve publish`` that lost its terminal keeps its mount and
ACLs alive. ``clean`` finds such processes by substring-matching their
command line (and, optionally, environment) against the source path,
destination, alias and source basename.

IMPORTANT
---------
This is a heuristic. A short alias such as ``site`` matches any process
mentioning "site"; a session started through a wrapper that hides its
arguments is missed. Candidates are always shown to the operator for
confirmation before anything is signalled.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set

import psutil

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessMatch:
    pid: int
    cmdline: str
    matched: tuple[str, ...] = ()


@dataclass
class TerminationResult:
    terminated: List[int] = field(default_factory=list)
    killed: List[int] = field(default_factory=list)
    gone: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)


def ancestor_pids(pid: Optional[int] = None) -> Set[int]:
    """Return ``pid`` (default: this process) and every ancestor's pid.

    Walks up the process tree until init or an unreadable parent.
    """
    out: Set[int] = set()
    try:
        current: Optional[psutil.Process] = psutil.Process(pid or os.getpid())
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return {pid or os.getpid()}

    while current is not None:
        out.add(current.pid)
        try:
            current = current.parent()
        except (psutil.NoSuchProcess, psutil.ZombieProcess, psutil.AccessDenied):
            break
    return out


def _process_text(proc: psutil.Process, *, include_environment: bool) -> Optional[str]:
    try:
        cmdline = proc.cmdline()
    except (psutil.NoSuchProcess, psutil.ZombieProcess):
        return None
    except psutil.AccessDenied:
        cmdline = []
    if not cmdline:
        # kernel threads and processes we cannot read
        return None

    text = " ".join(cmdline)
    if include_environment:
        try:
            env = proc.environ()
        except (psutil.NoSuchProcess, psutil.ZombieProcess, psutil.AccessDenied):
            env = {}
        if env:
            text = text + "\n" + "\n".join(f"{k}={v}" for k, v in env.items())
    return text


def find_candidate_processes(
    patterns: Sequence[str],
    *,
    exclude: Optional[Iterable[int]] = None,
    include_environment: bool = True,
    processes: Optional[Iterable[psutil.Process]] = None,
) -> List[ProcessMatch]:
    """Return processes whose command line/environment contains any pattern.

    Args:
        patterns: Substrings to look for; empty strings are ignored.
        exclude: PIDs never to report (defaults to this process and its
            ancestors, which include the ``sudo`` running us).
        include_environment: Also search ``KEY=value`` environment text.
        processes: Process iterable to scan (defaults to ``psutil.process_iter()``).
    """
    needles = sorted({p for p in patterns if p and p.strip()})
    if not needles:
        return []
    skip = set(exclude) if exclude is not None else ancestor_pids()

    matches: List[ProcessMatch] = []
    for proc in processes if processes is not None else psutil.process_iter():
        if proc.pid in skip:
            continue
        text = _process_text(proc, include_environment=include_environment)
        if text is None:
            continue
        hits = tuple(n for n in needles if n in text)
        if not hits:
            continue
        first_line = text.split("\n", 1)[0]
        matches.append(ProcessMatch(pid=proc.pid, cmdline=first_line, matched=hits))
    matches.sort(key=lambda m: m.pid)
    return matches


def terminate_processes(pids: Sequence[int], *, grace_seconds: float = 2.0) -> TerminationResult:
    """SIGTERM each process, wait ``grace_seconds``, SIGKILL the survivors."""
    result = TerminationResult()
    procs: List[psutil.Process] = []
    for pid in pids:
        try:
            proc = psutil.Process(pid)
            proc.terminate()
        except psutil.NoSuchProcess:
            result.gone.append(pid)
            continue
        except psutil.AccessDenied as exc:
            logger.warning("Cannot signal process %s: %s", pid, exc)
            result.failed.append(pid)
            continue
        procs.append(proc)

    gone, alive = psutil.wait_procs(procs, timeout=max(0.0, float(grace_seconds)))
    result.terminated.extend(p.pid for p in gone)

    killed: List[psutil.Process] = []
    for proc in alive:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            result.terminated.append(proc.pid)
            continue
        except psutil.AccessDenied as exc:
            logger.warning("Cannot kill process %s: %s", proc.pid, exc)
            result.failed.append(proc.pid)
            continue
        result.killed.append(proc.pid)
        killed.append(proc)

    if killed:
        psutil.wait_procs(killed, timeout=1.0)
    return result


__all__ = [
    "ProcessMatch",
    "TerminationResult",
    "ancestor_pids",
    "find_candidate_processes",
    "terminate_processes",
]
