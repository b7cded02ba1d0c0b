"""
Tests for lingering-session discovery and termination.

IMPORTANT: The termination tests use REAL psutil calls on real child
processes (NO MOCKS); pattern matching is also checked against fake
process objects so the heuristic itself is deterministic.
"""

import os
import subprocess
import sys
import uuid

import psutil
import pytest

from aserve.core.process.inspector import (
    ancestor_pids,
    find_candidate_processes,
    terminate_processes,
)

from tests.helpers.fakes import FakeProcess


class TestAncestors:
    def test_includes_self_and_parent(self):
        pids = ancestor_pids()
        assert os.getpid() in pids
        assert os.getppid() in pids


class TestFindCandidates:
    """Pattern matching against a fixed process list."""

    PROCS = [
        FakeProcess(10, ["bash"]),
        FakeProcess(11, ["sudo", "aserve", "/home/u/site"]),
        FakeProcess(12, ["python3", "-m", "http.server"], env={"PWD": "/var/www/html/site"}),
        FakeProcess(13, []),
    ]

    def test_matches_cmdline(self):
        matches = find_candidate_processes(["/home/u/site"], exclude=[], processes=self.PROCS)
        assert [m.pid for m in matches] == [11]
        assert matches[0].cmdline == "sudo aserve /home/u/site"
        assert matches[0].matched == ("/home/u/site",)

    def test_matches_environment(self):
        matches = find_candidate_processes(["/var/www/html/site"], exclude=[], processes=self.PROCS)
        assert [m.pid for m in matches] == [12]
        assert matches[0].cmdline == "python3 -m http.server"

    def test_environment_matching_disabled(self):
        matches = find_candidate_processes(
            ["/var/www/html/site"],
            exclude=[],
            include_environment=False,
            processes=self.PROCS,
        )
        assert matches == []

    def test_excluded_pids_skipped(self):
        matches = find_candidate_processes(["site"], exclude=[11], processes=self.PROCS)
        assert [m.pid for m in matches] == [12]

    def test_empty_patterns_match_nothing(self):
        assert find_candidate_processes(["", "  "], exclude=[], processes=self.PROCS) == []

    def test_current_process_and_ancestors_excluded_by_default(self):
        own = psutil.Process().cmdline()[0]
        matches = find_candidate_processes([own], include_environment=False)
        assert not ancestor_pids() & {m.pid for m in matches}


@pytest.fixture
def sleeper():
    marker = f"aserve-sleeper-{uuid.uuid4().hex}"
    proc = subprocess.Popen([sys.executable, "-c", "import time, sys; time.sleep(60)", marker])
    yield proc, marker
    if proc.poll() is None:
        proc.kill()
    proc.wait(timeout=5)


class TestRealProcesses:
    def test_finds_child_by_argument(self, sleeper):
        proc, marker = sleeper
        matches = find_candidate_processes([marker], include_environment=False)
        assert proc.pid in [m.pid for m in matches]

    def test_terminate(self, sleeper):
        proc, _marker = sleeper

        result = terminate_processes([proc.pid], grace_seconds=5)

        assert proc.wait(timeout=5) is not None
        assert proc.pid in result.terminated

    def test_kill_after_grace(self):
        code = "import signal, time; signal.signal(signal.SIGTERM, signal.SIG_IGN); print('ready', flush=True); time.sleep(60)"
        proc = subprocess.Popen([sys.executable, "-c", code], stdout=subprocess.PIPE, text=True)
        try:
            assert proc.stdout.readline().strip() == "ready"
            result = terminate_processes([proc.pid], grace_seconds=0.3)
            assert proc.wait(timeout=5) is not None
            assert proc.pid in result.killed
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait(timeout=5)

    def test_already_gone(self):
        proc = subprocess.Popen([sys.executable, "-c", "pass"])
        proc.wait(timeout=5)

        result = terminate_processes([proc.pid], grace_seconds=0.1)

        assert result.gone == [proc.pid]
