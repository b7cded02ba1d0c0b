"""Test helpers for the aserve test suite.

- fakes: FakeSystem command runner (setfacl/mount/umount/systemctl) and FakeProcess
- env: PublishEnv, a tmp_path-rooted docroot/state/mountinfo with wired services
- cache_utils: reset module-level caches between tests
"""
from __future__ import annotations

from tests.helpers.cache_utils import reset_aserve_caches
from tests.helpers.env import PublishEnv, make_config
from tests.helpers.fakes import FakeProcess, FakeSystem, completed, mountinfo_line

__all__ = [
    "FakeProcess",
    "FakeSystem",
    "PublishEnv",
    "completed",
    "make_config",
    "mountinfo_line",
    "reset_aserve_caches",
]
