import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'aserve' and the repo root importable for 'tests.helpers'
for p in (SRC_ROOT, REPO_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from aserve.core.stdlib_logging import reset_stdlib_logging_for_tests
from tests.helpers.cache_utils import reset_aserve_caches
from tests.helpers.env import PublishEnv


@pytest.fixture(autouse=True)
def _isolate_aserve(tmp_path_factory, monkeypatch):
    """Never read the host's /etc/aserve overlay or inherit ASERVE_* overrides."""
    for key in list(os.environ):
        if key.startswith("ASERVE_"):
            monkeypatch.delenv(key, raising=False)
    overlay = tmp_path_factory.mktemp("etc") / "config.yaml"
    monkeypatch.setenv("ASERVE_CONFIG", str(overlay))
    reset_aserve_caches()
    yield
    reset_aserve_caches()
    reset_stdlib_logging_for_tests()


@pytest.fixture
def publish_env(tmp_path) -> PublishEnv:
    """Fake-tool publish environment rooted in tmp_path."""
    return PublishEnv.create(tmp_path)


@pytest.fixture
def system_overlay() -> Path:
    """Path of the (initially absent) system config overlay for this test."""
    return Path(os.environ["ASERVE_CONFIG"])
