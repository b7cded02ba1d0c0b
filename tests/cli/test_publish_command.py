"""Tests for `aserve publish`."""
from __future__ import annotations

import argparse
import signal

import pytest

from aserve.cli.commands import publish as publish_cmd
from aserve.core import identity
from aserve.core.publish import PublishSession, SessionTerminated


def _parse(argv):
    parser = argparse.ArgumentParser()
    publish_cmd.register_args(parser)
    return parser.parse_args(argv)


@pytest.fixture
def wired(publish_env, monkeypatch):
    """Run the command against the fake environment; the session is interrupted at once."""

    def interrupt(_seconds):
        raise SessionTerminated(signal.SIGINT)

    def session_factory(services, source, alias=None, **kwargs):
        kwargs.update(sleep=interrupt, install_signals=False, user=publish_env.user)
        return PublishSession(publish_env.services, source, alias, **kwargs)

    monkeypatch.setattr(identity, "is_privileged", lambda: True)
    monkeypatch.setattr(publish_cmd, "build_services", lambda: publish_env.services)
    monkeypatch.setattr(publish_cmd, "PublishSession", session_factory)
    return publish_env


def test_args():
    args = _parse(["--open", "/home/u/site", "docs"])
    assert args.path == "/home/u/site"
    assert args.alias == "docs"
    assert args.open_browser is True
    assert args.verbose is False


def test_publish_and_interrupt(wired, capsys):
    rc = publish_cmd.main(_parse([str(wired.site)]))

    out = capsys.readouterr().out
    assert rc == 0
    assert "Now serving" in out and "http://localhost/site" in out
    assert out.rstrip().endswith("Done.")
    assert not (wired.docroot / "site").exists()
    assert wired.system.acls == {}


def test_missing_directory(wired, capsys):
    missing = wired.home / "nope"

    rc = publish_cmd.main(_parse([str(missing)]))

    assert rc == 1
    assert capsys.readouterr().err.strip() == f"Error: The directory {missing} does not exist."
    assert wired.system.calls == []


def test_invalid_alias(wired, capsys):
    rc = publish_cmd.main(_parse([str(wired.site), "a/b"]))

    assert rc == 2
    assert "Invalid alias" in capsys.readouterr().err
    assert wired.system.calls == []


def test_mount_failure_exit_code(wired, capsys):
    wired.system.failures["mount"] = 32

    rc = publish_cmd.main(_parse([str(wired.site)]))

    assert rc == 1
    assert "Bind mount" in capsys.readouterr().err
    assert wired.system.acls == {}


def test_unprivileged_touches_nothing(publish_env, monkeypatch, capsys):
    monkeypatch.setattr(identity, "is_privileged", lambda: False)
    monkeypatch.setattr(publish_cmd, "build_services", lambda: publish_env.services)
    before = sorted(p.name for p in publish_env.root.rglob("*"))

    rc = publish_cmd.main(_parse([str(publish_env.site)]))

    assert rc == 2
    assert publish_env.system.calls == []
    assert sorted(p.name for p in publish_env.root.rglob("*")) == before
