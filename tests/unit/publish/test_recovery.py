"""Tests for out-of-process cleanup.

Process discovery and termination are injected; ``tests/process`` covers
the psutil side.
"""
from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from aserve.core.exceptions import RecoveryAmbiguityError
from aserve.core.process import ProcessMatch, TerminationResult
from aserve.core.publish import PublishSession, RecoveryController
from aserve.core.publish.recovery import ABORTED, CLEANED, NOTHING, lingering_patterns

from tests.helpers.fakes import mountinfo_line


class Recorder:
    """Scripted prompt/confirm answers plus a transcript of what was shown."""

    def __init__(self, answers: List[str] = (), confirms: List[bool] = ()) -> None:
        self.answers = list(answers)
        self.confirms = list(confirms)
        self.lines: List[str] = []
        self.questions: List[str] = []
        self.finder_calls: List[tuple] = []
        self.terminated: List[List[int]] = []
        self.matches: List[ProcessMatch] = []

    def prompt(self, message: str) -> str:
        self.questions.append(message)
        return self.answers.pop(0) if self.answers else ""

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.confirms.pop(0) if self.confirms else False

    def finder(self, patterns, **kwargs):
        self.finder_calls.append((list(patterns), kwargs))
        return list(self.matches)

    def terminator(self, pids, *, grace_seconds):
        self.terminated.append(list(pids))
        return TerminationResult(terminated=list(pids))


def _controller(env, rec: Recorder) -> RecoveryController:
    return RecoveryController(
        env.services,
        user=env.user,
        prompt=rec.prompt,
        confirm=rec.confirm,
        out=rec.lines.append,
        finder=rec.finder,
        terminator=rec.terminator,
    )


def _abandoned_publish(env, alias=None):
    """A publish whose process died without cleaning up."""
    session = PublishSession(
        env.services, str(env.site), alias, user=env.user, out=lambda _l: None, install_signals=False
    )
    return session.start()


class TestCleanByAlias:
    def test_record_path_no_processes(self, publish_env):
        target = _abandoned_publish(publish_env)
        rec = Recorder(confirms=[True])

        result = _controller(publish_env, rec).clean("site")

        assert result.status == CLEANED
        assert result.target.source_path == publish_env.site
        assert not publish_env.system.mounted_at(target.destination)
        assert not target.destination.exists()
        assert publish_env.system.acls == {}
        assert publish_env.services.records.list_aliases() == []
        # one confirmation for the clean itself, none for termination
        assert len(rec.questions) == 1
        assert rec.terminated == []
        assert rec.lines[-2:] == ["Cleaning up...", "Done."]

    def test_record_resolves_recorded_source(self, publish_env):
        _abandoned_publish(publish_env, alias="docs")
        rec = Recorder(confirms=[True])

        result = _controller(publish_env, rec).clean("docs")

        assert result.target.alias == "docs"
        assert result.target.source_path == publish_env.site

    def test_mount_table_fallback_matches_record_path(self, tmp_path, publish_env):
        target = _abandoned_publish(publish_env)
        publish_env.services.records.delete("site")
        rec = Recorder(confirms=[True])

        result = _controller(publish_env, rec).clean("site")

        assert result.status == CLEANED
        assert result.target.source_path == publish_env.site
        assert not target.destination.exists()
        assert publish_env.system.acls == {}

    def test_mount_table_fallback_with_source_published_twice(self, publish_env):
        _abandoned_publish(publish_env)
        second = _abandoned_publish(publish_env)
        assert second.alias != "site"
        publish_env.services.records.delete(second.alias)
        rec = Recorder(confirms=[True])

        result = _controller(publish_env, rec).clean(second.alias)

        assert result.target.source_path == publish_env.site
        assert not second.destination.exists()
        touched = {Path(c[-1]) for c in publish_env.system.calls_for("setfacl")}
        assert not any(p == publish_env.docroot or publish_env.docroot in p.parents for p in touched)
        assert publish_env.system.mounted_at(publish_env.docroot / "site")

    def test_unknown_alias_is_ambiguous(self, publish_env):
        with pytest.raises(RecoveryAmbiguityError) as exc:
            _controller(publish_env, Recorder()).clean("ghost")
        assert "ghost" in str(exc.value)
        assert exc.value.exit_code == 1
        assert publish_env.system.calls == []

    def test_invalid_alias_is_ambiguous(self, publish_env):
        with pytest.raises(RecoveryAmbiguityError):
            _controller(publish_env, Recorder()).clean("../x")

    def test_declined_confirmation_aborts(self, publish_env):
        target = _abandoned_publish(publish_env)
        publish_env.system.calls.clear()
        rec = Recorder(confirms=[False])

        result = _controller(publish_env, rec).clean("site")

        assert result.status == ABORTED
        assert publish_env.system.calls == []
        assert publish_env.system.mounted_at(target.destination)


class TestCleanByPath:
    def test_existing_path_uses_basename_alias(self, publish_env):
        target = _abandoned_publish(publish_env)
        rec = Recorder(confirms=[True])

        result = _controller(publish_env, rec).clean(str(publish_env.site))

        assert result.target.alias == "site"
        assert result.target.source_path == publish_env.site
        assert not target.destination.exists()

    def test_relative_path(self, publish_env, monkeypatch):
        _abandoned_publish(publish_env)
        monkeypatch.chdir(publish_env.home)
        rec = Recorder(confirms=[True])

        assert _controller(publish_env, rec).clean("site/").target.source_path == publish_env.site


class TestInteractiveSelection:
    def test_nothing_recorded(self, publish_env):
        rec = Recorder()

        result = _controller(publish_env, rec).clean()

        assert result.status == NOTHING
        assert rec.questions == []

    def test_empty_answer_aborts(self, publish_env):
        _abandoned_publish(publish_env)
        rec = Recorder(answers=[""])

        result = _controller(publish_env, rec).clean(None)

        assert result.status == ABORTED
        assert f"  site  ->  {publish_env.site}" in rec.lines
        assert publish_env.services.records.list_aliases() == ["site"]

    def test_selected_alias_is_cleaned(self, publish_env):
        _abandoned_publish(publish_env)
        rec = Recorder(answers=["site"], confirms=[True])

        assert _controller(publish_env, rec).clean().status == CLEANED
        assert publish_env.services.records.list_aliases() == []

    def test_unlisted_answer_is_ambiguous(self, publish_env):
        _abandoned_publish(publish_env)
        with pytest.raises(RecoveryAmbiguityError):
            _controller(publish_env, Recorder(answers=["other"])).clean()


class TestLingeringProcesses:
    def test_patterns(self, publish_env):
        target = _abandoned_publish(publish_env)
        assert lingering_patterns(target) == [
            str(publish_env.site),
            str(publish_env.docroot / "site"),
            "site",
            "site",
        ]

    def test_matches_are_confirmed_then_terminated_before_teardown(self, publish_env):
        _abandoned_publish(publish_env)
        publish_env.system.calls.clear()
        rec = Recorder(confirms=[True, True])
        rec.matches = [ProcessMatch(pid=4242, cmdline=f"aserve {publish_env.site}", matched=("site",))]

        result = _controller(publish_env, rec).clean("site")

        assert rec.terminated == [[4242]]
        assert result.termination.terminated == [4242]
        assert len(rec.questions) == 2
        assert "  4242  aserve " + str(publish_env.site) in rec.lines
        assert rec.finder_calls[0][1] == {"include_environment": True}
        assert publish_env.system.programs()[0] == "umount"

    def test_declining_termination_still_cleans(self, publish_env):
        _abandoned_publish(publish_env)
        rec = Recorder(confirms=[True, False])
        rec.matches = [ProcessMatch(pid=4242, cmdline="aserve site")]

        result = _controller(publish_env, rec).clean("site")

        assert result.status == CLEANED
        assert rec.terminated == []
        assert result.termination is None

    def test_environment_matching_can_be_disabled(self, tmp_path):
        from tests.helpers.env import PublishEnv

        env = PublishEnv.create(tmp_path, {"recovery": {"match_environment": False}})
        _abandoned_publish(env)
        rec = Recorder(confirms=[True])

        _controller(env, rec).clean("site")

        assert rec.finder_calls[0][1] == {"include_environment": False}


def test_mount_only_publish_from_foreign_fixture(publish_env):
    """A destination mounted by something else, with no record, still resolves."""
    source = publish_env.home / "other"
    source.mkdir()
    dest = publish_env.docroot / "other"
    dest.mkdir()
    with open(publish_env.system.mountinfo, "a", encoding="utf-8") as f:
        f.write(mountinfo_line(900, str(source), str(dest)))

    result = _controller(publish_env, Recorder(confirms=[True])).clean("other")

    assert result.target.source_path == Path(source)
    assert not dest.exists()
