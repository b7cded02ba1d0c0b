"""Tests for the interactive confirm/prompt helpers."""
from __future__ import annotations

import builtins

import pytest

from aserve.core.config.domains import CliConfig
from aserve.core.utils.cli import confirm, prompt


def _answer(monkeypatch, text):
    def fake_input(message=""):
        if isinstance(text, BaseException):
            raise text
        return text

    monkeypatch.setattr(builtins, "input", fake_input)


@pytest.mark.parametrize("text,expected", [("y", True), ("YES", True), ("n", False), ("no", False)])
def test_explicit_answers(monkeypatch, text, expected):
    _answer(monkeypatch, text)
    assert confirm("Proceed?") is expected


def test_empty_answer_uses_configured_default(monkeypatch):
    _answer(monkeypatch, "")
    cfg = CliConfig({"cli": {"confirm": {"default": True}}})
    assert confirm("Proceed?", cli_config=cfg) is True


def test_eof_means_default(monkeypatch):
    _answer(monkeypatch, EOFError())
    assert confirm("Proceed?") is False


def test_assume_yes_env(monkeypatch, capsys):
    monkeypatch.setenv("ASERVE_YES", "1")
    _answer(monkeypatch, AssertionError("must not prompt"))
    cfg = CliConfig({"cli": {"confirm": {"assume_yes_env": "ASERVE_YES"}}})

    assert confirm("Remove publish?", cli_config=cfg) is True
    assert "Remove publish?" in capsys.readouterr().out


def test_prompt_eof_is_empty(monkeypatch):
    _answer(monkeypatch, EOFError())
    assert prompt("Alias: ") == ""
