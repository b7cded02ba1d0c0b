"""Tests for invoking-user resolution."""
from __future__ import annotations

import pwd
from pathlib import Path

from aserve.core import identity
from aserve.core.identity import InvokingUser, resolve_invoking_user


def _passwd(name: str, home: str, uid: int = 1000):
    return pwd.struct_passwd((name, "x", uid, uid, "", home, "/bin/sh"))


class TestResolveInvokingUser:
    def test_sudo_user_wins(self, monkeypatch):
        monkeypatch.setattr(identity.pwd, "getpwnam", lambda n: _passwd(n, f"/home/{n}"))
        monkeypatch.setattr(identity, "_login_name", lambda: "someone-else")

        user = resolve_invoking_user({"SUDO_USER": "alice"})

        assert user == InvokingUser(name="alice", home=Path("/home/alice"), uid=1000)
        assert user.known

    def test_root_sudo_user_falls_back_to_login_name(self, monkeypatch):
        monkeypatch.setattr(identity.pwd, "getpwnam", lambda n: _passwd(n, f"/home/{n}"))
        monkeypatch.setattr(identity, "_login_name", lambda: "bob")

        assert resolve_invoking_user({"SUDO_USER": "root"}).name == "bob"

    def test_nobody_known(self, monkeypatch):
        monkeypatch.setattr(identity, "_login_name", lambda: None)

        user = resolve_invoking_user({})

        assert user.name is None
        assert user.home is None
        assert not user.known

    def test_unknown_account_has_no_home(self, monkeypatch):
        def missing(name):
            raise KeyError(name)

        monkeypatch.setattr(identity.pwd, "getpwnam", missing)

        user = resolve_invoking_user({"SUDO_USER": "ghost"})

        assert user.name == "ghost"
        assert user.home is None

    def test_blank_home_treated_as_unknown(self, monkeypatch):
        monkeypatch.setattr(identity.pwd, "getpwnam", lambda n: _passwd(n, "  "))

        assert resolve_invoking_user({"SUDO_USER": "carol"}).home is None
