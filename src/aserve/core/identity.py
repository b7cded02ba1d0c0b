"""Invoking-user identity.

aserve runs as root (through sudo) but the ACL grant chain stops at the
home directory of the human who invoked it, and the browser is opened in
that user's session. This module answers "who is that user?" separately
from the privileged execution identity.

Resolution order:
1. ``SUDO_USER`` (ignored when it is ``root``)
2. the controlling terminal's login name (``logname`` equivalent)
3. nobody; the grant chain then runs up to ``/``
"""

from __future__ import annotations

import logging
import os
import pwd
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvokingUser:
    name: Optional[str]
    home: Optional[Path]
    uid: Optional[int] = None

    @property
    def known(self) -> bool:
        return bool(self.name)


def _login_name() -> Optional[str]:
    try:
        return os.getlogin()
    except OSError:
        return None


def _lookup_home(name: str) -> tuple[Optional[Path], Optional[int]]:
    try:
        entry = pwd.getpwnam(name)
    except KeyError:
        logger.debug("No passwd entry for %s", name)
        return None, None
    home = entry.pw_dir.strip()
    return (Path(home) if home else None), entry.pw_uid


def resolve_invoking_user(env: Optional[Mapping[str, str]] = None) -> InvokingUser:
    """Return the unprivileged user behind this invocation."""
    environ = os.environ if env is None else env
    name = (environ.get("SUDO_USER") or "").strip()
    if not name or name == "root":
        name = (_login_name() or "").strip()
    if not name:
        return InvokingUser(name=None, home=None)
    home, uid = _lookup_home(name)
    return InvokingUser(name=name, home=home, uid=uid)


def is_privileged() -> bool:
    """True when running with an effective uid of 0."""
    return os.geteuid() == 0


__all__ = ["InvokingUser", "resolve_invoking_user", "is_privileged"]
