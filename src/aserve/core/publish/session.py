"""Foreground publish session.

One ``PublishSession`` owns one publish from start-up to teardown::

    RESOLVING -> VALIDATED -> GRANTED -> MOUNTED -> RECORDED -> SERVING
        -> TEARING_DOWN -> DONE

Any state can jump to TEARING_DOWN; teardown then undoes only what was
actually acquired (grant, mount, record). Teardown runs exactly once per
session whether it is triggered by a signal, by an error during start-up,
by ``wait`` returning, or by interpreter exit (``atexit``).
"""
from __future__ import annotations

import atexit
import logging
import signal
import time
from typing import Callable, Dict, List, Optional

from aserve.core.browser import open_url
from aserve.core.identity import InvokingUser, resolve_invoking_user
from aserve.core.models import PublishTarget, SessionState, TeardownReport

from .services import PublishServices
from .teardown import teardown_publish

logger = logging.getLogger(__name__)

SERVE_FOREVER_INTERVAL = 86400.0


class SessionTerminated(BaseException):
    """Raised in the main thread by the termination signal handler.

    Derives from BaseException so no ``except Exception`` inside a
    collaborator can swallow it.
    """

    def __init__(self, signum: int) -> None:
        self.signum = signum
        try:
            name = signal.Signals(signum).name
        except ValueError:
            name = str(signum)
        self.signal_name = name
        super().__init__(name)


class PublishSession:
    """Orchestrates grant -> mount -> record -> reload -> wait -> teardown."""

    def __init__(
        self,
        services: PublishServices,
        source: str,
        alias: Optional[str] = None,
        *,
        user: Optional[InvokingUser] = None,
        open_browser: bool = False,
        out: Callable[[str], None] = print,
        sleep: Callable[[float], None] = time.sleep,
        install_signals: bool = True,
    ) -> None:
        self.services = services
        self.source_arg = source
        self.requested_alias = alias
        self.user = user if user is not None else resolve_invoking_user()
        self.open_browser = open_browser
        self.out = out
        self.sleep = sleep
        self.install_signals = install_signals

        self.state = SessionState.RESOLVING
        self.history: List[SessionState] = [SessionState.RESOLVING]
        self.target: Optional[PublishTarget] = None
        self.url: Optional[str] = None
        self.teardown_report: Optional[TeardownReport] = None

        self._granted = False
        self._mounted = False
        self._record_attempted = False
        self._torn_down = False
        self._previous_handlers: Dict[int, object] = {}

    # ---- state ---------------------------------------------------------

    def _transition(self, state: SessionState) -> None:
        logger.debug("session %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    # ---- start-up ------------------------------------------------------

    def start(self) -> PublishTarget:
        """Acquire everything and reach SERVING (without blocking).

        Raises:
            PublishValidationError: source is not an existing directory.
            UsageError: requested alias is not a valid name.
            ResourceError: destination could not be created or mounted.
        """
        svc = self.services
        source = svc.resolver.resolve_directory(self.source_arg)
        self._transition(SessionState.VALIDATED)

        allocation = svc.allocator.allocate(source, self.requested_alias)
        self.target = PublishTarget(
            alias=allocation.alias,
            source_path=source,
            destination=allocation.destination,
            home_dir=self.user.home,
        )

        self.out(f"Granting minimal ACLs for {svc.serve.server_user}...")
        # Flags go up before each step: a signal can land mid-step, and
        # revoke and unmount are both safe on something never acquired.
        self._granted = True
        grant = svc.grantor.grant(source, self.user.home)
        if grant.failures:
            logger.warning(
                "%d ACL grant(s) failed; %s may be unable to read %s (expect HTTP 403).",
                len(grant.failures),
                svc.serve.server_user,
                source,
            )
        elif grant.unavailable:
            logger.info("ACL tooling unavailable; permissions left unchanged.")
        self._transition(SessionState.GRANTED)

        self.out(f"Mounting {source} -> {allocation.destination} (bind mount)...")
        self._mounted = True
        svc.mounts.mount(source, allocation.destination)
        self._transition(SessionState.MOUNTED)

        self._record_attempted = True
        try:
            svc.records.write(allocation.alias, source)
        except OSError as exc:
            logger.warning(
                "Could not record %s (%s); a later clean must find it through the mount table.",
                allocation.alias,
                exc,
            )
        self._transition(SessionState.RECORDED)

        self.out("Reloading web server...")
        svc.reloader.reload()

        self.url = svc.public_url(allocation.alias)
        self._transition(SessionState.SERVING)
        self.out(f"Now serving {source} at {self.url}")
        self.out("Press Ctrl+C to stop and clean up.")

        if self.open_browser:
            open_url(self.url, self.user, command=svc.browser.command)
        return self.target

    def wait(self) -> None:
        """Block until a termination signal arrives."""
        while True:
            self.sleep(SERVE_FOREVER_INTERVAL)

    # ---- teardown ------------------------------------------------------

    def teardown(self) -> Optional[TeardownReport]:
        """Undo whatever was acquired. Only the first call does anything."""
        if self._torn_down:
            return self.teardown_report
        self._torn_down = True
        self._ignore_signals()
        self._transition(SessionState.TEARING_DOWN)

        if self.target is not None and self._granted:
            # Start on a fresh line so "^C" does not run into the message.
            self.out("\nCleaning up...")
            self.teardown_report = teardown_publish(
                self.target,
                self.services,
                mounted=self._mounted,
                granted=self._granted,
                recorded=self._record_attempted,
            )
            self.out("Done.")

        self._transition(SessionState.DONE)
        return self.teardown_report

    # ---- finalizers ----------------------------------------------------

    def _handle_signal(self, signum: int, frame: object) -> None:
        raise SessionTerminated(signum)

    def _signals(self) -> List[int]:
        out: List[int] = []
        for name in self.services.serve.signals:
            sig = getattr(signal, name, None)
            if isinstance(sig, signal.Signals):
                out.append(int(sig))
            else:
                logger.debug("Ignoring unknown signal name %s", name)
        return out

    def _register_finalizers(self) -> None:
        atexit.register(self.teardown)
        if not self.install_signals:
            return
        for sig in self._signals():
            self._previous_handlers[sig] = signal.signal(sig, self._handle_signal)

    def _ignore_signals(self) -> None:
        for sig in self._previous_handlers:
            signal.signal(sig, signal.SIG_IGN)

    def _unregister_finalizers(self) -> None:
        atexit.unregister(self.teardown)
        for sig, previous in self._previous_handlers.items():
            signal.signal(sig, previous)  # type: ignore[arg-type]
        self._previous_handlers.clear()

    def run(self) -> int:
        """Publish, serve until signalled, tear down. Returns the exit code.

        Start-up errors propagate to the caller after teardown has reversed
        any partial acquisition.
        """
        self._register_finalizers()
        try:
            self.start()
            self.wait()
        except SessionTerminated as exc:
            logger.debug("Received %s", exc.signal_name)
        finally:
            self.teardown()
            self._unregister_finalizers()
        return 0


__all__ = ["PublishSession", "SessionTerminated"]
