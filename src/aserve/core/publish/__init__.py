"""Publish lifecycle: allocation, records, reload, session and recovery."""

from .alias import AliasAllocator, Allocation, validate_alias
from .records import RecordStore
from .recovery import CleanResult, RecoveryController
from .reload import ReloadNotifier
from .services import PublishServices, build_services
from .session import PublishSession, SessionTerminated
from .teardown import teardown_publish

__all__ = [
    "AliasAllocator",
    "Allocation",
    "CleanResult",
    "PublishServices",
    "PublishSession",
    "RecordStore",
    "RecoveryController",
    "ReloadNotifier",
    "SessionTerminated",
    "build_services",
    "teardown_publish",
    "validate_alias",
]
