"""Wiring of the publish collaborators from configuration."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from aserve.core.acl import PermissionGrantor
from aserve.core.config.domains import (
    AclConfig,
    BrowserConfig,
    MountsConfig,
    RecoveryConfig,
    ServeConfig,
    StateConfig,
)
from aserve.core.mounts import MountManager, MountTable
from aserve.core.paths import PathResolver
from aserve.core.utils.subprocess import CommandRunner, run_command

from .alias import AliasAllocator
from .records import RecordStore
from .reload import ReloadNotifier


@dataclass
class PublishServices:
    """Everything a publish or a clean talks to."""

    resolver: PathResolver
    allocator: AliasAllocator
    grantor: PermissionGrantor
    mounts: MountManager
    records: RecordStore
    reloader: ReloadNotifier
    serve: ServeConfig
    recovery: RecoveryConfig
    browser: BrowserConfig

    def public_url(self, alias: str) -> str:
        return f"{self.serve.public_url}/{alias}"


def build_services(
    config: Optional[Mapping[str, Any]] = None,
    *,
    runner: CommandRunner = run_command,
) -> PublishServices:
    """Construct the collaborators from the loaded (or given) configuration."""
    serve = ServeConfig(config)
    state = StateConfig(config)
    mounts = MountsConfig(config)
    acl = AclConfig(config)
    timeout = serve.command_timeout_seconds

    return PublishServices(
        resolver=PathResolver(),
        allocator=AliasAllocator(serve.docroot),
        grantor=PermissionGrantor(
            serve.server_user,
            setfacl=acl.setfacl_command,
            runner=runner,
            timeout=timeout,
        ),
        mounts=MountManager(
            MountTable(mounts.mountinfo_path),
            runner=runner,
            mount_command=mounts.mount_command,
            umount_command=mounts.umount_command,
            timeout=timeout,
        ),
        records=RecordStore(state.directory, state.record_suffix),
        reloader=ReloadNotifier(serve.reload_command, runner=runner, timeout=timeout),
        serve=serve,
        recovery=RecoveryConfig(config),
        browser=BrowserConfig(config),
    )


__all__ = ["PublishServices", "build_services"]
