"""Configuration for the publish lifecycle: document root, server identity,
record store, mount table, ACL tooling, recovery and browser launching."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


def _argv(raw: object, default: list[str]) -> list[str]:
    if isinstance(raw, str):
        return raw.split()
    if isinstance(raw, list):
        return [str(p) for p in raw if str(p).strip()]
    return list(default)


class ServeConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "serve"

    @cached_property
    def docroot(self) -> Path:
        return Path(str(self.section.get("docroot") or "/var/www/html"))

    @cached_property
    def server_user(self) -> str:
        return str(self.section.get("server_user") or "www-data")

    @cached_property
    def public_url(self) -> str:
        return str(self.section.get("public_url") or "http://localhost").rstrip("/")

    @cached_property
    def reload_command(self) -> list[str]:
        return _argv(self.section.get("reload_command"), ["systemctl", "reload", "apache2"])

    @cached_property
    def command_timeout_seconds(self) -> float:
        return float(self.section.get("command_timeout_seconds", 30) or 30)

    @cached_property
    def signals(self) -> list[str]:
        raw = self.section.get("signals")
        if not isinstance(raw, list) or not raw:
            return ["SIGINT", "SIGTERM", "SIGHUP"]
        return [str(s).upper() for s in raw]


class StateConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "state"

    @cached_property
    def directory(self) -> Path:
        return Path(str(self.section.get("directory") or "/var/lib/aserve"))

    @cached_property
    def record_suffix(self) -> str:
        return str(self.section.get("record_suffix") or ".source")


class MountsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "mounts"

    @cached_property
    def mountinfo_path(self) -> Path:
        return Path(str(self.section.get("mountinfo_path") or "/proc/self/mountinfo"))

    @cached_property
    def mount_command(self) -> list[str]:
        return _argv(self.section.get("mount_command"), ["mount", "--bind"])

    @cached_property
    def umount_command(self) -> list[str]:
        return _argv(self.section.get("umount_command"), ["umount"])


class AclConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "acl"

    @cached_property
    def setfacl_command(self) -> str:
        return str(self.section.get("setfacl_command") or "setfacl")


class RecoveryConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "recovery"

    @cached_property
    def terminate_grace_seconds(self) -> float:
        return float(self.section.get("terminate_grace_seconds", 2.0))

    @cached_property
    def match_environment(self) -> bool:
        return bool(self.section.get("match_environment", True))


class BrowserConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "browser"

    @cached_property
    def command(self) -> list[str]:
        return _argv(self.section.get("command"), ["xdg-open"])


__all__ = [
    "AclConfig",
    "BrowserConfig",
    "MountsConfig",
    "RecoveryConfig",
    "ServeConfig",
    "StateConfig",
]
