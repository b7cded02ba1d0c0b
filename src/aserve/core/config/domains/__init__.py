"""Domain-specific configuration accessors."""

from .cli import CliConfig
from .logging import LoggingConfig
from .serve import (
    AclConfig,
    BrowserConfig,
    MountsConfig,
    RecoveryConfig,
    ServeConfig,
    StateConfig,
)

__all__ = [
    "AclConfig",
    "BrowserConfig",
    "CliConfig",
    "LoggingConfig",
    "MountsConfig",
    "RecoveryConfig",
    "ServeConfig",
    "StateConfig",
]
