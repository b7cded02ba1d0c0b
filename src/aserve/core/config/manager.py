"""
aserve configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from aserve.core.exceptions import ConfigError
from aserve.core.utils.io import iter_yaml_files, read_yaml
from aserve.core.utils.merge import deep_merge
from aserve.data import get_data_path

logger = logging.getLogger(__name__)

try:
    import jsonschema
    from jsonschema import Draft202012Validator
except Exception as err:  # pragma: no cover - surfaced at import time
    raise RuntimeError("jsonschema is required: pip install jsonschema") from err

ENV_PREFIX = "ASERVE_"
ENV_CONFIG_PATH = "ASERVE_CONFIG"
DEFAULT_SYSTEM_CONFIG = Path("/etc/aserve/config.yaml")


def system_config_path() -> Path:
    """Return the system overlay path, honoring ``$ASERVE_CONFIG``."""
    override = os.environ.get(ENV_CONFIG_PATH, "").strip()
    return Path(override).expanduser() if override else DEFAULT_SYSTEM_CONFIG


class ConfigManager:
    """Load, merge, and validate aserve configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: ``ASERVE_<section>__<key>``
    2. System overlay: ``/etc/aserve/config.yaml`` (or ``$ASERVE_CONFIG``)
    3. Bundled defaults: ``aserve.data/config/*.yaml`` (alphabetical order)
    """

    def __init__(self, system_config: Optional[Path] = None) -> None:
        self.core_config_dir = get_data_path("config")
        self.system_config = system_config or system_config_path()
        self.schema_path = get_data_path("schemas", "config.schema.yaml")

    # ---- env overrides -------------------------------------------------

    def _coerce_type(self, value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("[") and s.endswith("]")) or (s.startswith("{") and s.endswith("}")):
            try:
                return json.loads(s)
            except ValueError:
                return s
        return s

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        # Only double-underscore keys are overrides; ASERVE_CONFIG and other
        # plain ASERVE_* variables are left alone.
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if "__" not in raw:
                continue
            segs = [s.lower() for s in raw.split("__")]
            if any(not s for s in segs):
                logger.warning("Ignoring malformed override %s", key)
                continue
            yield segs, self._coerce_type(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self._iter_env_overrides():
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value
        return cfg

    # ---- loading -------------------------------------------------------

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except Exception as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping", context={"path": str(path)})
        return data

    def validate_schema(self, config: Dict[str, Any]) -> None:
        schema = read_yaml(self.schema_path, default={}, raise_on_error=True)
        validator = Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(config), key=lambda e: list(e.path))
        if not errors:
            return
        first = errors[0]
        where = ".".join(str(p) for p in first.path) or "<root>"
        raise ConfigError(
            f"Configuration invalid at {where}: {first.message}",
            context={"errors": [e.message for e in errors]},
        )

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration mapping."""
        cfg: Dict[str, Any] = self._load_directory(self.core_config_dir, {})
        if self.system_config.exists():
            logger.debug("Loading config overlay %s", self.system_config)
            cfg = deep_merge(cfg, self.load_yaml(self.system_config))
        cfg = self.apply_env_overrides(cfg)
        if validate:
            try:
                self.validate_schema(cfg)
            except jsonschema.SchemaError as exc:  # pragma: no cover - bundled schema is static
                raise ConfigError(f"Bundled config schema is invalid: {exc.message}") from exc
        return cfg


__all__ = ["ConfigManager", "ENV_PREFIX", "ENV_CONFIG_PATH", "system_config_path"]
