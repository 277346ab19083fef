"""Configuration for access setter registries.

Configuration file location priority:
1. Explicit path passed to AccessSetterConfigLoader
2. RAS_CONFIG environment variable
3. Standard location: ~/.ras/config.yml
4. Built-in defaults (if no config file found)

Environment overrides applied on top of the file:
- RAS_ACTIVE_SCOPE: ``build`` or ``runtime``
- RAS_FORCE_SILENT: ``1``/``true``/``yes`` or ``0``/``false``/``no``

Example config file:
```yaml
active_scope: build
force_silent: false
extra_versions: ["v1.2"]
dialects:
  - name: galimulator
    extra_scopes: [client, server]
```
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from .parser import STANDARD_DIALECTS, Dialect
from .transform import STANDARD_SCOPE_NAMES, Scope

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RAS_CONFIG"
ACTIVE_SCOPE_ENV_VAR = "RAS_ACTIVE_SCOPE"
FORCE_SILENT_ENV_VAR = "RAS_FORCE_SILENT"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class DialectConfig(BaseModel):
    """Additional dialect accepted in RAS headers."""

    name: str = Field(min_length=1, description="Dialect name as written in the header")
    extra_scopes: list[str] = Field(
        default_factory=list,
        description="Dialect specific scope names (ASCII letters only)",
    )

    @field_validator("extra_scopes")
    @classmethod
    def validate_extra_scopes(cls, v: list[str]) -> list[str]:
        """Scope names must be ASCII letters and must not shadow a standard scope."""
        for scope in v:
            if not (scope.isascii() and scope.isalpha()):
                raise ValueError(f"Scope '{scope}' must consist of ASCII letters only")
            if scope in STANDARD_SCOPE_NAMES:
                raise ValueError(f"Scope '{scope}' shadows a standard scope name")
        return v

    def to_dialect(self) -> Dialect:
        return Dialect(self.name, frozenset(self.extra_scopes))


class AccessSetterConfig(BaseModel):
    """Root configuration model."""

    active_scope: Scope = Field(
        default=Scope.RUNTIME,
        description="Scope of the registry (build or runtime)",
    )
    force_silent: bool = Field(
        default=False,
        description="Treat every transform as failing softly",
    )
    dialects: list[DialectConfig] = Field(
        default_factory=list,
        description="Dialects accepted in addition to std and starrian",
    )
    extra_versions: list[str] = Field(
        default_factory=list,
        description="Format versions accepted in addition to the built-in ones",
    )

    @field_validator("active_scope")
    @classmethod
    def validate_active_scope(cls, v: Scope) -> Scope:
        if v not in (Scope.BUILD, Scope.RUNTIME):
            raise ValueError(f"active_scope must be 'build' or 'runtime', got '{v.value}'")
        return v

    def build_dialects(self) -> dict[str, Dialect]:
        """Standard dialects merged with the configured ones."""
        dialects = dict(STANDARD_DIALECTS)
        for dialect in self.dialects:
            dialects[dialect.name] = dialect.to_dialect()
        return dialects


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got '{value}'")


class AccessSetterConfigLoader:
    """
    Loader for access setter configuration.

    The loaded config is cached; call load_config() once during startup.
    """

    def __init__(self, config_path: str | Path | None = None):
        self._config: AccessSetterConfig | None = None
        self._explicit_path = Path(config_path) if config_path else None

    def get_config_path(self) -> Path | None:
        """Determine the config file path, or None if no file exists."""
        if self._explicit_path:
            if self._explicit_path.exists():
                return self._explicit_path
            logger.warning(f"Explicit access setter config path does not exist: {self._explicit_path}")
            return None

        env_path_str = os.getenv(CONFIG_ENV_VAR)
        if env_path_str:
            env_path = Path(env_path_str).expanduser()
            if env_path.exists():
                return env_path
            logger.warning(f"{CONFIG_ENV_VAR} path does not exist: {env_path}")
            return None

        standard_path = Path.home() / ".ras" / "config.yml"
        if standard_path.exists():
            return standard_path

        return None

    def _read_file(self, config_path: Path) -> dict[str, Any]:
        try:
            with open(config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to load access setter config from {config_path}: {e}")

        if raw_config is None:
            return {}
        if not isinstance(raw_config, dict):
            raise ValueError(
                f"Failed to load access setter config from {config_path}: "
                "Config file must contain a YAML dictionary"
            )
        return raw_config

    def load_config(self) -> AccessSetterConfig:
        """
        Load, validate and cache the configuration.

        Raises:
            ValueError: If the config file or an environment override is invalid
        """
        if self._config is not None:
            return self._config

        raw_config: dict[str, Any] = {}
        config_path = self.get_config_path()
        if config_path is None:
            logger.info("No access setter config file found, using defaults")
        else:
            logger.info(f"Loading access setter config from: {config_path}")
            raw_config = self._read_file(config_path)

        scope_override = os.getenv(ACTIVE_SCOPE_ENV_VAR)
        if scope_override:
            raw_config["active_scope"] = scope_override.strip().lower()

        silent_override = os.getenv(FORCE_SILENT_ENV_VAR)
        if silent_override:
            raw_config["force_silent"] = _parse_bool(FORCE_SILENT_ENV_VAR, silent_override)

        try:
            config = AccessSetterConfig(**raw_config)
        except ValueError as e:
            raise ValueError(f"Invalid access setter configuration: {e}") from e

        logger.info(
            f"Access setter config: scope={config.active_scope.value}, "
            f"force_silent={config.force_silent}, {len(config.dialects)} extra dialects"
        )
        self._config = config
        return config


__all__ = [
    "ACTIVE_SCOPE_ENV_VAR",
    "AccessSetterConfig",
    "AccessSetterConfigLoader",
    "CONFIG_ENV_VAR",
    "DialectConfig",
    "FORCE_SILENT_ENV_VAR",
]
