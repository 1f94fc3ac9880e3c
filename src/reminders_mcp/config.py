"""Server configuration: YAML file, environment overrides, defaults."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from reminders_mcp import __version__
from reminders_mcp.core.store import LocalRemindersStore
from reminders_mcp.mcp.server import DEFAULT_PROTOCOL_VERSION

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_STORE_PATH = "REMINDERS_MCP_STORE"
ENV_LOG_LEVEL = "REMINDERS_MCP_LOG_LEVEL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(Exception):
    """Raised when a configuration file cannot be read, parsed or validated."""


class TelemetrySettings(BaseModel):
    """Optional OpenTelemetry export (needs the ``otel`` extra)."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    export_to_console: bool = True
    otlp_endpoint: str | None = None


class ServerConfig(BaseModel):
    """Everything needed to build the store and the MCP server."""

    model_config = ConfigDict(extra="forbid")

    server_name: str = "reminders-mcp"
    server_version: str = __version__
    protocol_version: str = DEFAULT_PROTOCOL_VERSION
    store_path: Path | None = None
    access: Literal["full", "write_only", "denied"] = "full"
    sources: list[str] = Field(default_factory=lambda: ["Local"], min_length=1)
    initial_lists: list[str] = Field(default_factory=lambda: ["Reminders"])
    log_level: str = "WARNING"
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    @field_validator("store_path")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    def with_env(self, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Return a copy with ``REMINDERS_MCP_*`` environment overrides applied."""
        env = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        if env.get(ENV_STORE_PATH):
            overrides["store_path"] = env[ENV_STORE_PATH]
        if env.get(ENV_LOG_LEVEL):
            overrides["log_level"] = env[ENV_LOG_LEVEL]
        if not overrides:
            return self
        try:
            return ServerConfig.model_validate({**self.model_dump(), **overrides})
        except ValidationError as exc:
            raise ConfigError(f"Invalid environment override: {exc}") from exc

    def build_store(self) -> LocalRemindersStore:
        return LocalRemindersStore(
            self.store_path,
            access=self.access,
            sources=self.sources,
            initial_lists=self.initial_lists,
        )


class ConfigLoader:
    """Load and validate a YAML configuration file into a :class:`ServerConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ServerConfig:
        """Read YAML, interpolate env vars, and validate.

        ``${VAR}`` and ``$VAR`` references are expanded with
        :func:`os.path.expandvars` before parsing.  An empty file yields the
        defaults.

        Raises:
            ConfigError: On read errors, YAML parse errors or schema violations.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration YAML must be a mapping")

        try:
            return ServerConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> ServerConfig:
    """Defaults, then the YAML file at *path* (if given), then the environment."""
    config = ConfigLoader(path).load() if path is not None else ServerConfig()
    return config.with_env(environ)
