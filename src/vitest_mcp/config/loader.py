"""Layered configuration resolution.

Precedence, lowest to highest:
1. Built-in defaults (``vitest_mcp.config.models``)
2. JSON config file, first found among: ``--config`` path, ``VITEST_MCP_CONFIG``,
   conventional names in the working directory, then the user's home
3. Environment variables (``VITEST_MCP_TEST_FORMAT`` etc., via pydantic-settings)
4. CLI flags

Objects merge recursively; arrays and scalars replace wholesale; ``None``
never blanks out a lower layer.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

from vitest_mcp.config.cli_args import get_config_path, parse_cli_args
from vitest_mcp.config.constants import CONFIG_FILE_NAMES, ENV_PREFIX, home_config_paths
from vitest_mcp.config.models import VitestMCPConfig
from vitest_mcp.core.errors import ConfigError

log = structlog.get_logger(__name__)


class EnvSettings(BaseSettings):
    """Environment overrides. One variable per leaf setting."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    config: str | None = None
    debug: str | None = None
    dev_mode: str | None = None
    test_format: Literal["summary", "detailed"] | None = None
    test_timeout: int | None = None
    coverage_threshold: int | None = None
    verbose: str | None = None
    working_dir: str | None = None

    @property
    def debug_enabled(self) -> bool:
        return bool(self.debug) and self.debug.lower() not in ("0", "false")

    @property
    def dev_mode_enabled(self) -> bool:
        return self.dev_mode == "true"

    def to_overrides(self) -> dict[str, Any]:
        """Nested camelCase override dict for the values that are set."""
        return {
            "testDefaults": {"format": self.test_format, "timeout": self.test_timeout},
            "coverageDefaults": {"threshold": self.coverage_threshold},
            "server": {
                "verbose": None if self.verbose is None else self.verbose == "true",
                "workingDirectory": self.working_dir,
            },
        }


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        elif isinstance(value, dict):
            result[key] = _deep_merge({}, value)
        else:
            result[key] = value
    return result


def _read_json(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("top-level JSON value must be an object")
    return data


class ConfigResolver:
    """Resolves and memoizes the active configuration.

    Owned by the application context for the lifetime of the process. The
    cached value is replaced only when ``resolve`` receives a different argv
    sequence, or after ``reset``.
    """

    def __init__(self, *, cwd: Path | None = None, home: Path | None = None) -> None:
        self._cwd = cwd
        self._home = home
        self._cached: VitestMCPConfig | None = None
        self._cached_args: tuple[str, ...] | None = None

    @property
    def cwd(self) -> Path:
        return self._cwd or Path.cwd()

    @property
    def home(self) -> Path:
        return self._home or Path.home()

    def resolve(self, cli_args: Sequence[str] | None = None) -> VitestMCPConfig:
        """Return the active configuration, loading it on first use.

        Raises:
            ConfigError: An explicitly named config file is unreadable, or a
                CLI flag carries an invalid value.
        """
        if cli_args is not None and tuple(cli_args) != (self._cached_args or ()):
            self._cached_args = tuple(cli_args)
            self._cached = self._load(self._cached_args)
            log.debug("config_reloaded", reason="cli_args_changed")
        elif self._cached is None:
            self._cached = self._load(self._cached_args or ())
            log.debug("config_loaded")
        return self._cached

    def reset(self) -> None:
        """Drop the cached configuration (test isolation)."""
        self._cached = None

    def _load(self, args: tuple[str, ...]) -> VitestMCPConfig:
        try:
            cli_overrides = parse_cli_args(args)
            env = EnvSettings()
            file_config = self._load_config_file(get_config_path(args), env.config)

            merged: dict[str, Any] = {}
            for layer in (file_config or {}, env.to_overrides(), cli_overrides):
                merged = _deep_merge(merged, layer)
            return VitestMCPConfig.model_validate(merged)
        except ConfigError:
            raise
        except Exception as e:
            # Configuration is never a hard failure path for the tools
            log.error("config_resolution_failed", error=str(e), error_type=type(e).__name__)
            return VitestMCPConfig()

    def _load_config_file(
        self, cli_path: str | None, env_path: str | None
    ) -> dict[str, Any] | None:
        explicit = cli_path or env_path
        if explicit:
            return self._load_explicit(self.cwd / Path(explicit).expanduser())

        candidates = [self.cwd / name for name in CONFIG_FILE_NAMES]
        candidates.extend(home_config_paths(self.home))
        for path in candidates:
            try:
                data = _read_json(path)
            except FileNotFoundError:
                continue
            except (OSError, ValueError) as e:
                log.warning("config_read_failed", path=str(path), error=str(e))
                continue
            log.debug("config_file_loaded", path=str(path))
            return data

        log.debug("config_file_not_found", searched=len(candidates))
        return None

    def _load_explicit(self, path: Path) -> dict[str, Any]:
        try:
            data = _read_json(path)
        except FileNotFoundError as e:
            raise ConfigError.file_not_found(str(path)) from e
        except (OSError, ValueError) as e:
            raise ConfigError.parse_error(str(path), str(e)) from e
        log.debug("config_file_loaded", path=str(path), explicit=True)
        return data
