"""Pydantic configuration models.

Configuration Hierarchy (highest to lowest precedence):
1. CLI flags (``vitest-mcp serve --timeout 60000``)
2. Environment variables (VITEST_MCP_<KEY>)
3. JSON config file (.vitest-mcp.json and friends)
4. Built-in defaults (this file)

The JSON file uses camelCase keys (``testDefaults.timeout``); the Python
attributes are snake_case. Every model accepts both spellings.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from vitest_mcp.config.constants import (
    DEFAULT_COVERAGE_EXCLUDE,
    DEFAULT_DISCOVERY_EXCLUDE,
    DEFAULT_TEST_PATTERNS,
)

OutputFormat = Literal["summary", "detailed"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class _ConfigModel(BaseModel):
    """Immutable, camelCase-aware base for all resolved config groups."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class CoverageThresholds(_ConfigModel):
    """Per-metric minimum coverage percentages."""

    lines: int | None = Field(default=None, ge=0, le=100)
    functions: int | None = Field(default=None, ge=0, le=100)
    branches: int | None = Field(default=None, ge=0, le=100)
    statements: int | None = Field(default=None, ge=0, le=100)

    def is_empty(self) -> bool:
        return all(
            value is None for value in (self.lines, self.functions, self.branches, self.statements)
        )


class TestDefaultsConfig(_ConfigModel):
    """Defaults for run_tests.

    Env vars:
        VITEST_MCP_TEST_FORMAT: summary | detailed
        VITEST_MCP_TEST_TIMEOUT: timeout in milliseconds
    """

    format: OutputFormat = "summary"
    timeout: int = Field(default=30_000, gt=0, description="Test execution timeout in ms.")
    watch_mode: bool = False

    @property
    def timeout_sec(self) -> float:
        return self.timeout / 1000


class CoverageDefaultsConfig(_ConfigModel):
    """Defaults for analyze_coverage.

    Env vars:
        VITEST_MCP_COVERAGE_THRESHOLD: single threshold applied to every metric
    """

    format: OutputFormat = "summary"
    threshold: int | None = Field(default=None, ge=0, le=100)
    thresholds: CoverageThresholds | None = None
    exclude: tuple[str, ...] = DEFAULT_COVERAGE_EXCLUDE
    include_details: bool = False

    def effective_thresholds(self) -> CoverageThresholds | None:
        """Per-metric thresholds, expanding the single ``threshold`` shortcut."""
        if self.thresholds is not None and not self.thresholds.is_empty():
            return self.thresholds
        if self.threshold:
            t = self.threshold
            return CoverageThresholds(lines=t, functions=t, branches=t, statements=t)
        return None


class DiscoveryConfig(_ConfigModel):
    """Test file discovery settings."""

    test_patterns: tuple[str, ...] = DEFAULT_TEST_PATTERNS
    exclude_patterns: tuple[str, ...] = DEFAULT_DISCOVERY_EXCLUDE
    max_depth: int = Field(default=10, ge=1)


class ServerConfig(_ConfigModel):
    """Server behavior flags.

    Env vars:
        VITEST_MCP_VERBOSE: "true" enables debug logging
        VITEST_MCP_WORKING_DIR: working directory
    """

    verbose: bool = False
    validate_paths: bool = True
    allow_root_execution: bool = False
    working_directory: str = Field(default_factory=lambda: str(Path.cwd()))


class SafetyConfig(_ConfigModel):
    """Safety limits and the project root allowlist."""

    max_files: int = Field(default=100, ge=1)
    require_confirmation: bool = True
    allowed_runners: tuple[str, ...] = ("vitest",)
    allowed_paths: tuple[str, ...] | None = None

    @field_validator("allowed_paths", mode="before")
    @classmethod
    def _normalize_allowed_paths(cls, v: object) -> object:
        # A single string is accepted for convenience
        if isinstance(v, str):
            return (v,)
        return v


class VitestMCPConfig(_ConfigModel):
    """Fully resolved configuration. Exactly one is active per resolver."""

    test_defaults: TestDefaultsConfig = TestDefaultsConfig()
    coverage_defaults: CoverageDefaultsConfig = CoverageDefaultsConfig()
    discovery: DiscoveryConfig = DiscoveryConfig()
    server: ServerConfig = Field(default_factory=ServerConfig)
    safety: SafetyConfig = SafetyConfig()


class LogOutputConfig(BaseModel):
    """Single logging output: stderr or an absolute file path."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v == "stderr":
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration (not part of the resolved tool config)."""

    level: LogLevel = "INFO"
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])
