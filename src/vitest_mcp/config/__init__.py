"""Config module exports."""

from vitest_mcp.config.loader import ConfigResolver, EnvSettings
from vitest_mcp.config.models import (
    CoverageDefaultsConfig,
    CoverageThresholds,
    DiscoveryConfig,
    LoggingConfig,
    LogOutputConfig,
    OutputFormat,
    SafetyConfig,
    ServerConfig,
    TestDefaultsConfig,
    VitestMCPConfig,
)

__all__ = [
    "ConfigResolver",
    "EnvSettings",
    "CoverageDefaultsConfig",
    "CoverageThresholds",
    "DiscoveryConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "OutputFormat",
    "SafetyConfig",
    "ServerConfig",
    "TestDefaultsConfig",
    "VitestMCPConfig",
]
