"""Configuration constants: file search order, env var names, defaults."""

from pathlib import Path

# Name this tool is published under; used by the self-targeting guard.
PACKAGE_NAME = "vitest-mcp"
SELF_PACKAGE_NAMES = frozenset({PACKAGE_NAME, "@djankies/vitest-mcp"})

ENV_PREFIX = "VITEST_MCP_"

# Conventional config file names, searched in the working directory.
CONFIG_FILE_NAMES = (
    ".vitest-mcp.json",
    ".vitest-mcp.config.json",
    "vitest-mcp.json",
    "vitest-mcp.config.json",
)


def home_config_paths(home: Path) -> tuple[Path, ...]:
    """User-level config locations, searched after the working directory."""
    return (
        home / ".vitest-mcp.json",
        home / ".config" / "vitest-mcp.json",
    )


DEFAULT_COVERAGE_EXCLUDE = (
    "**/*.stories.*",
    "**/*.story.*",
    "**/.storybook/**",
    "**/storybook-static/**",
    "**/e2e/**",
    "**/*.e2e.*",
    "**/test-utils/**",
    "**/mocks/**",
    "**/__mocks__/**",
    "**/setup-tests.*",
    "**/test-setup.*",
)

DEFAULT_TEST_PATTERNS = ("**/*.{test,spec}.{js,ts,jsx,tsx}",)
DEFAULT_DISCOVERY_EXCLUDE = ("node_modules", "dist", "coverage", ".git")
