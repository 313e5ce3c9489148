"""Core module exports."""

from vitest_mcp.core.errors import (
    ConfigError,
    CoverageDataError,
    ErrorCode,
    VitestMCPError,
)
from vitest_mcp.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)
from vitest_mcp.core.progress import spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "CoverageDataError",
    "ErrorCode",
    "VitestMCPError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
    # Progress
    "spinner",
    "status",
]
