"""FastMCP server creation and wiring.

Tools are registered per module through ``register_tools(mcp, app_ctx)``;
``ToolMiddleware`` wraps every call with two-phase logging and converts
exceptions into the ``{error: true, ...}`` envelope.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from vitest_mcp.config.models import LoggingConfig, VitestMCPConfig
    from vitest_mcp.mcp.context import AppContext

log = structlog.get_logger(__name__)

SERVER_NAME = "vitest-mcp"
SERVER_INSTRUCTIONS = (
    "Runs Vitest for AI agents with structured, token-efficient results. "
    "Call set_project_root first, then list_tests, run_tests or analyze_coverage "
    "with a target relative to the project root."
)


def create_mcp_server(context: AppContext) -> FastMCP:
    """Create FastMCP server with all tools wired to context.

    Args:
        context: AppContext with all ops instances

    Returns:
        Configured FastMCP server ready to run
    """
    from fastmcp import FastMCP

    from vitest_mcp.mcp.middleware import ToolMiddleware
    from vitest_mcp.mcp.resources import usage
    from vitest_mcp.mcp.tools import coverage, project, testing

    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)
    mcp.add_middleware(ToolMiddleware())

    for module in (project, testing, coverage):
        module.register_tools(mcp, context)
    usage.register_resources(mcp)

    log.info("mcp_server_created", name=SERVER_NAME)
    return mcp


def logging_config_for(
    config: VitestMCPConfig, *, debug: bool = False, log_file: str | None = None
) -> LoggingConfig:
    """stderr console output, plus a JSON debug file when ``log_file`` is set."""
    from vitest_mcp.config.models import LoggingConfig, LogOutputConfig

    level = "DEBUG" if debug or config.server.verbose else "INFO"
    outputs = [LogOutputConfig(destination="stderr", format="console", level=level)]
    if log_file:
        outputs.append(LogOutputConfig(destination=log_file, format="json", level="DEBUG"))
    return LoggingConfig(level="DEBUG" if log_file else level, outputs=outputs)


def run_server(cli_args: Sequence[str] = (), *, log_file: str | None = None) -> None:
    """Resolve config, configure logging, and serve MCP over stdio."""
    from vitest_mcp.config.loader import ConfigResolver, EnvSettings
    from vitest_mcp.core.logging import configure_logging
    from vitest_mcp.mcp.context import AppContext

    env = EnvSettings()
    resolver = ConfigResolver()
    config = resolver.resolve(cli_args)
    configure_logging(config=logging_config_for(config, debug=env.debug_enabled, log_file=log_file))

    context = AppContext.create(cli_args, resolver=resolver, dev_mode=env.dev_mode_enabled)
    mcp = create_mcp_server(context)

    log.info(
        "mcp_server_running",
        transport="stdio",
        working_directory=config.server.working_directory,
        dev_mode=env.dev_mode_enabled,
    )
    mcp.run(transport="stdio")
