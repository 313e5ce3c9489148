"""Project MCP tools - set_project_root."""

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import Field

from vitest_mcp.core.errors import ConfigError
from vitest_mcp.mcp.errors import MCPError

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from vitest_mcp.mcp.context import AppContext

log = structlog.get_logger(__name__)


def register_tools(mcp: "FastMCP", app_ctx: "AppContext") -> None:
    """Register project tools with FastMCP server."""

    @mcp.tool
    async def set_project_root(
        path: str = Field(
            ...,
            description=(
                "Absolute path to the project root directory "
                "(must start with / on Unix or drive letter on Windows)"
            ),
        ),
    ) -> dict[str, Any]:
        """Set the project root directory for all subsequent operations.

        Must be called before the other tools to choose which repository to
        work with. Failures are reported in the result, never raised.
        """
        try:
            allowed_paths = app_ctx.config.safety.allowed_paths
            info = app_ctx.guard.set_root(path, allowed_paths)
        except MCPError as e:
            log.warning("project_root_rejected", path=path, error_code=e.code.value)
            return {
                "success": False,
                "projectRoot": "",
                "projectName": "",
                "message": f"Failed to set project root: {e.message}",
                "code": e.code.value,
            }
        except ConfigError as e:
            log.warning("project_root_config_error", path=path, error=e.message)
            return {
                "success": False,
                "projectRoot": "",
                "projectName": "",
                "message": f"Failed to set project root: {e.message}",
                "code": "CONFIG_ERROR",
            }
        except Exception as e:
            # stat() itself can fail: name too long, permission denied
            log.warning(
                "project_root_unreadable",
                path=path[:200],
                error=str(e),
                error_type=type(e).__name__,
            )
            return {
                "success": False,
                "projectRoot": "",
                "projectName": "",
                "message": f"Failed to set project root: {e}",
                "code": "INVALID_PROJECT_ROOT",
            }

        return {
            "success": True,
            "projectRoot": info.path,
            "projectName": info.name,
            "message": f"Project root set to: {info.path}",
        }
