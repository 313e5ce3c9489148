"""Testing MCP tools - test discovery and execution.

- list_tests: Find test files under the project root
- run_tests: Execute one file or directory with ``vitest run``
"""

from typing import TYPE_CHECKING, Any, Literal

from pydantic import Field

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from vitest_mcp.mcp.context import AppContext


def register_tools(mcp: "FastMCP", app_ctx: "AppContext") -> None:
    """Register testing tools with FastMCP server."""

    @mcp.tool
    async def list_tests(
        path: str | None = Field(
            None,
            description="Directory to search for test files, relative to the project root "
            "(defaults to the project root)",
        ),
    ) -> dict[str, Any]:
        """Find and list test files in the project or a directory of it."""
        result = await app_ctx.test_ops.list_tests(app_ctx.config, path)
        return result.to_dict()

    @mcp.tool
    async def run_tests(
        target: str = Field(
            ...,
            description="Test file or directory to run, relative to the project root "
            "(required to prevent running all tests)",
        ),
        format: Literal["summary", "detailed"] | None = Field(
            None,
            description='"summary" for pass/fail counts and failing test names, '
            '"detailed" for structured failure analysis. Defaults: single passing '
            "file -> summary; directories, multiple files or failures -> detailed",
        ),
    ) -> dict[str, Any]:
        """Execute Vitest for a file or directory with output shaped for LLM consumption."""
        result = await app_ctx.test_ops.run_tests(app_ctx.config, target, format)
        return result.to_dict()
