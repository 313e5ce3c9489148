"""Coverage MCP tool - analyze_coverage."""

from typing import TYPE_CHECKING, Any, Literal

from pydantic import Field

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from vitest_mcp.mcp.context import AppContext


def register_tools(mcp: "FastMCP", app_ctx: "AppContext") -> None:
    """Register coverage tools with FastMCP server."""

    @mcp.tool
    async def analyze_coverage(
        target: str = Field(
            ...,
            description="Source file or directory to analyze, relative to the project root. "
            "Pass source files, not test files; related tests are found automatically.",
        ),
        format: Literal["summary", "detailed"] | None = Field(
            None,
            description='"summary" for percentages, "detailed" adds uncovered lines, '
            "functions and branches plus a per-file breakdown",
        ),
        exclude: list[str] | None = Field(
            None,
            description="Glob patterns excluded from the run and the report "
            "(defaults to the configured coverage excludes)",
        ),
    ) -> dict[str, Any]:
        """Run tests with coverage for a source file or directory and summarize the gaps."""
        result = await app_ctx.coverage_ops.analyze(app_ctx.config, target, format, exclude)
        return result.to_dict()
