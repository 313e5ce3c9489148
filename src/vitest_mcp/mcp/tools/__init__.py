"""MCP tool handlers."""

from vitest_mcp.mcp.tools import coverage, project, testing

__all__ = ["coverage", "project", "testing"]
