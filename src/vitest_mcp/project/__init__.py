"""Project root state for a server session."""

from vitest_mcp.project.guard import ProjectInfo, ProjectRootGuard

__all__ = ["ProjectInfo", "ProjectRootGuard"]
