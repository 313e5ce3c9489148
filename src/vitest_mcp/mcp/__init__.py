"""MCP server module - FastMCP tool registration and wiring.

Import ``vitest_mcp.mcp.server`` / ``vitest_mcp.mcp.context`` directly;
this package is imported by the ops layer for its error types.
"""
