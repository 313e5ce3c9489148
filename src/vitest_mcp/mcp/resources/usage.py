"""``vitest://usage`` - Markdown guide to the server's tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastmcp import FastMCP

USAGE_URI = "vitest://usage"

USAGE_GUIDE = """# Vitest MCP Server Usage Guide

## Overview
This MCP server runs Vitest, the unit testing framework for JavaScript and
TypeScript projects, and returns structured results sized for AI agents.

## Getting started
Call `set_project_root` once per session with the absolute path of the
project (a directory with `package.json` or `vitest.config.*`). Every other
tool resolves paths against that root.

## Available Tools

### 1. set_project_root
**Parameters:**
- `path` (required): Absolute path to the project root.

```
set_project_root({ path: "/home/me/my-app" })
```

### 2. list_tests
Lists test files with their type (`unit`, `integration`, `e2e`, `unknown`).

**Parameters:**
- `path` (optional): Directory to search, relative to the project root.

```
list_tests({ path: "src" })
```

### 3. run_tests
Runs `vitest run` for one file or directory. Never runs the whole project
and never uses watch mode.

**Parameters:**
- `target` (required): Test file or directory relative to the project root.
- `format` (optional): `summary` or `detailed`. Without it, directories,
  multi-file runs and failing runs get `detailed`, single passing files get
  the configured default.

```
run_tests({ target: "src/components", format: "detailed" })
```

### 4. analyze_coverage
Runs the tests related to a source file or directory with coverage enabled.

**Parameters:**
- `target` (required): Source file or directory (not a test file).
- `format` (optional): `summary` or `detailed` (adds uncovered lines,
  functions and branches plus a per-file breakdown).
- `exclude` (optional): Glob patterns to leave out of the run and the report.

```
analyze_coverage({ target: "src/utils/math.ts", format: "detailed" })
```

## Best Practices
1. **Start with list_tests** to understand the test layout.
2. **Use specific targets**: single files finish fastest.
3. **Use detailed format for failures**: it includes expected/actual values,
   a code snippet and a trimmed stack.

## Error Handling
Errors come back as `{error: true, message, code, remediation}`.
Common codes:
- `PROJECT_ROOT_NOT_SET`: call `set_project_root` first
- `TARGET_REQUIRED` / `TARGET_NOT_FOUND`: check the target path
- `INCOMPATIBLE_VERSION`: install or upgrade `vitest`
- A timed-out run reports exit code 124; try a smaller target
"""


def register_resources(mcp: FastMCP) -> None:
    """Register the usage guide resource."""

    @mcp.resource(
        USAGE_URI,
        name="Vitest MCP Server Usage Guide",
        description="Instructions for using the Vitest MCP server tools",
        mime_type="text/markdown",
    )
    def usage_guide() -> str:
        return USAGE_GUIDE
