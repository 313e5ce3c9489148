"""Errors an agent can fix, each with a code and a remediation hint.

Every one of them is raised before a subprocess is spawned and is turned
into the ``{error: true, message, code, remediation}`` envelope by
``ToolMiddleware``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fastmcp.exceptions import ToolError


class MCPErrorCode(StrEnum):
    """Values of the envelope's ``code`` field."""

    # Bad tool arguments
    TARGET_REQUIRED = "TARGET_REQUIRED"
    TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
    INVALID_TARGET = "INVALID_TARGET"
    INVALID_PARAMS = "INVALID_PARAMS"

    # Project root errors - agent should call set_project_root
    PROJECT_ROOT_NOT_SET = "PROJECT_ROOT_NOT_SET"
    INVALID_PROJECT_ROOT = "INVALID_PROJECT_ROOT"
    PATH_NOT_ALLOWED = "PATH_NOT_ALLOWED"

    # Environment errors - user must fix the project setup
    INCOMPATIBLE_VERSION = "INCOMPATIBLE_VERSION"
    CONFIG_ERROR = "CONFIG_ERROR"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ErrorResponse:
    """The ``{error: true, ...}`` payload returned in place of a tool result."""

    code: MCPErrorCode
    message: str
    remediation: str
    path: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire envelope. ``path``/``context`` only when set."""
        data: dict[str, Any] = {
            "error": True,
            "message": self.message,
            "code": self.code.value,
            "remediation": self.remediation,
        }
        if self.path is not None:
            data["path"] = self.path
        if self.context:
            data["context"] = self.context
        return data


class MCPError(ToolError):
    """Raised by ops and tools for caller mistakes.

    Subclassing ``ToolError`` keeps FastMCP from re-wrapping it, so
    ``ToolMiddleware`` sees the original code and remediation.
    """

    def __init__(
        self,
        code: MCPErrorCode,
        message: str,
        remediation: str,
        path: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.remediation = remediation
        self.path = path
        self.context = context

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            code=self.code,
            message=self.message,
            remediation=self.remediation,
            path=self.path,
            context=self.context,
        )


class TargetRequiredError(MCPError):
    """Raised when run_tests/analyze_coverage is called without a target."""

    def __init__(self, tool: str = "run_tests") -> None:
        super().__init__(
            code=MCPErrorCode.TARGET_REQUIRED,
            message=(
                "Target parameter is required. Specify a file or directory "
                "to prevent running all tests."
            ),
            remediation=f"Call {tool} again with a target relative to the project root.",
            tool=tool,
        )


class TargetNotFoundError(MCPError):
    """Raised when a target or search path does not exist."""

    def __init__(self, target: str, resolved: str, message: str | None = None) -> None:
        super().__init__(
            code=MCPErrorCode.TARGET_NOT_FOUND,
            message=message or f"Target does not exist: {target} (resolved to: {resolved})",
            remediation="Use list_tests to see available test files.",
            path=resolved,
        )


class InvalidTargetError(MCPError):
    """Raised when a target exists but cannot be used as given."""

    def __init__(
        self,
        path: str,
        message: str,
        remediation: str = "Pass a directory relative to the project root, or omit it.",
    ) -> None:
        super().__init__(
            code=MCPErrorCode.INVALID_TARGET,
            message=message,
            remediation=remediation,
            path=path,
        )


class RootTargetError(MCPError):
    """Raised when a tool would operate on the whole project root."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(
            code=MCPErrorCode.INVALID_TARGET,
            message=message
            or (
                "Cannot run tests on entire project root. "
                "Please specify a specific file or subdirectory."
            ),
            remediation="Pass a single test file or a subdirectory as target.",
            path=path,
        )


class TestFileTargetError(MCPError):
    """Raised when analyze_coverage is pointed at a test file."""

    def __init__(self, target: str) -> None:
        super().__init__(
            code=MCPErrorCode.INVALID_TARGET,
            message=(
                f"Run coverage analysis on the source file, not the test file: {target}"
            ),
            remediation=(
                "Pass the source file under test (e.g. src/math.ts instead of "
                "src/math.test.ts); related tests are found automatically."
            ),
            path=target,
        )


class ProjectRootNotSetError(MCPError):
    """Raised when a tool needs the project root before it was set."""

    def __init__(self) -> None:
        super().__init__(
            code=MCPErrorCode.PROJECT_ROOT_NOT_SET,
            message=(
                "Project root has not been set. Please use the set_project_root tool "
                "first to specify which repository to work with."
            ),
            remediation="Call set_project_root with the absolute path of the project.",
        )


class InvalidProjectRootError(MCPError):
    """Raised when a candidate project root fails validation."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            code=MCPErrorCode.INVALID_PROJECT_ROOT,
            message=reason,
            remediation=(
                "Pass an absolute path to a directory containing package.json "
                "or vitest.config.{ts,js,mjs}."
            ),
            path=path,
        )


class PathNotAllowedError(MCPError):
    """Raised when a project root lies outside the configured allowlist."""

    def __init__(self, path: str, allowed_paths: Sequence[str]) -> None:
        allowed = ", ".join(allowed_paths)
        super().__init__(
            code=MCPErrorCode.PATH_NOT_ALLOWED,
            message=(
                f'Access denied: Path "{path}" is outside allowed directories. '
                f"Allowed paths: {allowed}. "
                "Configure allowedPaths in your .vitest-mcp.json to change this restriction."
            ),
            remediation="Choose a project inside one of the allowed paths.",
            path=path,
            allowed_paths=list(allowed_paths),
        )


class CompatibilityError(MCPError):
    """Raised when Vitest or the coverage provider is missing or too old."""

    def __init__(self, report: str) -> None:
        super().__init__(
            code=MCPErrorCode.INCOMPATIBLE_VERSION,
            message=f"Version compatibility issues found:\n\n{report}",
            remediation="Install or upgrade the packages listed in the report, then retry.",
        )
