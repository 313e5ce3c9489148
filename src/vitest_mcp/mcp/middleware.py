"""Tool-call middleware.

Every call gets a request id, a start and finish log event with its duration,
and a one-line console summary. Exceptions are turned into the
``{error: true, ...}`` envelope here; nothing raw reaches the transport.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

import structlog
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools.tool import ToolResult
from pydantic import ValidationError

from vitest_mcp.core.errors import ConfigError
from vitest_mcp.core.logging import clear_request_id, set_request_id
from vitest_mcp.mcp.errors import ErrorResponse, MCPError, MCPErrorCode

if TYPE_CHECKING:
    from fastmcp.server.middleware import CallNext
    from mcp import types as mt

log = structlog.get_logger(__name__)

# Escaped so Rich does not read it as markup
_AGENT_TAG = "\\[agent] "


def _timestamp() -> str:
    return time.strftime("%H:%M:%S")


def error_result(response: ErrorResponse) -> ToolResult:
    return ToolResult(structured_content=response.to_dict())


class ToolMiddleware(Middleware):
    """Middleware that handles tool calls with structured errors and logging.

    - ``MCPError`` becomes its own envelope (code + remediation)
    - ``ConfigError`` becomes ``CONFIG_ERROR``
    - pydantic ``ValidationError`` becomes ``INVALID_PARAMS``
    - anything else becomes ``INTERNAL_ERROR``
    - Two-phase logging (tool_start + tool_completed / tool_error)
    """

    async def on_call_tool(  # type: ignore[override]
        self,
        context: MiddlewareContext[mt.CallToolRequest],
        call_next: CallNext[mt.CallToolRequest, Any],
    ) -> Any:
        """Handle tool calls with structured error handling."""
        from vitest_mcp.core.progress import get_console

        params = context.message
        tool_name = getattr(params, "name", "unknown")
        arguments = getattr(params, "arguments", {}) or {}

        request_id = set_request_id()
        log_params = self._extract_log_params(arguments)
        start_time = time.perf_counter()
        log.info("tool_start", tool=tool_name, **log_params)

        def duration_ms() -> float:
            return round((time.perf_counter() - start_time) * 1000, 1)

        try:
            result = await call_next(context)

            summary = self._extract_result_summary(result)
            log.info("tool_completed", tool=tool_name, duration_ms=duration_ms(), **summary)

            summary_text = self._format_tool_summary(tool_name, result)
            if summary_text:
                ts = f"[dim]\\[{_timestamp()}][/dim] "
                get_console().print(
                    f"{ts}{_AGENT_TAG}{tool_name} -> {summary_text}",
                    style="green",
                    highlight=False,
                )
            return result

        except asyncio.CancelledError:
            # Server shutdown during tool execution
            log.info("tool_cancelled", tool=tool_name, duration_ms=duration_ms())
            return error_result(
                ErrorResponse(
                    code=MCPErrorCode.INTERNAL_ERROR,
                    message=f"Tool '{tool_name}' cancelled: server shutting down",
                    remediation="Retry once the server is running again.",
                )
            )

        except ValidationError as e:
            error_details = [
                {
                    "field": ".".join(str(p) for p in err.get("loc", [])),
                    "message": err.get("msg", ""),
                }
                for err in e.errors()
            ]
            log.warning(
                "tool_error",
                tool=tool_name,
                error_code=MCPErrorCode.INVALID_PARAMS.value,
                errors=error_details,
                duration_ms=duration_ms(),
            )
            return error_result(
                ErrorResponse(
                    code=MCPErrorCode.INVALID_PARAMS,
                    message=f"Invalid parameters for '{tool_name}'",
                    remediation="Fix the parameters listed in context.details and retry.",
                    context={"details": error_details},
                )
            )

        except MCPError as e:
            log.warning(
                "tool_error",
                tool=tool_name,
                error_code=e.code.value,
                error=e.message,
                path=e.path,
                duration_ms=duration_ms(),
            )
            return error_result(e.to_response())

        except ConfigError as e:
            log.warning(
                "tool_error",
                tool=tool_name,
                error_code=MCPErrorCode.CONFIG_ERROR.value,
                error=e.message,
                duration_ms=duration_ms(),
            )
            return error_result(
                ErrorResponse(
                    code=MCPErrorCode.CONFIG_ERROR,
                    message=e.message,
                    remediation="Fix the configuration file or flag named in the message.",
                    context=e.details,
                )
            )

        except Exception as e:
            # Traceback goes to debug logs only
            log.error(
                "tool_internal_error",
                tool=tool_name,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms(),
            )
            log.debug("tool_internal_error_traceback", tool=tool_name, exc_info=True)
            get_console().print(
                f"[red]✗[/red] {tool_name} failed: {type(e).__name__}: {e} "
                f"(request {request_id})",
                highlight=False,
            )
            return error_result(
                ErrorResponse(
                    code=MCPErrorCode.INTERNAL_ERROR,
                    message=f"Error calling tool '{tool_name}': {e}",
                    remediation=(
                        "Check the request id in the server log. "
                        "Retrying with the same parameters will likely fail again."
                    ),
                    context={"error_type": type(e).__name__},
                )
            )

        finally:
            clear_request_id()

    @staticmethod
    def _extract_log_params(kwargs: dict[str, Any]) -> dict[str, Any]:
        """Key params for the tool_start log, with long values truncated."""
        params: dict[str, Any] = {}
        for key, value in kwargs.items():
            if isinstance(value, str) and len(value) > 80:
                params[key] = value[:80] + "..."
            elif isinstance(value, list) and len(value) > 3:
                params[key] = f"[{len(value)} items]"
            elif value is not None:
                params[key] = value
        return params

    @staticmethod
    def _extract_result_dict(result: Any) -> dict[str, Any] | None:
        if hasattr(result, "structured_content") and isinstance(result.structured_content, dict):
            return result.structured_content
        if isinstance(result, dict):
            return result
        return None

    def _extract_result_summary(self, result: Any) -> dict[str, Any]:
        """Counters worth logging from a tool result."""
        data = self._extract_result_dict(result)
        if data is None:
            return {}
        summary: dict[str, Any] = {}
        if "success" in data:
            summary["success"] = data["success"]
        if "totalCount" in data:
            summary["total_count"] = data["totalCount"]
        counts = data.get("summary")
        if isinstance(counts, dict):
            summary["passed"] = counts.get("passed")
            summary["failed"] = counts.get("failed")
        coverage = data.get("coverage")
        if isinstance(coverage, dict):
            summary["lines_pct"] = coverage.get("lines")
        return summary

    def _format_tool_summary(self, tool_name: str, result: Any) -> str:
        data = self._extract_result_dict(result)
        if data is None:
            return ""
        if tool_name == "list_tests":
            return f"{data.get('totalCount', 0)} test files"
        if tool_name == "run_tests" and isinstance(data.get("summary"), dict):
            counts = data["summary"]
            return f"{counts.get('passed', 0)} passed, {counts.get('failed', 0)} failed"
        if tool_name == "analyze_coverage" and isinstance(data.get("coverage"), dict):
            return f"lines {data['coverage'].get('lines', 0)}%"
        if tool_name == "set_project_root":
            return str(data.get("projectName") or data.get("message", ""))
        return ""
