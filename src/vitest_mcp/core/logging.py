"""structlog setup for the server and the CLI.

Every event goes through stdlib ``logging`` so console and file outputs can
carry their own level and renderer. Each tool call binds a short request id
that ends up in every line it logs.

Nothing here writes to stdout. The MCP stdio transport owns it.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from vitest_mcp.config.models import LoggingConfig, LogOutputConfig

_request_id: ContextVar[str | None] = ContextVar("vitest_mcp_request_id", default=None)
_active_log_file: list[Path] = []

# Per-request chatter from the MCP SDK
_QUIET_LOGGERS = ("mcp.server.lowlevel.server", "fastmcp.server.context.to_client")


def set_request_id(request_id: str | None = None) -> str:
    """Bind ``request_id`` (or a fresh 12-char id) to the current context."""
    rid = request_id or uuid4().hex[:12]
    _request_id.set(rid)
    return rid


def get_request_id() -> str | None:
    return _request_id.get()


def clear_request_id() -> None:
    _request_id.set(None)


def get_log_file_path() -> Path | None:
    """First file output of the last ``configure_logging`` call."""
    return _active_log_file[0] if _active_log_file else None


def _inject_request_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    rid = _request_id.get()
    if rid:
        event_dict["request_id"] = rid
    return event_dict


def _level(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else fallback


class ConsoleSuppressingFilter(logging.Filter):
    """Drops console records while a spinner is drawing on stderr."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from vitest_mcp.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _build_handler(
    output: LogOutputConfig,
    pre_chain: list[structlog.types.Processor],
    fallback_level: int,
) -> logging.Handler:
    handler: logging.Handler
    to_console = output.destination == "stderr"
    if to_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.addFilter(ConsoleSuppressingFilter())
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        if not _active_log_file:
            _active_log_file.append(path)

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=to_console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    handler.setLevel(_level(output.level, fallback_level))
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog through stdlib handlers built from ``config.outputs``.

    Without ``config`` a single stderr output is used, rendered as JSON when
    ``json_format`` is set. Safe to call again; previous handlers are dropped.
    """
    from vitest_mcp.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level(config.level, logging.INFO)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _inject_request_id,  # type: ignore[list-item]
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers:
        old.close()
    root.handlers.clear()
    root.setLevel(root_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _active_log_file.clear()
    for output in config.outputs:
        root.addHandler(_build_handler(output, pre_chain, root_level))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    return logger.bind(logger=name) if name else logger  # type: ignore[no-any-return]
