"""Human-facing console output for the ``vitest-mcp`` CLI and middleware.

All of it goes to stderr; under ``serve`` stdout is the MCP transport.

Usage::

    with spinner("Probing vitest version"):
        check = await checker.check(root)
    status("All version requirements satisfied", style="success")
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from rich.console import Console
from rich.table import Table

_console = Console(stderr=True)
_live_display = threading.local()

_MARKERS = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
}


def get_console() -> Console:
    return _console


def is_console_suppressed() -> bool:
    return bool(getattr(_live_display, "on", False))


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Hold back console log records for the duration; file logs still flow."""
    previous = is_console_suppressed()
    _live_display.on = True
    try:
        yield
    finally:
        _live_display.on = previous


def _is_tty() -> bool:
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """One styled line, e.g. ``✓ vitest 3.2.4 is supported``."""
    from vitest_mcp.core.logging import get_logger

    _console.print(" " * indent + _MARKERS.get(style, "") + message, highlight=False)
    get_logger("progress").debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    return f"{count} {singular if count == 1 else (plural or singular + 's')}"


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Animated spinner on a terminal, a plain ``message...`` line otherwise."""
    text = " " * indent + message
    if not _is_tty():
        _console.print(f"{text}...")
        yield
        return
    with suppress_console_logs(), _console.status(f"[cyan]{text}[/cyan]", spinner="dots"):
        yield


def make_key_value_table(rows: Sequence[tuple[str, str]]) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("key", style="cyan")
    table.add_column("value")
    for key, value in rows:
        table.add_row(key, value)
    return table
