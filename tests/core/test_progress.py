"""Tests for core/progress.py module."""

from unittest.mock import patch

from rich.table import Table

from vitest_mcp.core import progress
from vitest_mcp.core.progress import (
    is_console_suppressed,
    make_key_value_table,
    pluralize,
    spinner,
    status,
    suppress_console_logs,
)


class TestPluralize:
    """Tests for pluralize function."""

    def test_singular_and_plural(self) -> None:
        assert pluralize(1, "file") == "1 file"
        assert pluralize(0, "file") == "0 files"
        assert pluralize(2, "entry", "entries") == "2 entries"


class TestSuppressConsoleLogs:
    """Tests for suppress_console_logs."""

    def test_restores_after_exception(self) -> None:
        try:
            with suppress_console_logs():
                assert is_console_suppressed()
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert not is_console_suppressed()


class TestStatusAndSpinner:
    """Tests for console output helpers."""

    def test_status_prefixes_style(self) -> None:
        with patch.object(progress, "_console") as console:
            status("done", style="success", indent=2)
        printed = console.print.call_args[0][0]
        assert printed.startswith("  [green]")
        assert printed.endswith("done")

    def test_spinner_without_tty_prints_message(self) -> None:
        with (
            patch.object(progress, "_is_tty", return_value=False),
            patch.object(progress, "_console") as console,
        ):
            with spinner("Checking versions"):
                pass
        console.print.assert_called_once_with("Checking versions...")


class TestKeyValueTable:
    """Tests for make_key_value_table."""

    def test_rows(self) -> None:
        table = make_key_value_table([("Project", "/p"), ("Vitest", "3.2.4")])
        assert isinstance(table, Table)
        assert table.row_count == 2
