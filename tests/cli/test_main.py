"""Tests for the vitest-mcp CLI."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
import structlog
from click.testing import CliRunner

from vitest_mcp.cli.main import __version__, cli
from vitest_mcp.core.errors import ConfigError

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """`check` configures logging against the runner's captured stderr."""
    yield
    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    structlog.reset_defaults()


class TestServeCommand:
    """Tests for `vitest-mcp serve`."""

    def test_forwards_config_flags(self) -> None:
        with patch("vitest_mcp.mcp.server.run_server") as run_server:
            result = runner.invoke(cli, ["serve", "--timeout", "5000", "--format", "detailed"])
        assert result.exit_code == 0, result.output
        run_server.assert_called_once_with(
            ("--timeout", "5000", "--format", "detailed"), log_file=None
        )

    def test_log_file_is_absolute(self, tmp_path: Path) -> None:
        log_file = tmp_path / "server.jsonl"
        with patch("vitest_mcp.mcp.server.run_server") as run_server:
            result = runner.invoke(cli, ["serve", "--log-file", str(log_file)])
        assert result.exit_code == 0, result.output
        assert run_server.call_args.kwargs["log_file"] == str(log_file.resolve())

    def test_no_subcommand_serves(self) -> None:
        with patch("vitest_mcp.mcp.server.run_server") as run_server:
            result = runner.invoke(cli, [])
        assert result.exit_code == 0, result.output
        run_server.assert_called_once_with((), log_file=None)

    def test_config_error_exits_nonzero(self) -> None:
        with patch(
            "vitest_mcp.mcp.server.run_server",
            side_effect=ConfigError.file_not_found("/missing.json"),
        ):
            result = runner.invoke(cli, ["serve", "--config", "/missing.json"])
        assert result.exit_code == 1
        assert "Config file not found: /missing.json" in result.output

    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])
        assert __version__ in result.output


class TestCheckCommand:
    """Tests for `vitest-mcp check`."""

    def test_json_output(self, installed_vitest: Path) -> None:
        result = runner.invoke(cli, ["check", str(installed_vitest), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["vitest"]["version"] == "3.2.4"
        assert data["coverageProvider"]["version"] == "3.2.4"
        assert data["errors"] == []

    def test_report_output(self, installed_vitest: Path) -> None:
        result = runner.invoke(cli, ["check", str(installed_vitest)])
        assert result.exit_code == 0, result.output
        assert "All version requirements satisfied" in result.output
        assert "Ready to serve" in result.output

    def test_report_counts_blocking_problems(self, vitest_project: Path) -> None:
        with patch(
            "vitest_mcp.testing.versions.VersionChecker._version_from_cli",
            new=AsyncMock(return_value=None),
        ):
            result = runner.invoke(cli, ["check", str(vitest_project)])
        assert result.exit_code == 1
        assert "1 blocking problem found" in result.output

    def test_missing_vitest_fails(self, vitest_project: Path) -> None:
        with patch(
            "vitest_mcp.testing.versions.VersionChecker._version_from_cli",
            new=AsyncMock(return_value=None),
        ):
            result = runner.invoke(cli, ["check", str(vitest_project), "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["errors"] == [
            "Vitest not found. Please install vitest as a dependency."
        ]

    def test_path_must_exist(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["check", str(tmp_path / "nope")])
        assert result.exit_code == 2
