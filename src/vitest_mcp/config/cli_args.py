"""Command-line flag layer of configuration resolution.

Flags are declared once as click parameters and parsed from a plain argv
list, so the resolver can compare argv sequences for cache invalidation.
Unknown arguments are ignored; invalid values for known flags raise
``ConfigError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click
from click.core import ParameterSource

from vitest_mcp.core.errors import ConfigError

_FORMATS = click.Choice(["summary", "detailed"])

# click parameter name -> (config group, camelCase key)
_FIELD_MAP: dict[str, tuple[str, str]] = {
    "test_format": ("testDefaults", "format"),
    "timeout": ("testDefaults", "timeout"),
    "threshold": ("coverageDefaults", "threshold"),
    "coverage_format": ("coverageDefaults", "format"),
    "include_details": ("coverageDefaults", "includeDetails"),
    "verbose": ("server", "verbose"),
    "validate_paths": ("server", "validatePaths"),
    "allow_root": ("server", "allowRootExecution"),
    "working_dir": ("server", "workingDirectory"),
    "max_files": ("safety", "maxFiles"),
}


def config_params() -> list[click.Parameter]:
    """Fresh click parameters for every configuration flag."""
    return [
        click.Option(["-c", "--config", "config_path"], help="Path to a JSON config file"),
        click.Option(["--format", "test_format"], type=_FORMATS, help="Default test output format"),
        click.Option(["--timeout"], type=click.IntRange(min=1), help="Test timeout in ms"),
        click.Option(
            ["--threshold"], type=click.IntRange(0, 100), help="Coverage threshold (0-100)"
        ),
        click.Option(["--coverage-format"], type=_FORMATS, help="Default coverage format"),
        click.Option(["--include-details"], is_flag=True, help="Detailed coverage by default"),
        click.Option(["-v/-q", "--verbose/--quiet"], help="Enable or disable verbose logging"),
        click.Option(
            ["--validate-paths/--no-validate-paths"], help="Check that targets exist first"
        ),
        click.Option(["--allow-root"], is_flag=True, help="Allow running on the project root"),
        click.Option(["--working-dir", "--cwd", "working_dir"], help="Working directory"),
        click.Option(["--max-files"], type=click.IntRange(min=1), help="Max files per run"),
    ]


def _parser() -> click.Command:
    return click.Command(
        "vitest-mcp",
        params=config_params(),
        add_help_option=False,
        context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
    )


def _parse(args: Sequence[str]) -> click.Context:
    try:
        return _parser().make_context("vitest-mcp", list(args))
    except click.ClickException as e:
        raise ConfigError.invalid_value("cli", " ".join(args), e.format_message()) from e


def parse_cli_args(args: Sequence[str]) -> dict[str, Any]:
    """Turn argv into a nested camelCase override dict.

    Only flags actually present on the command line appear in the result,
    so defaults never mask lower-precedence layers.
    """
    ctx = _parse(args)
    overrides: dict[str, Any] = {}
    for name, (group, key) in _FIELD_MAP.items():
        if ctx.get_parameter_source(name) is not ParameterSource.COMMANDLINE:
            continue
        overrides.setdefault(group, {})[key] = ctx.params[name]
    return overrides


def get_config_path(args: Sequence[str]) -> str | None:
    """Explicit ``--config/-c`` path, if given."""
    return _parse(args).params.get("config_path")
