"""vitest-mcp CLI - serve the MCP server or check a project's toolchain."""

import asyncio
import json
from pathlib import Path

import click

from vitest_mcp.core.errors import ConfigError
from vitest_mcp.core.logging import configure_logging

__version__ = "0.1.0"


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="vitest-mcp")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Vitest MCP server - structured Vitest runs for AI agents.

    Without a subcommand, serves MCP over stdio.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve_command, config_args=(), log_file=None)


@cli.command(
    "serve",
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write DEBUG-level JSON logs to this absolute path",
)
@click.argument("config_args", nargs=-1, type=click.UNPROCESSED)
def serve_command(config_args: tuple[str, ...], log_file: Path | None) -> None:
    """Run the MCP server over stdio.

    CONFIG_ARGS are configuration flags (--format, --timeout, --threshold,
    --config, --verbose, ...) layered over the config file and environment.
    """
    from vitest_mcp.mcp.server import run_server

    try:
        run_server(config_args, log_file=str(log_file.expanduser().resolve()) if log_file else None)
    except ConfigError as e:
        raise click.ClickException(e.message) from e


@cli.command("check")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def check_command(path: Path, as_json: bool, verbose: bool) -> None:
    """Check Vitest and coverage-provider compatibility of a project.

    PATH is the project root (default: current directory). Exits with
    status 1 when a blocking problem is found.
    """
    from vitest_mcp.core.progress import (
        get_console,
        make_key_value_table,
        pluralize,
        spinner,
        status,
    )
    from vitest_mcp.testing.executor import CommandExecutor
    from vitest_mcp.testing.versions import VersionChecker, generate_version_report

    configure_logging(level="DEBUG" if verbose else "WARNING")
    project_root = path.resolve()
    checker = VersionChecker(CommandExecutor())

    if as_json:
        result = asyncio.run(checker.check(project_root))
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        with spinner("Checking Vitest toolchain"):
            result = asyncio.run(checker.check(project_root))
        console = get_console()
        vitest = result.vitest.version.version if result.vitest.version else "not found"
        coverage = (
            result.coverage_provider.version.version
            if result.coverage_provider.version
            else "not found"
        )
        console.print(
            make_key_value_table(
                [
                    ("Project", str(project_root)),
                    ("Vitest", vitest),
                    (result.coverage_provider.provider, coverage),
                ]
            )
        )
        console.print(generate_version_report(result), highlight=False, markup=False)
        if result.ok:
            status("Ready to serve", style="success")
        else:
            status(f"{pluralize(len(result.errors), 'blocking problem')} found", style="error")

    if not result.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
