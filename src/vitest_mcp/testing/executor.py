"""Vitest subprocess execution.

Builds the runner invocation and runs it with a bounded lifetime. The
executor only captures stdout/stderr/exit code/duration; interpreting the
outcome belongs to ``OutputProcessor``. Non-zero exits, timeouts and spawn
failures all come back as a ``RawExecutionResult``.

Environment shaping keeps the runner non-interactive and its output free of
color codes and telemetry noise.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from vitest_mcp.config.models import VitestMCPConfig
from vitest_mcp.mcp.errors import RootTargetError
from vitest_mcp.testing.models import RawExecutionResult

log = structlog.get_logger(__name__)

TIMEOUT_EXIT_CODE = 124
TERMINATE_GRACE_SEC = 2.0
_READ_CHUNK = 64 * 1024


def run_timeout_message(seconds: float) -> str:
    return (
        f"Command timed out after {seconds:g} seconds. "
        "This usually means the command is trying to run too many tests."
    )


def runner_env(
    extra: Mapping[str, str] | None = None,
    *,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Environment for a runner subprocess with non-interactive overrides."""
    env = dict(base_env) if base_env is not None else dict(os.environ)
    env.update(
        {
            # Signal CI environment - most tools respect this
            "CI": "true",
            "CONTINUOUS_INTEGRATION": "true",
            # Disable color output for cleaner parsing
            "NO_COLOR": "1",
            "FORCE_COLOR": "0",
            # Prevent browser opening
            "BROWSER": "none",
            # Node.js
            "NODE_ENV": "test",
            "npm_config_yes": "true",
            "npm_config_progress": "false",
            "NO_UPDATE_NOTIFIER": "1",
            # Silence the CJS deprecation banner at the source when Vite honors it
            "VITE_CJS_IGNORE_WARNING": "true",
            "VITEST_MCP_EXECUTION": "1",
        }
    )
    if extra:
        env.update(extra)
    return env


def relative_target(project_root: Path, target_path: Path) -> str:
    """Target path relative to the project root, posix-style.

    Raises:
        RootTargetError: The target is the project root itself.
    """
    relative = os.path.relpath(target_path, project_root)
    if not relative or relative == ".":
        raise RootTargetError(
            str(target_path),
            "Cannot target project root. Please specify a specific file or subdirectory.",
        )
    return relative.replace(os.sep, "/")


def build_run_command(project_root: Path, target_path: Path) -> list[str]:
    """``npx vitest run <target> --reporter=json``. Never watch mode."""
    return ["npx", "vitest", "run", relative_target(project_root, target_path), "--reporter=json"]


async def _drain(stream: asyncio.StreamReader | None, sink: list[bytes]) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            return
        sink.append(chunk)


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode(errors="replace")


class CommandExecutor:
    """Runs runner commands from the project root with a deadline."""

    async def execute(
        self,
        project_root: Path,
        target_path: Path,
        config: VitestMCPConfig,
    ) -> RawExecutionResult:
        """Run the tests under ``target_path`` and capture the outcome.

        Raises:
            RootTargetError: ``target_path`` is the project root; nothing is
                spawned.
        """
        cmd = build_run_command(project_root, target_path)
        timeout_sec = config.test_defaults.timeout_sec
        return await self.run(
            cmd,
            cwd=project_root,
            timeout_sec=timeout_sec,
            timeout_message=run_timeout_message(timeout_sec),
        )

    async def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        timeout_sec: float,
        timeout_message: str,
        env: Mapping[str, str] | None = None,
    ) -> RawExecutionResult:
        """Spawn ``cmd`` and collect its output until exit or deadline.

        stdout and stderr are drained concurrently while the process runs,
        so partial stdout survives a timeout.
        """
        command = tuple(cmd)
        program = shutil.which(command[0]) or command[0]
        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        start = time.monotonic()

        def elapsed_ms() -> int:
            return round((time.monotonic() - start) * 1000)

        log.debug("runner_spawn", command=" ".join(command), cwd=str(cwd), timeout_sec=timeout_sec)
        try:
            proc = await asyncio.create_subprocess_exec(
                program,
                *command[1:],
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=dict(env) if env is not None else runner_env(),
            )
        except OSError as e:
            log.warning("runner_spawn_failed", command=command[0], error=str(e))
            return RawExecutionResult(
                command=command,
                stdout="",
                stderr=f"Process error: {e}",
                exit_code=1,
                duration=elapsed_ms(),
            )

        async def communicate() -> int:
            await asyncio.gather(
                _drain(proc.stdout, stdout_chunks),
                _drain(proc.stderr, stderr_chunks),
            )
            return await proc.wait()

        try:
            exit_code = await asyncio.wait_for(communicate(), timeout=timeout_sec)
        except TimeoutError:
            await self._terminate(proc)
            log.warning(
                "runner_timeout",
                command=" ".join(command),
                timeout_sec=timeout_sec,
                stdout_bytes=sum(len(c) for c in stdout_chunks),
            )
            return RawExecutionResult(
                command=command,
                stdout=_decode(stdout_chunks),
                stderr=timeout_message,
                exit_code=TIMEOUT_EXIT_CODE,
                duration=elapsed_ms(),
            )

        log.debug("runner_exit", exit_code=exit_code, duration_ms=elapsed_ms())
        return RawExecutionResult(
            command=command,
            stdout=_decode(stdout_chunks),
            stderr=_decode(stderr_chunks),
            exit_code=exit_code,
            duration=elapsed_ms(),
        )

    @staticmethod
    async def _terminate(proc: asyncio.subprocess.Process) -> None:
        """SIGTERM, then SIGKILL after a short grace period."""
        try:
            proc.terminate()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(proc.wait(), timeout=TERMINATE_GRACE_SEC)
        except TimeoutError:
            try:
                proc.kill()
            except ProcessLookupError:
                return
            await proc.wait()
