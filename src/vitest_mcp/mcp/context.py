"""Application context for MCP handlers.

Single object passed to all tool handlers with access to ops classes and
the two pieces of shared mutable state: the config resolver cache and the
project root guard.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vitest_mcp.config.loader import ConfigResolver
    from vitest_mcp.config.models import VitestMCPConfig
    from vitest_mcp.project.guard import ProjectRootGuard
    from vitest_mcp.testing.coverage.ops import CoverageOps
    from vitest_mcp.testing.executor import CommandExecutor
    from vitest_mcp.testing.ops import TestOps
    from vitest_mcp.testing.versions import VersionChecker


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers."""

    resolver: ConfigResolver
    guard: ProjectRootGuard
    executor: CommandExecutor
    version_checker: VersionChecker
    test_ops: TestOps
    coverage_ops: CoverageOps
    cli_args: tuple[str, ...] = field(default_factory=tuple)

    @property
    def config(self) -> VitestMCPConfig:
        """Resolved configuration (cached by the resolver)."""
        return self.resolver.resolve(self.cli_args)

    @classmethod
    def create(
        cls,
        cli_args: Sequence[str] = (),
        resolver: ConfigResolver | None = None,
        dev_mode: bool | None = None,
    ) -> AppContext:
        """Factory to create context with all ops wired together.

        Args:
            cli_args: Config flags forwarded from the command line.
            resolver: Optional existing resolver (reuses its cache if provided).
            dev_mode: Allow this package as a project root. Defaults to
                ``VITEST_MCP_DEV_MODE``.
        """
        from vitest_mcp.config.loader import ConfigResolver, EnvSettings
        from vitest_mcp.project.guard import ProjectRootGuard
        from vitest_mcp.testing.coverage.ops import CoverageOps
        from vitest_mcp.testing.executor import CommandExecutor
        from vitest_mcp.testing.ops import TestOps
        from vitest_mcp.testing.versions import VersionChecker

        if dev_mode is None:
            dev_mode = EnvSettings().dev_mode_enabled

        guard = ProjectRootGuard(dev_mode=dev_mode)
        executor = CommandExecutor()
        version_checker = VersionChecker(executor)

        return cls(
            resolver=resolver or ConfigResolver(),
            guard=guard,
            executor=executor,
            version_checker=version_checker,
            test_ops=TestOps(guard, executor, version_checker),
            coverage_ops=CoverageOps(guard, executor, version_checker),
            cli_args=tuple(cli_args),
        )
