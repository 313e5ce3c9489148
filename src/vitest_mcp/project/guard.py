"""Project root guard.

Holds the single active project directory for a server session. Every tool
that needs a project directory reads it from here and fails fast when it
has not been set.
"""

from __future__ import annotations

import json
import os
import re
import tomllib
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from vitest_mcp.config.constants import SELF_PACKAGE_NAMES
from vitest_mcp.mcp.errors import (
    InvalidProjectRootError,
    InvalidTargetError,
    PathNotAllowedError,
    ProjectRootNotSetError,
    TargetNotFoundError,
)

log = structlog.get_logger(__name__)

_DRIVE_LETTER = re.compile(r"^[A-Za-z]:\\")

VITEST_CONFIG_NAMES = ("vitest.config.ts", "vitest.config.js", "vitest.config.mjs")


@dataclass(frozen=True, slots=True)
class ProjectInfo:
    """Display info for the active project."""

    path: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "name": self.name}


def is_absolute_root(path: str) -> bool:
    """Absolute on either platform: leading ``/`` or a drive letter."""
    return path.startswith("/") or bool(_DRIVE_LETTER.match(path))


def is_within(path: str, allowed: str) -> bool:
    """True when ``path`` equals ``allowed`` or is a proper descendant of it."""
    resolved = os.path.abspath(path)
    base = os.path.abspath(allowed)
    return resolved == base or resolved.startswith(base.rstrip(os.sep) + os.sep)


def _manifest_name(root: Path) -> str | None:
    """Package name from package.json, else pyproject.toml. None if unreadable."""
    package_json = root / "package.json"
    if package_json.is_file():
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        name = data.get("name") if isinstance(data, dict) else None
        return name if isinstance(name, str) else None

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            return None
        name = data.get("project", {}).get("name")
        return name if isinstance(name, str) else None
    return None


def _project_info(root: Path) -> ProjectInfo:
    parts = [p for p in re.split(r"[\\/]", str(root)) if p]
    return ProjectInfo(path=str(root), name=parts[-1] if parts else "unknown")


class ProjectRootGuard:
    """Single mutable cell holding the validated project root.

    Owned by ``AppContext``; last write wins.
    """

    def __init__(self, *, dev_mode: bool = False) -> None:
        self._dev_mode = dev_mode
        self._root: Path | None = None
        self._validated = False

    def set_root(self, path: str, allowed_paths: Sequence[str] | None = None) -> ProjectInfo:
        """Validate ``path`` and make it the active project root.

        Raises:
            InvalidProjectRootError: Relative, missing, not a directory, no
                project markers, or this tool's own package.
            PathNotAllowedError: Outside the configured allowlist.
        """
        requested = path.strip()
        if not requested:
            raise InvalidProjectRootError(path, "Path parameter is required")

        if not is_absolute_root(requested):
            raise InvalidProjectRootError(
                requested,
                "Project root must be an absolute path "
                "(starting with / on Unix or drive letter on Windows)",
            )

        if allowed_paths and not any(is_within(requested, a) for a in allowed_paths):
            raise PathNotAllowedError(requested, allowed_paths)

        root = Path(requested)
        if not root.exists():
            raise InvalidProjectRootError(requested, f"Directory does not exist: {requested}")
        if not root.is_dir():
            raise InvalidProjectRootError(requested, f"Path is not a directory: {requested}")

        has_package_json = (root / "package.json").is_file()
        has_vitest_config = any((root / name).is_file() for name in VITEST_CONFIG_NAMES)
        if not has_package_json and not has_vitest_config:
            raise InvalidProjectRootError(
                requested,
                "Directory does not appear to be a valid project "
                f"(no package.json or vitest.config found): {requested}",
            )

        if not self._dev_mode and _manifest_name(root) in SELF_PACKAGE_NAMES:
            raise InvalidProjectRootError(
                requested,
                "Cannot set project root to the Vitest MCP package itself. "
                "This tool is meant to test other projects, not itself. "
                "(Set VITEST_MCP_DEV_MODE=true to override for development)",
            )

        self._root = root
        self._validated = True
        info = _project_info(root)
        log.info("project_root_set", path=info.path, name=info.name)
        return info

    def get_root(self) -> Path:
        """Active project root.

        Raises:
            ProjectRootNotSetError: ``set_root`` has not succeeded yet.
        """
        if self._root is None:
            raise ProjectRootNotSetError()
        return self._root

    def has_root(self) -> bool:
        return self._root is not None and self._validated

    def reset(self) -> None:
        """Forget the project root (test isolation)."""
        self._root = None
        self._validated = False

    def project_info(self) -> ProjectInfo | None:
        return _project_info(self._root) if self._root is not None else None

    def resolve_target(self, target: str) -> Path:
        """Resolve ``target`` against the active root; it must exist inside it.

        Raises:
            ProjectRootNotSetError: No root yet.
            InvalidTargetError: ``target`` points outside the project root.
            TargetNotFoundError: Nothing at the resolved path.
        """
        root = self.get_root()
        resolved = Path(os.path.normpath(root / target))
        if not is_within(str(resolved), str(root)):
            raise InvalidTargetError(
                str(resolved),
                f"Target is outside the project root: {target} (project root: {root})",
                remediation="Pass a path inside the project root, relative to it.",
            )
        if not resolved.exists():
            raise TargetNotFoundError(target, str(resolved))
        return resolved

    def is_root(self, path: Path) -> bool:
        return self._root is not None and os.path.abspath(path) == os.path.abspath(self._root)
