"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import os
import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local vitest_mcp package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of vitest_mcp modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("vitest_mcp"):
        del sys.modules[module_name]


@pytest.fixture
def vitest_project(tmp_path: Path) -> Path:
    """Minimal Vitest project: package.json, a source file and its test."""
    (tmp_path / "package.json").write_text('{"name": "sample-app", "version": "1.0.0"}')
    src = tmp_path / "src"
    src.mkdir()
    (src / "math.ts").write_text("export const add = (a: number, b: number) => a + b\n")
    (src / "math.test.ts").write_text(
        "import { add } from './math'\n"
        "import { it, expect } from 'vitest'\n"
        "it('adds', () => {\n"
        "  expect(add(1, 2)).toBe(3)\n"
        "})\n"
    )
    return tmp_path


@pytest.fixture
def installed_vitest(vitest_project: Path) -> Path:
    """vitest_project with vitest and the v8 coverage provider in node_modules."""
    for package, version in (("vitest", "3.2.4"), ("@vitest/coverage-v8", "3.2.4")):
        pkg_dir = vitest_project / "node_modules" / package
        pkg_dir.mkdir(parents=True)
        (pkg_dir / "package.json").write_text(f'{{"name": "{package}", "version": "{version}"}}')
    return vitest_project


@pytest.fixture(autouse=True)
def _clean_vitest_mcp_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Host VITEST_MCP_* variables must not leak into configuration tests."""
    for key in list(os.environ):
        if key.upper().startswith("VITEST_MCP_"):
            monkeypatch.delenv(key)
