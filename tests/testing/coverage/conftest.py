"""Shared Istanbul coverage fixtures."""

from typing import Any

import pytest


@pytest.fixture
def math_file_coverage() -> dict[str, Any]:
    """Istanbul entry for a three-statement file.

    Statement 0 (line 1) ran; statements on lines 2 and 5 did not. ``add``
    ran, the anonymous function on line 5 did not, and the ``if`` on line 2
    only ever took one arm.
    """
    return {
        "statementMap": {
            "0": {"start": {"line": 1, "column": 0}, "end": {"line": 1, "column": 40}},
            "1": {"start": {"line": 2, "column": 2}, "end": {"line": 2, "column": 20}},
            "2": {"start": {"line": 5, "column": 2}, "end": {"line": 5, "column": 30}},
        },
        "fnMap": {
            "0": {"name": "add", "decl": {"start": {"line": 1, "column": 13}}},
            "1": {"name": "", "decl": {"start": {"line": 5, "column": 0}}},
        },
        "branchMap": {
            "0": {"type": "if", "loc": {"start": {"line": 2, "column": 2}}},
        },
        "s": {"0": 3, "1": 0, "2": 0},
        "f": {"0": 3, "1": 0},
        "b": {"0": [2, 0]},
    }
