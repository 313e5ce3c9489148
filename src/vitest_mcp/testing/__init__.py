"""Test operations module - list_tests / run_tests / analyze_coverage."""

from vitest_mcp.testing.models import (
    ExecutionContext,
    ProcessedTestResult,
    RawExecutionResult,
    TestOutcomeSummary,
)
from vitest_mcp.testing.ops import ListTestsResult, TestOps

__all__ = [
    "ExecutionContext",
    "ListTestsResult",
    "ProcessedTestResult",
    "RawExecutionResult",
    "TestOps",
    "TestOutcomeSummary",
]
