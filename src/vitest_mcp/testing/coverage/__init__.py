"""Coverage analysis: Istanbul map filtering, aggregation and thresholds."""

from vitest_mcp.testing.coverage.istanbul import transform_coverage_map, uncovered_items
from vitest_mcp.testing.coverage.models import (
    CoverageAnalysisResult,
    CoverageMetrics,
    CoverageTotals,
    FileBreakdown,
    ThresholdViolation,
    UncoveredItems,
)
from vitest_mcp.testing.coverage.ops import CoverageOps
from vitest_mcp.testing.coverage.processor import CoverageProcessingOptions, process_coverage
from vitest_mcp.testing.coverage.thresholds import read_vitest_thresholds

__all__ = [
    "CoverageAnalysisResult",
    "CoverageMetrics",
    "CoverageOps",
    "CoverageProcessingOptions",
    "CoverageTotals",
    "FileBreakdown",
    "ThresholdViolation",
    "UncoveredItems",
    "process_coverage",
    "read_vitest_thresholds",
    "transform_coverage_map",
    "uncovered_items",
]
