"""Internal error types for configuration and coverage data.

Codes are grouped by range: 2xxx for configuration, 6xxx for coverage data.
Errors an agent can act on (bad targets, missing project root, an old
Vitest) are raised from ``vitest_mcp.mcp.errors`` instead.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    COVERAGE_SUMMARY_MISSING = 6001
    COVERAGE_DATA_MISSING = 6002


@dataclass(frozen=True, slots=True)
class VitestMCPError(Exception):
    """Coded error; ``details`` is surfaced as the envelope's ``context``."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": int(self.code),
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": dict(self.details),
        }

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.error_name}: {self.message}"


class ConfigError(VitestMCPError):
    """A config file or flag that was asked for explicitly is unusable."""

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            ErrorCode.CONFIG_FILE_NOT_FOUND,
            f"Config file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            ErrorCode.CONFIG_PARSE_ERROR,
            f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, name: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            ErrorCode.CONFIG_INVALID_VALUE,
            f"Invalid value for '{name}': {reason}",
            details={"field": name, "value": str(value), "reason": reason},
        )


class CoverageDataError(VitestMCPError):
    """The coverage run produced nothing usable.

    Not the same as 0% coverage, which is a valid result.
    """

    @classmethod
    def summary_missing(cls) -> "CoverageDataError":
        return cls(ErrorCode.COVERAGE_SUMMARY_MISSING, "Coverage data has no summary block")

    @classmethod
    def data_missing(cls, reason: str) -> "CoverageDataError":
        return cls(
            ErrorCode.COVERAGE_DATA_MISSING,
            f"No coverage data available: {reason}",
            details={"reason": reason},
        )
