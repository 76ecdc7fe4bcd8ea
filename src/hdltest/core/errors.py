"""hdltest error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Discovery
- 7xxx: Execution
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Discovery (3xxx)
    DISCOVERY_BUILD_FAILED = 3001
    DISCOVERY_INVALID_ID = 3002

    # Execution (7xxx)
    EXECUTION_LAUNCH_FAILED = 7001
    EXECUTION_PROCESS_FAILED = 7002


@dataclass(frozen=True)
class HdlTestError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(HdlTestError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class DiscoveryError(HdlTestError):
    """Errors raised while discovering test cases."""

    @classmethod
    def build_failed(cls, command: str, output: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_BUILD_FAILED,
            message=f"'{command}' exited with an error",
            retryable=True,
            details={"command": command, "output": output},
        )

    @classmethod
    def invalid_id(cls, text: str, reason: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_INVALID_ID,
            message=f"Invalid test id '{text}': {reason}",
            details={"id": text, "reason": reason},
        )


class ExecutionError(HdlTestError):
    """Errors raised while launching or running a test process."""

    @classmethod
    def launch_failed(cls, command: str, reason: str) -> "ExecutionError":
        return cls(
            code=ErrorCode.EXECUTION_LAUNCH_FAILED,
            message=f"Could not launch '{command}': {reason}",
            details={"command": command, "reason": reason},
        )


class ProcessFailed(ExecutionError):
    """A launched command exited non-zero. Carries the captured stdout."""

    @classmethod
    def from_exit(cls, command: str, returncode: int | None, output: str) -> "ProcessFailed":
        return cls(
            code=ErrorCode.EXECUTION_PROCESS_FAILED,
            message=f"Command exited with code {returncode}: {command}",
            details={"command": command, "returncode": returncode, "output": output},
        )

    @property
    def output(self) -> str:
        return str(self.details.get("output", ""))

    @property
    def returncode(self) -> int | None:
        return self.details.get("returncode")
