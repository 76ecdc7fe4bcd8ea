"""Core module exports."""

from hdltest.core.errors import (
    ConfigError,
    DiscoveryError,
    ErrorCode,
    ExecutionError,
    HdlTestError,
    ProcessFailed,
)
from hdltest.core.logging import (
    clear_run_id,
    configure_logging,
    get_log_file_path,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "DiscoveryError",
    "ErrorCode",
    "ExecutionError",
    "HdlTestError",
    "ProcessFailed",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_log_file_path",
    "get_run_id",
    "set_run_id",
]
