"""Config module exports."""

from hdltest.config.loader import load_config
from hdltest.config.models import (
    DbtConfig,
    DiscoveryConfig,
    HdlTestConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "DbtConfig",
    "DiscoveryConfig",
    "HdlTestConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
