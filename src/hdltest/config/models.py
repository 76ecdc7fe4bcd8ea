"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (HDLTEST__SECTION__KEY)
3. Workspace YAML (.hdltest/config.yaml)
4. Global YAML (~/.config/hdltest/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    HDLTEST__<SECTION>__<KEY>=<VALUE>

Examples:
    HDLTEST__DBT__TARGET=sim
    HDLTEST__DBT__SIMULATOR=xcelium
    HDLTEST__LOGGING__LEVEL=DEBUG
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from hdltest.core.excludes import DEFAULT_EXCLUDED_DIRS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        HDLTEST__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. The CLI -v flag forces DEBUG.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DbtConfig(BaseModel):
    """Build tool and simulator settings used to synthesize commands.

    Env vars:
        HDLTEST__DBT__TOOL: Build tool executable (default: dbt)
        HDLTEST__DBT__TARGET: Simulation target name searched for in discovery output
        HDLTEST__DBT__VERBOSITY: Value passed as -verbosity=<value>
        HDLTEST__DBT__SIMULATOR: Value passed as hdl-simulator=<value>
    """

    tool: str = Field(
        default="dbt",
        description="Build tool command. May include a path or wrapper prefix.",
    )
    target: str = Field(
        default="sim",
        description="Name of the simulation target. Discovery only picks up "
        "lines whose path ends in /<parent>/<target>.",
    )
    verbosity: str = Field(
        default="low",
        description="Simulation verbosity passed to every run.",
    )
    simulator: str = Field(
        default="xsim",
        description="HDL simulator backend selection.",
    )
    backend_flags: dict[str, str] = Field(
        default_factory=dict,
        description="Backend specific build flags appended as name=value. "
        "Entries with an empty value are omitted.",
    )

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: str) -> str:
        if not v or "/" in v or ":" in v:
            raise ValueError(f"Target must be a bare name without '/' or ':', got {v!r}")
        return v


class DiscoveryConfig(BaseModel):
    """Discovery trigger configuration.

    Env vars:
        HDLTEST__DISCOVERY__DEBOUNCE_SEC: Change debounce window
    """

    excluded_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_DIRS),
        description="Directory name patterns whose changes never trigger discovery.",
    )
    watch_patterns: list[str] = Field(
        default_factory=lambda: [
            "*.go",
            "*.sv",
            "*.svh",
            "*.v",
            "*.vh",
            "*.vhd",
            "*.vhdl",
        ],
        description="File name patterns whose changes trigger discovery.",
    )
    debounce_sec: float = Field(
        default=0.5,
        description="Quiet time before a batch of changes triggers discovery.",
    )

    @field_validator("debounce_sec")
    @classmethod
    def validate_debounce(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"debounce_sec must be >= 0, got {v}")
        return v


class HdlTestConfig(BaseModel):
    """Root configuration for hdltest.

    All settings can be configured via:
    1. Environment variables: HDLTEST__SECTION__KEY
    2. YAML config files (workspace or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    dbt: DbtConfig = Field(default_factory=DbtConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
