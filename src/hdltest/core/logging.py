"""structlog setup for the CLI and the run orchestrator.

Every ``LogOutputConfig`` becomes one stdlib handler with its own level and
renderer. Records emitted during an orchestrator run carry that run's
``run_id``. When an output writes to a file, its path is remembered so
CLI errors can point at it.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from hdltest.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

_log_file_path: Path | None = None
_installed: list[logging.Handler] = []

# Third-party loggers that are only useful when debugging them
_QUIET_LOGGERS = ("watchfiles.main", "asyncio")


def get_run_id() -> str | None:
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate the correlation ID of the current run."""
    rid = run_id or uuid4().hex[:12]
    _run_id.set(rid)
    return rid


def clear_run_id() -> None:
    _run_id.set(None)


def get_log_file_path() -> Path | None:
    """First file destination of the active configuration, if any."""
    return _log_file_path


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := get_run_id():
        event_dict["run_id"] = rid
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_run_id,  # type: ignore[list-item]
    ]


def _open_destination(destination: str) -> logging.Handler:
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def _build_handler(
    output: LogOutputConfig,
    level: int,
    shared: list[structlog.types.Processor],
) -> logging.Handler:
    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        stream = sys.stdout if output.destination == "stdout" else sys.stderr
        is_tty = output.destination in ("stderr", "stdout") and stream.isatty()
        renderer = structlog.dev.ConsoleRenderer(colors=is_tty, pad_event_to=0, pad_level=False)

    handler = _open_destination(output.destination)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )
    return handler


def configure_logging(config: LoggingConfig | None = None, *, level: str | None = None) -> None:
    """Route structlog through stdlib handlers built from *config*.

    Args:
        config: Outputs and levels; defaults to a single stderr console output.
        level: Overrides ``config.level`` (used by ``hdltest -v``).
    """
    global _log_file_path, _installed
    from hdltest.config.models import LoggingConfig

    config = config if config is not None else LoggingConfig()
    if level is not None:
        config = config.model_copy(update={"level": level.upper()})
    root_level = logging.getLevelNamesMapping()[config.level]

    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfigured per CLI command, so bound loggers must not be cached
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in _installed:
        old.close()
    root.handlers.clear()
    root.setLevel(root_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _log_file_path = None
    _installed = []
    for output in config.outputs:
        if output.destination not in ("stderr", "stdout") and _log_file_path is None:
            _log_file_path = Path(output.destination)
        # An explicit -v override applies to every output
        output_level = config.level if level is not None else (output.level or config.level)
        handler = _build_handler(output, logging.getLevelNamesMapping()[output_level], shared)
        root.addHandler(handler)
        _installed.append(handler)
