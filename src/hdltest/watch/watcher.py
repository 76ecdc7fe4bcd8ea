"""File watcher that turns HDL source edits into discovery triggers.

watchfiles reports raw filesystem events; this module filters them down
to files matching the configured watch patterns outside excluded
directories, and batches bursts with a sliding-window debounce so a
branch checkout produces one discovery cycle instead of hundreds.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from hdltest.core.excludes import DEFAULT_EXCLUDED_DIRS, is_excluded_path

logger = structlog.get_logger()

DEFAULT_WATCH_PATTERNS: tuple[str, ...] = (
    "*.go",
    "*.sv",
    "*.svh",
    "*.v",
    "*.vh",
    "*.vhd",
    "*.vhdl",
)

# Debouncing configuration
DEBOUNCE_WINDOW_SEC = 0.5  # Sliding window for batching rapid changes
MAX_DEBOUNCE_WAIT_SEC = 2.0  # Maximum wait before forcing flush


def _summarize_changes_by_type(paths: list[Path]) -> str:
    """Summarize changes like ``"3 SystemVerilog files, 1 BUILD file"``."""
    ext_names: dict[str, str] = {
        ".sv": "SystemVerilog",
        ".svh": "SystemVerilog header",
        ".v": "Verilog",
        ".vh": "Verilog header",
        ".vhd": "VHDL",
        ".vhdl": "VHDL",
        ".go": "BUILD",
    }

    ext_counts: Counter[str] = Counter(p.suffix.lower() for p in paths)

    parts: list[str] = []
    for ext, count in ext_counts.most_common(3):
        name = ext_names.get(ext, ext.lstrip(".").upper() if ext else "other")
        word = "file" if count == 1 else "files"
        parts.append(f"{count} {name} {word}")

    shown_count = sum(count for _, count in ext_counts.most_common(3))
    remaining = len(paths) - shown_count
    if remaining > 0:
        word = "other" if remaining == 1 else "others"
        parts.append(f"{remaining} {word}")

    return ", ".join(parts)


@dataclass
class FileWatcher:
    """
    Async file watcher with sliding-window debouncing.

    - Recursive watchfiles ``awatch`` over the workspace root
    - Paths are kept only if their name matches ``watch_patterns`` and no
      component matches ``excluded_dirs``
    - Changes are buffered until ``debounce_window`` of quiet time;
      ``max_debounce_wait`` caps the delay under a constant stream
    - ``on_change`` receives each flushed batch as workspace-relative paths
    """

    workspace_root: Path
    on_change: Callable[[list[Path]], None]
    watch_patterns: Iterable[str] = DEFAULT_WATCH_PATTERNS
    excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS
    debounce_window: float = DEBOUNCE_WINDOW_SEC
    max_debounce_wait: float = MAX_DEBOUNCE_WAIT_SEC
    force_polling: bool = False

    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    # Debouncing state
    _pending_changes: set[Path] = field(default_factory=set, init=False)
    _last_change_time: float = field(default=0.0, init=False)
    _first_change_time: float = field(default=0.0, init=False)
    _debounce_task: asyncio.Task[None] | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        # awatch reports resolved absolute paths
        self.workspace_root = self.workspace_root.resolve()
        self.watch_patterns = tuple(self.watch_patterns)
        self.excluded_dirs = tuple(self.excluded_dirs)

    @property
    def running(self) -> bool:
        return self._watch_task is not None

    async def start(self) -> None:
        """Start watching for file changes."""
        if self._watch_task is not None:
            return

        self._stop_event.clear()
        self._debounce_task = asyncio.create_task(self._debounce_flush_loop())
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "file_watcher_started",
            workspace_root=str(self.workspace_root),
            mode="polling" if self.force_polling else "native",
            debounce_window=self.debounce_window,
        )

    async def stop(self) -> None:
        """Stop watching and flush anything still pending."""
        self._stop_event.set()

        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._debounce_task
        self._debounce_task = None

        if self._pending_changes:
            self._flush_pending()

        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None

        logger.info("file_watcher_stopped")

    def is_relevant(self, rel_path: Path) -> bool:
        """True if a change to *rel_path* should trigger discovery."""
        if is_excluded_path(rel_path.parent, self.excluded_dirs):
            return False
        return any(fnmatchcase(rel_path.name, p) for p in self.watch_patterns)

    def _queue_change(self, path: Path) -> None:
        """Queue a change for debounced delivery."""
        now = time.monotonic()

        if not self._pending_changes:
            self._first_change_time = now

        self._pending_changes.add(path)
        self._last_change_time = now

    def _should_flush(self) -> bool:
        if not self._pending_changes:
            return False

        now = time.monotonic()
        time_since_last = now - self._last_change_time
        time_since_first = now - self._first_change_time

        return time_since_last >= self.debounce_window or time_since_first >= self.max_debounce_wait

    def _flush_pending(self) -> None:
        if not self._pending_changes:
            return

        paths = sorted(self._pending_changes)
        self._pending_changes.clear()
        self._first_change_time = 0.0
        self._last_change_time = 0.0

        logger.info("changes_detected", count=len(paths), summary=_summarize_changes_by_type(paths))

        self.on_change(paths)

    async def _debounce_flush_loop(self) -> None:
        """Background task that flushes when the debounce window elapses."""
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(0.05)
                if self._should_flush():
                    self._flush_pending()
        except asyncio.CancelledError:
            pass

    async def _watch_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                try:
                    async for changes in awatch(
                        self.workspace_root,
                        step=50,
                        rust_timeout=5_000,
                        stop_event=self._stop_event,
                        force_polling=self.force_polling,
                        poll_delay_ms=100,
                        ignore_permission_denied=True,
                    ):
                        self._handle_changes(changes)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    if self._stop_event.is_set():
                        return
                    logger.error("watcher_error", error=str(e))
                    await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            pass

    def _handle_changes(self, changes: set[tuple[Change, str]]) -> None:
        """Filter a raw watchfiles batch and queue what remains."""
        for change_type, path_str in changes:
            try:
                rel_path = Path(path_str).relative_to(self.workspace_root)
            except ValueError:
                continue

            if not self.is_relevant(rel_path):
                logger.debug("path_ignored", path=str(rel_path))
                continue

            self._queue_change(rel_path)
            logger.debug("path_queued", path=str(rel_path), change_type=change_type.name)
