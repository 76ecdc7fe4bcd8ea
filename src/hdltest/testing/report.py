"""Run report sinks.

The orchestrator reports each leaf through a ``RunReport``:
enqueued -> started -> passed | failed, plus an append-only output log.
``RecordingRunReport`` keeps everything in memory; ``ConsoleRunReport``
renders it with rich as results arrive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol

from rich.console import Console
from rich.markup import escape

from hdltest.testing.models import TestNode

OutcomeStatus = Literal["passed", "failed", "skipped"]


class RunReport(Protocol):
    """Sink for per-leaf outcomes of one run."""

    def enqueued(self, node: TestNode) -> None: ...

    def started(self, node: TestNode) -> None: ...

    def passed(self, node: TestNode, duration_ms: int) -> None: ...

    def failed(self, node: TestNode, message: str, duration_ms: int) -> None: ...

    def skipped(self, node: TestNode) -> None: ...

    def append_output(self, text: str) -> None: ...

    def end(self) -> None: ...


@dataclass
class LeafOutcome:
    node_id: str
    status: OutcomeStatus
    duration_ms: int = 0
    message: str | None = None


@dataclass
class RecordingRunReport:
    """Collects outcomes and output in memory."""

    enqueued_ids: list[str] = field(default_factory=list)
    started_ids: list[str] = field(default_factory=list)
    outcomes: list[LeafOutcome] = field(default_factory=list)
    output: list[str] = field(default_factory=list)
    ended: bool = False

    def enqueued(self, node: TestNode) -> None:
        self.enqueued_ids.append(node.node_id)

    def started(self, node: TestNode) -> None:
        self.started_ids.append(node.node_id)

    def passed(self, node: TestNode, duration_ms: int) -> None:
        self.outcomes.append(LeafOutcome(node.node_id, "passed", duration_ms))

    def failed(self, node: TestNode, message: str, duration_ms: int) -> None:
        self.outcomes.append(LeafOutcome(node.node_id, "failed", duration_ms, message))

    def skipped(self, node: TestNode) -> None:
        self.outcomes.append(LeafOutcome(node.node_id, "skipped"))

    def append_output(self, text: str) -> None:
        self.output.append(text)

    def end(self) -> None:
        self.ended = True

    def outcome(self, node_id: str) -> LeafOutcome | None:
        return next((o for o in self.outcomes if o.node_id == node_id), None)

    @property
    def log(self) -> str:
        return "".join(self.output)


_STATUS_MARK = {
    "passed": "[green]✓[/green]",
    "failed": "[red]✗[/red]",
    "skipped": "[yellow]-[/yellow]",
}


class ConsoleRunReport(RecordingRunReport):
    """Prints one line per finished leaf; full logs only with ``show_output``."""

    def __init__(self, console: Console | None = None, *, show_output: bool = False) -> None:
        super().__init__()
        self._console = console or Console(stderr=True)
        self._show_output = show_output

    def started(self, node: TestNode) -> None:
        super().started(node)
        self._console.print(f"  [dim]running[/dim] {escape(node.node_id)}", highlight=False)

    def passed(self, node: TestNode, duration_ms: int) -> None:
        super().passed(node, duration_ms)
        self._line("passed", node, duration_ms)

    def failed(self, node: TestNode, message: str, duration_ms: int) -> None:
        super().failed(node, message, duration_ms)
        self._line("failed", node, duration_ms)
        headline = message.strip().splitlines()[-1] if message.strip() else ""
        if headline:
            self._console.print(f"      [red]{escape(headline)}[/red]", highlight=False)

    def skipped(self, node: TestNode) -> None:
        super().skipped(node)
        self._line("skipped", node, 0)

    def append_output(self, text: str) -> None:
        super().append_output(text)
        if self._show_output:
            self._console.print(escape(text.replace("\r\n", "\n")), end="", highlight=False)

    def end(self) -> None:
        super().end()
        passed = sum(1 for o in self.outcomes if o.status == "passed")
        failed = sum(1 for o in self.outcomes if o.status == "failed")
        style = "red" if failed else "green"
        self._console.print(
            f"[{style}]{passed} passed, {failed} failed[/{style}]", highlight=False
        )

    def _line(self, status: OutcomeStatus, node: TestNode, duration_ms: int) -> None:
        timing = f" [dim]({duration_ms / 1000:.1f}s)[/dim]" if duration_ms else ""
        ident = f"[dim]{escape(node.node_id)}[/dim]"
        self._console.print(
            f"{_STATUS_MARK[status]} {escape(node.label)} {ident}{timing}",
            highlight=False,
        )
