"""Diagnostic models - positioned messages from simulator output."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """Diagnostic severity level."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    """A single compiler/simulator message attached to a source position."""

    path: str
    line: int  # 1-based, as printed by the tool
    message: str
    source: str  # tool that produced this
    severity: Severity = Severity.ERROR
    column: int | None = None
    code: str | None = None  # "WIDTH", "VRFC 10-2989", "CUVUNF"


@dataclass
class DiagnosticCollection:
    """Mutable per-file diagnostic store shared across runs."""

    _entries: dict[str, list[Diagnostic]] = field(default_factory=dict)

    def set(self, path: str, diagnostics: Iterable[Diagnostic]) -> None:
        """Replace everything recorded for *path*."""
        items = list(diagnostics)
        if items:
            self._entries[path] = items
        else:
            self._entries.pop(path, None)

    def get(self, path: str) -> list[Diagnostic]:
        return list(self._entries.get(path, []))

    def clear(self) -> None:
        self._entries.clear()

    @property
    def paths(self) -> list[str]:
        return sorted(self._entries)

    def __iter__(self) -> Iterator[Diagnostic]:
        for path in self.paths:
            yield from self._entries[path]

    def __len__(self) -> int:
        return sum(len(v) for v in self._entries.values())
