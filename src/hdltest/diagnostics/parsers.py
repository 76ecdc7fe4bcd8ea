"""Output parsers for HDL compiler/simulator messages.

Each parser recognises one tool family's message line format. All of them
run over every line of a captured log; dbt runs a different tool chain
per simulator backend and one log can mix elaboration and runtime tools.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from hdltest.diagnostics.models import Diagnostic, DiagnosticCollection, Severity

LineParser = Callable[[str], Diagnostic | None]


def _severity_from_str(s: str) -> Severity:
    """Convert string to Severity."""
    s = s.lower()
    if s in ("error", "e", "f", "fatal", "critical warning"):
        return Severity.ERROR
    if s in ("warning", "w"):
        return Severity.WARNING
    return Severity.INFO


# =============================================================================
# Verilator
# =============================================================================

_VERILATOR_RE = re.compile(
    r"^%(?P<sev>Error|Warning)(?:-(?P<code>[A-Z0-9_]+))?:\s+"
    r"(?P<path>[^:\s]+):(?P<line>\d+):(?:(?P<col>\d+):)?\s*(?P<msg>.*)$"
)


def parse_verilator(line: str) -> Diagnostic | None:
    """``%Warning-WIDTH: rtl/top.sv:20:13: Operator ASSIGN expects 8 bits``"""
    m = _VERILATOR_RE.match(line)
    if not m:
        return None
    return Diagnostic(
        path=m.group("path"),
        line=int(m.group("line")),
        column=int(m.group("col")) if m.group("col") else None,
        severity=_severity_from_str(m.group("sev")),
        code=m.group("code"),
        message=m.group("msg").strip(),
        source="verilator",
    )


# =============================================================================
# Questa / ModelSim
# =============================================================================

_QUESTA_RE = re.compile(
    r"^\*\* (?P<sev>Error|Warning|Fatal)(?: \(suppressible\))?:\s+"
    r"(?P<path>[^\s()]+)\((?P<line>\d+)\):\s*"
    r"(?:\((?P<code>[\w-]+)\)\s*)?(?P<msg>.*)$"
)


def parse_questa(line: str) -> Diagnostic | None:
    """``** Error: rtl/top.sv(12): (vlog-2110) Illegal reference to net "x".``"""
    m = _QUESTA_RE.match(line)
    if not m:
        return None
    return Diagnostic(
        path=m.group("path"),
        line=int(m.group("line")),
        severity=_severity_from_str(m.group("sev")),
        code=m.group("code"),
        message=m.group("msg").strip(),
        source="questa",
    )


# =============================================================================
# Cadence Xcelium
# =============================================================================

_XCELIUM_RE = re.compile(
    r"^(?P<tool>xm\w+|xrun): \*(?P<sev>[EWF]),(?P<code>\w+) "
    r"\((?P<path>[^,()]+),(?P<line>\d+)\|(?P<col>\d+)\):\s*(?P<msg>.*)$"
)


def parse_xcelium(line: str) -> Diagnostic | None:
    """``xmvlog: *E,EXPSMC (./rtl/top.sv,12|8): expecting a semicolon (';').``"""
    m = _XCELIUM_RE.match(line)
    if not m:
        return None
    return Diagnostic(
        path=m.group("path"),
        line=int(m.group("line")),
        column=int(m.group("col")),
        severity=_severity_from_str(m.group("sev")),
        code=m.group("code"),
        message=m.group("msg").strip(),
        source=m.group("tool"),
    )


# =============================================================================
# Vivado xsim / xvlog / xelab
# =============================================================================

_VIVADO_RE = re.compile(
    r"^(?P<sev>ERROR|WARNING|CRITICAL WARNING): \[(?P<code>[^\]]+)\] "
    r"(?P<msg>.*) \[(?P<path>[^\[\]]+):(?P<line>\d+)\]\s*$"
)


def parse_vivado(line: str) -> Diagnostic | None:
    """``ERROR: [VRFC 10-2989] 'foo' is not declared [/work/rtl/top.sv:12]``"""
    m = _VIVADO_RE.match(line)
    if not m:
        return None
    return Diagnostic(
        path=m.group("path"),
        line=int(m.group("line")),
        severity=_severity_from_str(m.group("sev")),
        code=m.group("code"),
        message=m.group("msg").strip(),
        source="vivado",
    )


PARSERS: tuple[LineParser, ...] = (
    parse_verilator,
    parse_questa,
    parse_xcelium,
    parse_vivado,
)


def parse_output(output: str) -> list[Diagnostic]:
    """Parse every recognised message line in *output*, in order."""
    diagnostics: list[Diagnostic] = []
    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue
        for parser in PARSERS:
            diag = parser(line)
            if diag is not None:
                diagnostics.append(diag)
                break
    return diagnostics


def extract_diagnostics(
    output: str,
    collection: DiagnosticCollection,
    *,
    root: Path | None = None,
) -> list[Diagnostic]:
    """Parse *output* and record the results in *collection*.

    Every file mentioned in the output has its previous entries replaced.
    Relative paths are resolved against *root* when given, both as the
    collection key and in the stored diagnostic.
    """
    diagnostics: list[Diagnostic] = []
    by_path: dict[str, list[Diagnostic]] = {}
    for diag in parse_output(output):
        if root is not None and not Path(diag.path).is_absolute():
            diag = replace(diag, path=str((root / diag.path).resolve()))
        diagnostics.append(diag)
        by_path.setdefault(diag.path, []).append(diag)
    for path, items in by_path.items():
        collection.set(path, items)
    return diagnostics
