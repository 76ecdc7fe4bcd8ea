"""Diagnostics extraction from simulator output."""

from hdltest.diagnostics.models import Diagnostic, DiagnosticCollection, Severity
from hdltest.diagnostics.parsers import extract_diagnostics, parse_output

__all__ = [
    "Diagnostic",
    "DiagnosticCollection",
    "Severity",
    "extract_diagnostics",
    "parse_output",
]
