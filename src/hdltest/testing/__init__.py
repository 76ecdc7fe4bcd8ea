"""Test discovery and execution."""

from hdltest.testing.discovery import DiscoveryEngine, parse_discovery_output
from hdltest.testing.ids import TestId, TestIdError, parse_test_id
from hdltest.testing.launcher import ProcessRegistry, run_shell
from hdltest.testing.models import RunRequest, RunSummary, TestInfo, TestNode, TestTree
from hdltest.testing.report import ConsoleRunReport, RecordingRunReport, RunReport
from hdltest.testing.runner import RunOrchestrator, build_command, failure_headline

__all__ = [
    "ConsoleRunReport",
    "DiscoveryEngine",
    "ProcessRegistry",
    "RecordingRunReport",
    "RunOrchestrator",
    "RunReport",
    "RunRequest",
    "RunSummary",
    "TestId",
    "TestIdError",
    "TestInfo",
    "TestNode",
    "TestTree",
    "build_command",
    "failure_headline",
    "parse_discovery_output",
    "parse_test_id",
    "run_shell",
]
