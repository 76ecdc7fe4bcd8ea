"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a scriptable stand-in for the dbt executable.
"""

import stat
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local hdltest package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of hdltest modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("hdltest"):
        del sys.modules[module_name]

from hdltest.config.models import DbtConfig, HdlTestConfig  # noqa: E402
from hdltest.core.logging import clear_run_id  # noqa: E402

# `build` prints the canned discovery output (or fails when the marker
# file exists). Other verbs echo their arguments; an argument containing
# "fail" exits 1 with two error summaries, "slow" sleeps first.
_FAKE_DBT = """#!/bin/sh
echo "$@" >> "{calls}"
if [ "$1" = "build" ]; then
  if [ -f "{broken}" ]; then
    echo "dbt: build graph is broken"
    exit 2
  fi
  cat "{discovery}"
  exit 0
fi
case "$*" in
  *slow*) sleep 30 ;;
esac
case "$*" in
  *fail*)
    echo "%Error: rtl/top.sv:12:3: Cannot find module 'missing'"
    echo "errors: 3, warnings: 1"
    echo "Simulation finished. Errors: 1, Warnings: 0"
    exit 1
    ;;
esac
echo "running $2"
echo "errors: 0, warnings: 0"
"""


@dataclass
class FakeDbt:
    """Handle to the fake dbt executable installed under tmp_path."""

    path: Path
    workspace: Path
    discovery_file: Path
    calls_file: Path
    broken_marker: Path

    def set_discovery(self, text: str) -> None:
        self.discovery_file.write_text(text)

    def break_build(self) -> None:
        self.broken_marker.write_text("")

    def calls(self) -> list[str]:
        if not self.calls_file.exists():
            return []
        return self.calls_file.read_text().splitlines()

    def config(self, **dbt: object) -> HdlTestConfig:
        return HdlTestConfig(dbt=DbtConfig(tool=str(self.path), **dbt))  # type: ignore[arg-type]


@pytest.fixture
def fake_dbt(tmp_path: Path) -> FakeDbt:
    """A workspace directory plus an executable fake dbt script."""
    workspace = tmp_path / "ws"
    workspace.mkdir()
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    fake = FakeDbt(
        path=bin_dir / "dbt",
        workspace=workspace,
        discovery_file=tmp_path / "discovery.txt",
        calls_file=tmp_path / "calls.txt",
        broken_marker=tmp_path / "broken",
    )
    fake.set_discovery("")
    fake.path.write_text(
        _FAKE_DBT.format(
            calls=fake.calls_file,
            broken=fake.broken_marker,
            discovery=fake.discovery_file,
        )
    )
    fake.path.chmod(fake.path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return fake


@pytest.fixture(autouse=True)
def _reset_run_id() -> Iterator[None]:
    yield
    clear_run_id()
