"""Tests for testing/models.py module.

Covers:
- TextRange offset conversion
- TestNode tree helpers and identity
- TestTree snapshot replacement and lookup
- RunRequest id resolution
- RunSummary
"""

from __future__ import annotations

from pathlib import Path

import pytest

from hdltest.testing.ids import GeneratorCaseId, ParamsId, SimulationId
from hdltest.testing.models import (
    Position,
    RunRequest,
    RunSummary,
    SourceLocation,
    TestNode,
    TestTree,
    TextRange,
)

TARGET = "//lib/fifo/sim"


def _tree() -> TestTree:
    sim = TestNode(SimulationId(TARGET), "fifo/sim")
    sim.add(TestNode(ParamsId(TARGET, param="8"), "8"))
    sim.add(TestNode(ParamsId(TARGET, param="16"), "16"))
    other = TestNode(SimulationId("//lib/uart/sim"), "uart/sim")
    other.add(TestNode(GeneratorCaseId("//lib/uart/sim", case="rx"), "rx"))
    tree = TestTree()
    tree.replace([sim, other])
    return tree


class TestTextRange:
    """TextRange.from_offsets tests."""

    def test_first_line(self) -> None:
        text = "abc `TEST_CASE(\"x\")"
        r = TextRange.from_offsets(text, 4, len(text))
        assert r.start == Position(0, 4)
        assert r.end == Position(0, len(text))

    def test_later_line_is_zero_based(self) -> None:
        text = "line0\nline1\n  marker\n"
        start = text.index("marker")
        r = TextRange.from_offsets(text, start, start + 6)
        assert r.start == Position(2, 2)
        assert r.end == Position(2, 8)


class TestTestNode:
    """TestNode tests."""

    def test_node_id_is_serialized_id(self) -> None:
        node = TestNode(ParamsId(TARGET, param="8"), "8")
        assert node.node_id == "params:8://lib/fifo/sim"

    def test_leaf_when_no_children(self) -> None:
        node = TestNode(SimulationId(TARGET), "fifo/sim")
        assert node.is_leaf
        node.add(TestNode(ParamsId(TARGET, param="8"), "8"))
        assert not node.is_leaf

    def test_walk_is_preorder(self) -> None:
        tree = _tree()
        ids = [n.node_id for n in tree.roots[0].walk()]
        assert ids == [
            "simulation://lib/fifo/sim",
            "params:8://lib/fifo/sim",
            "params:16://lib/fifo/sim",
        ]

    def test_equality_by_id(self) -> None:
        a = TestNode(SimulationId(TARGET), "a")
        b = TestNode(SimulationId(TARGET), "b")
        assert a == b
        assert hash(a) == hash(b)

    def test_to_dict_includes_range(self, tmp_path: Path) -> None:
        node = TestNode(
            GeneratorCaseId(TARGET, case="rx"),
            "rx",
            uri=tmp_path / "tb.sv",
            source=SourceLocation(tmp_path / "tb.sv", TextRange(Position(3, 2), Position(3, 20))),
        )
        data = node.to_dict()
        assert data["id"] == "testCaseGenerator://lib/fifo/sim:rx"
        assert data["range"] == [3, 2, 3, 20]
        assert "children" not in data


class TestTestTree:
    """TestTree tests."""

    def test_replace_bumps_generation(self) -> None:
        tree = TestTree()
        tree.replace([])
        tree.replace([])
        assert tree.generation == 2

    def test_find(self) -> None:
        tree = _tree()
        node = tree.find("testCaseGenerator://lib/uart/sim:rx")
        assert node is not None
        assert node.label == "rx"
        assert tree.find("simulation://nope/sim") is None

    def test_len_counts_roots(self) -> None:
        assert len(_tree()) == 2


class TestRunRequest:
    """RunRequest tests."""

    def test_from_ids_resolves_nodes(self) -> None:
        tree = _tree()
        request = RunRequest.from_ids(
            tree,
            ["simulation://lib/fifo/sim"],
            ["params:16://lib/fifo/sim"],
            debug=True,
        )
        assert request.include is not None
        assert [n.label for n in request.include] == ["fifo/sim"]
        assert request.excluded_ids() == frozenset({"params:16://lib/fifo/sim"})
        assert request.debug is True

    def test_empty_include_means_everything(self) -> None:
        request = RunRequest.from_ids(_tree(), [])
        assert request.include is None

    def test_unknown_id_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            RunRequest.from_ids(_tree(), ["simulation://missing/sim"])


class TestRunSummary:
    def test_ok_requires_no_failures(self) -> None:
        assert RunSummary("r", passed=3).ok
        assert not RunSummary("r", passed=3, failed=1).ok

    def test_cancelled_run_not_ok(self) -> None:
        assert not RunSummary("r", cancelled=True).ok
