"""
Tests for run data consolidation.

Consolidation decides which parents of a partial run must execute again
and which prior results are handed to the backend for reuse.
"""

from unittest.mock import MagicMock

import pytest

from runplan.executions.consolidation import consolidate_run_data_and_start_nodes
from runplan.executions.errors import GraphCycleError
from runplan.workflows.graph import WorkflowGraph
from runplan.workflows.models import Connection, NodeDescriptor

from conftest import failed, ok


def mock_graph(parents=None, disabled=()):
    """Graph accessor double answering from plain dicts."""
    parents = parents or {}
    graph = MagicMock()
    graph.get_parent_nodes.side_effect = lambda name: list(parents.get(name, []))
    graph.is_node_disabled.side_effect = lambda name: name in disabled
    return graph


def chain_graph(*names, disabled=()):
    """Build a linear graph names[0] -> names[1] -> ..."""
    nodes = [NodeDescriptor(name=name, type="action", disabled=name in disabled) for name in names]
    connections = [Connection(source=a, target=b) for a, b in zip(names, names[1:])]
    return WorkflowGraph(nodes, connections)


class TestConsolidationWithoutRunData:
    """Nothing can be reused when there is no prior run data."""

    def test_empty_parents(self):
        result = consolidate_run_data_and_start_nodes([], None, None, mock_graph())

        assert result.run_data is None
        assert result.start_node_names == []

    def test_enabled_parents_become_start_nodes(self):
        graph = mock_graph(parents={"D": ["E"]}, disabled={"D"})

        result = consolidate_run_data_and_start_nodes(["A", "D"], None, None, graph)

        assert result.start_node_names == ["A", "E"]
        assert result.run_data is None

    def test_pin_data_is_ignored(self):
        result = consolidate_run_data_and_start_nodes(
            ["A"], None, {"A": [{"json": {}}]}, mock_graph()
        )

        assert result.start_node_names == ["A"]
        assert result.run_data is None


class TestConsolidationWithRunData:
    """Start node selection and run data reuse."""

    def test_reuse_and_gap_behind_disabled_parent(self):
        run_data = {
            "node2": [ok("data2")],
            "node3": [ok("data3")],
        }
        pin_data = {"node2": [{"json": {"value": "data2"}}]}
        graph = mock_graph(parents={"node1": ["node3"]}, disabled={"node3"})

        result = consolidate_run_data_and_start_nodes(["node1", "node2"], run_data, pin_data, graph)

        assert "node1" in result.start_node_names
        assert "node3" not in result.start_node_names
        assert result.run_data == run_data

    def test_parent_without_any_data_restarts(self):
        run_data = {"node2": [ok("data2")]}
        graph = mock_graph()

        result = consolidate_run_data_and_start_nodes(["node1"], run_data, None, graph)

        assert "node1" in result.start_node_names
        assert result.run_data is None

    def test_failed_parent_restarts_and_is_not_reused(self):
        run_data = {"node1": [failed()]}
        graph = mock_graph()

        result = consolidate_run_data_and_start_nodes(["node1"], run_data, None, graph)

        assert "node1" in result.start_node_names
        assert result.run_data is None

    def test_failure_takes_precedence_over_pin_data(self):
        run_data = {"node1": [failed()]}
        pin_data = {"node1": [{"json": {"value": "pinned"}}]}

        result = consolidate_run_data_and_start_nodes(["node1"], run_data, pin_data, mock_graph())

        assert result.start_node_names == ["node1"]
        assert result.run_data is None

    def test_only_first_result_decides(self):
        run_data = {
            "A": [ok(), failed()],
            "B": [failed(), ok()],
        }

        result = consolidate_run_data_and_start_nodes(["A", "B"], run_data, None, mock_graph())

        assert result.start_node_names == ["B"]
        assert result.run_data == {"A": run_data["A"]}

    def test_restarting_node_keeps_inputs_but_not_ancestry(self):
        graph = chain_graph("A", "B", "C", "D")
        run_data = {"A": [ok()], "B": [ok()]}

        result = consolidate_run_data_and_start_nodes(["C"], run_data, None, graph)

        assert result.start_node_names == ["C"]
        assert result.run_data == {"B": run_data["B"]}

    def test_fully_satisfied_ancestry_is_reused(self):
        graph = chain_graph("A", "B", "C", "D")
        run_data = {"A": [ok()], "B": [ok()], "C": [ok()]}

        result = consolidate_run_data_and_start_nodes(["C"], run_data, None, graph)

        assert result.start_node_names == []
        assert result.run_data == run_data

    def test_failed_ancestor_is_found_through_satisfied_parent(self):
        graph = chain_graph("A", "B", "C", "D")
        run_data = {"A": [ok()], "B": [failed()], "C": [ok()]}

        result = consolidate_run_data_and_start_nodes(["C"], run_data, None, graph)

        assert result.start_node_names == ["B"]
        assert result.run_data == {"A": run_data["A"], "C": run_data["C"]}

    def test_pinned_parent_walks_to_its_own_parents(self):
        graph = mock_graph(parents={"A": ["B"], "B": ["C"]})
        run_data = {"B": [ok()]}
        pin_data = {"A": [{"json": {"pinned": True}}]}

        result = consolidate_run_data_and_start_nodes(["A"], run_data, pin_data, graph)

        assert result.start_node_names == ["C"]
        assert result.run_data == {"B": run_data["B"]}

    def test_disabled_parent_is_looked_through(self):
        graph = mock_graph(parents={"D": ["E"]}, disabled={"D"})

        result = consolidate_run_data_and_start_nodes(["D"], {}, None, graph)

        assert result.start_node_names == ["E"]
        assert result.run_data is None

    def test_start_nodes_follow_discovery_order(self):
        graph = mock_graph(parents={"X": ["P"]})
        run_data = {"X": [ok()]}

        result = consolidate_run_data_and_start_nodes(["X", "Y"], run_data, None, graph)

        assert result.start_node_names == ["Y", "P"]

    def test_duplicates_are_not_readded(self):
        graph = mock_graph(parents={"A": ["Shared"], "B": ["Shared"]})
        run_data = {"A": [ok()], "B": [ok()]}

        result = consolidate_run_data_and_start_nodes(["A", "B", "A"], run_data, None, graph)

        assert result.start_node_names == ["Shared"]

    def test_cycle_raises(self):
        graph = mock_graph(parents={"A": ["B"], "B": ["A"]})
        run_data = {"A": [ok()], "B": [ok()]}

        with pytest.raises(GraphCycleError) as exc_info:
            consolidate_run_data_and_start_nodes(["A"], run_data, None, graph)

        assert set(exc_info.value.cycle_path) == {"A", "B"}
        assert exc_info.value.error_code == "GRAPH_CYCLE"

    def test_diamond_is_not_a_cycle(self):
        graph = mock_graph(parents={"B": ["A"], "C": ["A"]})
        run_data = {"A": [ok()], "B": [ok()], "C": [ok()]}

        result = consolidate_run_data_and_start_nodes(["B", "C"], run_data, None, graph)

        assert result.start_node_names == []
        assert result.run_data == run_data


@pytest.mark.parametrize(
    "direct_parents,run_data,pin_data,parents,disabled",
    [
        (["node1", "node2"], {"node2": [ok()], "node3": [ok()]}, {"node2": [{}]}, {"node1": ["node3"]}, {"node3"}),
        (["C"], {"A": [ok()], "B": [failed()], "C": [ok()]}, None, {"C": ["B"], "B": ["A"]}, set()),
        (["X", "Y"], {"X": [failed()], "Y": [ok()], "Z": [ok()]}, {"X": [{}]}, {"Y": ["Z"], "X": ["Y"]}, set()),
        (["D"], {"D": [ok()], "E": [failed()]}, None, {"D": ["E"]}, {"D"}),
    ],
)
def test_start_nodes_are_never_reused(direct_parents, run_data, pin_data, parents, disabled):
    graph = mock_graph(parents=parents, disabled=disabled)

    result = consolidate_run_data_and_start_nodes(direct_parents, run_data, pin_data, graph)

    reused = result.run_data or {}
    assert not set(result.start_node_names) & set(reused)
    for name, results in reused.items():
        assert results == run_data[name]
