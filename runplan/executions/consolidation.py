"""
Run data consolidation for partial re-runs.

Given the direct parents of the nodes a run targets, works out which of
them (and of their ancestors) must execute again and which prior results
can be handed to the execution backend as-is.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Set, Tuple

import networkx as nx
import structlog

from .errors import GraphCycleError
from .schemas import PinData, RunData, StartPlan

logger = structlog.get_logger()


class _RunDataConsolidator:
    """Walks node ancestry breadth-first and records start nodes and reusable data."""

    def __init__(self, run_data: RunData, pin_data: Optional[PinData], graph):
        self.run_data = run_data
        self.pin_data = pin_data or {}
        self.graph = graph
        self.start_node_names: List[str] = []
        self.reused: RunData = {}
        self._followed: List[Tuple[str, str]] = []
        # (node name, visited only as input of a start node)
        self._queue: Deque[Tuple[str, bool]] = deque()

    def consolidate(self, direct_parent_nodes: List[str]) -> None:
        expanded: Set[str] = set()
        seen_as_input: Set[str] = set()
        self._queue.extend((name, False) for name in direct_parent_nodes)

        while self._queue:
            name, as_input = self._queue.popleft()

            if as_input:
                if name in seen_as_input:
                    continue
                seen_as_input.add(name)
                self._reuse(name)
                if self.graph.is_node_disabled(name):
                    self._follow(name, as_input=True)
                continue

            if name in expanded or name in self.start_node_names:
                continue

            if self.graph.is_node_disabled(name):
                expanded.add(name)
                self._reuse(name)
                self._follow(name)
            elif self._must_restart(name):
                # Own result is stale, but its inputs are still needed
                self.start_node_names.append(name)
                self._follow(name, as_input=True)
            else:
                expanded.add(name)
                self._reuse(name)
                self._follow(name)

        self._check_acyclic()

    def _must_restart(self, name: str) -> bool:
        results = self.run_data.get(name) or []
        if results and results[0].failed:
            return True
        return not results and not self.pin_data.get(name)

    def _reuse(self, name: str) -> None:
        results = self.run_data.get(name)
        if results and not results[0].failed:
            self.reused[name] = results

    def _follow(self, name: str, as_input: bool = False) -> None:
        for parent in self.graph.get_parent_nodes(name):
            self._followed.append((parent, name))
            self._queue.append((parent, as_input))

    def _check_acyclic(self) -> None:
        if not self._followed:
            return
        try:
            cycle = nx.find_cycle(nx.DiGraph(self._followed))
        except nx.NetworkXNoCycle:
            return
        cycle_path = [edge[0] for edge in cycle]
        raise GraphCycleError(
            f"Cycle detected in workflow graph: {' -> '.join(cycle_path + cycle_path[:1])}",
            cycle_path=cycle_path,
        )


def consolidate_run_data_and_start_nodes(
    direct_parent_nodes: List[str],
    run_data: Optional[RunData],
    pin_data: Optional[PinData],
    graph,
) -> StartPlan:
    """
    Compute the start nodes and reusable run data for a partial re-run.

    A parent whose first prior result failed, or which has neither a prior
    result nor pinned data, must execute again. A parent with usable data is
    not started; its own parents are examined the same way instead. Disabled
    nodes never start, the walk looks through them to their parents.

    Args:
        direct_parent_nodes: Direct parents of the targeted nodes, in order
        run_data: Prior run results per node name, or None
        pin_data: Pinned output per node name
        graph: Accessor answering ``get_parent_nodes`` and ``is_node_disabled``

    Returns:
        StartPlan with start nodes in discovery order and the subset of the
        prior run data that can be reused, or None when nothing is reusable

    Raises:
        GraphCycleError: If the walked ancestry contains a cycle
    """
    if run_data is None:
        consolidator = _RunDataConsolidator({}, None, graph)
        consolidator.consolidate(direct_parent_nodes)
        return StartPlan(start_node_names=consolidator.start_node_names, run_data=None)

    consolidator = _RunDataConsolidator(run_data, pin_data, graph)
    consolidator.consolidate(direct_parent_nodes)

    logger.debug(
        "Consolidated run data",
        start_nodes=consolidator.start_node_names,
        reused_nodes=list(consolidator.reused),
    )

    return StartPlan(
        start_node_names=consolidator.start_node_names,
        run_data=consolidator.reused or None,
    )
