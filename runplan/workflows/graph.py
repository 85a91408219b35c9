"""
Read-only graph accessor over a workflow document.

Wraps a NetworkX directed graph built from the workflow's nodes and
connections and answers the parent/child/disabled questions asked by
the run planner.
"""

from collections import deque
from typing import Dict, Iterable, List, Optional

import networkx as nx

from .models import Connection, NodeDescriptor, WorkflowData


class WorkflowGraph:
    """Graph view over workflow nodes and their main connections."""

    def __init__(
        self,
        nodes: Iterable[NodeDescriptor],
        connections: Iterable[Connection] = (),
        workflow_id: Optional[str] = None,
        name: Optional[str] = None,
    ):
        self.id = workflow_id
        self.name = name
        self._graph = nx.DiGraph()
        self._nodes: Dict[str, NodeDescriptor] = {}

        for node in nodes:
            self._nodes[node.name] = node
            self._graph.add_node(node.name, type=node.type, disabled=node.disabled)

        for conn in connections:
            self._graph.add_edge(conn.source, conn.target, source_output=conn.source_output)

    @classmethod
    def from_workflow_data(cls, workflow_data: WorkflowData) -> "WorkflowGraph":
        """Build a graph from a workflow snapshot."""
        return cls(
            workflow_data.nodes,
            workflow_data.connections,
            workflow_id=workflow_data.id,
            name=workflow_data.name,
        )

    @property
    def nodes(self) -> Dict[str, NodeDescriptor]:
        return self._nodes

    def get_node(self, name: str) -> Optional[NodeDescriptor]:
        return self._nodes.get(name)

    def is_node_disabled(self, name: str) -> bool:
        """Check if a node is disabled. Unknown nodes count as enabled."""
        node = self._nodes.get(name)
        return node.disabled if node else False

    def get_parent_nodes(self, name: str, depth: int = 1) -> List[str]:
        """
        Get the parents of a node.

        Args:
            name: Node to look up
            depth: How many levels to walk up, -1 for all ancestors

        Returns:
            Parent names, nearest first, in connection order
        """
        return self._walk(name, self._graph.predecessors, depth)

    def get_child_nodes(self, name: str, depth: int = 1) -> List[str]:
        """Get the children of a node, nearest first."""
        return self._walk(name, self._graph.successors, depth)

    def _walk(self, name: str, neighbours, depth: int) -> List[str]:
        if name not in self._graph:
            return []

        found: List[str] = []
        seen = {name}
        queue = deque([(name, 0)])

        while queue:
            current, level = queue.popleft()
            if depth != -1 and level >= depth:
                continue
            for neighbour in neighbours(current):
                if neighbour in seen:
                    continue
                seen.add(neighbour)
                found.append(neighbour)
                queue.append((neighbour, level + 1))

        return found
