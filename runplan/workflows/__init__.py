"""Workflow document models and graph access."""

from .graph import WorkflowGraph
from .models import Connection, NodeDescriptor, WorkflowData

__all__ = [
    "WorkflowGraph",
    "Connection",
    "NodeDescriptor",
    "WorkflowData",
]
