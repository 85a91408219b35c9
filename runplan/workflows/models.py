"""Workflow document models consumed by the run planner."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class NodeDescriptor(BaseModel):
    """A single node of a workflow document."""

    name: str = Field(..., description="Unique node name")
    type: str = Field(..., description="Node type identifier")
    disabled: bool = Field(default=False, description="Whether the node is disabled")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Node parameters")

    @property
    def is_trigger(self) -> bool:
        """Check if the node is a workflow entry point."""
        node_type = self.type.lower()
        return "trigger" in node_type or node_type == "webhook"


class Connection(BaseModel):
    """A directed main connection between two nodes."""

    source: str = Field(..., description="Source node name")
    target: str = Field(..., description="Target node name")
    source_output: int = Field(default=0, description="Source output index")


def get_enabled_triggers(nodes: List[NodeDescriptor]) -> List[NodeDescriptor]:
    """Trigger nodes that are not disabled, in document order."""
    return [node for node in nodes if node.is_trigger and not node.disabled]


class WorkflowData(BaseModel):
    """Snapshot of the workflow document as it would be saved."""

    id: Optional[str] = Field(None, description="Workflow ID")
    name: Optional[str] = Field(None, description="Workflow name")
    active: bool = Field(default=False, description="Whether the workflow is active")
    nodes: List[NodeDescriptor] = Field(default_factory=list, description="Workflow nodes")
    connections: List[Connection] = Field(default_factory=list, description="Workflow connections")
    pin_data: Optional[Dict[str, List[Dict[str, Any]]]] = Field(
        None, description="Pinned output per node name"
    )

    def get_enabled_triggers(self) -> List[NodeDescriptor]:
        """Get enabled trigger nodes."""
        return get_enabled_triggers(self.nodes)
