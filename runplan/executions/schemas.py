"""Run planning schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..workflows.models import WorkflowData


class TaskSource(BaseModel):
    """Where a node's input came from."""

    previous_node: str = Field(..., description="Node that produced the input")
    previous_node_output: int = Field(default=0, description="Output index of that node")
    previous_node_run: int = Field(default=0, description="Run index of that node")


class TaskData(BaseModel):
    """Result of a single node run, either output data or an error."""

    start_time: Optional[datetime] = Field(None, description="When the node started")
    execution_time: Optional[float] = Field(None, description="Execution time in ms")
    data: Optional[Dict[str, Any]] = Field(None, description="Output data per connection type")
    error: Optional[Dict[str, Any]] = Field(None, description="Error marker when the run failed")
    source: List[Optional[TaskSource]] = Field(default_factory=list, description="Input sources")

    @property
    def failed(self) -> bool:
        return self.error is not None


RunData = Dict[str, List[TaskData]]
PinData = Dict[str, List[Dict[str, Any]]]


class StartPlan(BaseModel):
    """Nodes to (re-)execute and the prior run data they can reuse."""

    start_node_names: List[str] = Field(default_factory=list, description="Nodes to execute from scratch")
    run_data: Optional[RunData] = Field(None, description="Carried-over run data")


class StartNodeData(BaseModel):
    """A start node with the source of its input."""

    name: str = Field(..., description="Start node name")
    source_data: Optional[TaskSource] = Field(None, description="Input source of the node")


class StartRunData(BaseModel):
    """Payload sent to the execution backend."""

    workflow_data: WorkflowData = Field(..., description="Workflow snapshot to run")
    start_nodes: Optional[List[StartNodeData]] = Field(None, description="Nodes to start from")
    run_data: Optional[RunData] = Field(None, description="Reused run data")
    destination_node: Optional[str] = Field(None, description="Node to stop at")


class ExecutionAck(BaseModel):
    """Immediate acknowledgement returned by the execution backend.

    Accepts the backend's camelCase keys as well as the field names.
    """

    model_config = ConfigDict(populate_by_name=True)

    execution_id: Optional[str] = Field(
        None, alias="executionId", description="ID of the started execution"
    )
    waiting_for_webhook: bool = Field(
        default=False, alias="waitingForWebhook", description="Whether the run waits for a webhook call"
    )


class RunWorkflowOptions(BaseModel):
    """Options of a run request coming from the editor."""

    destination_node: Optional[str] = Field(None, description="Run up to this node")
    trigger_node: Optional[str] = Field(None, description="Trigger node to replay")
    node_data: Optional[TaskData] = Field(None, description="Output to replay for the trigger node")
    source: Optional[str] = Field(None, description="UI element that requested the run")


class InProgressExecution(BaseModel):
    """Execution record shown in the editor until the backend reports back."""

    id: str = Field(default="__IN_PROGRESS__", description="Placeholder execution ID")
    finished: bool = Field(default=False, description="Whether the execution finished")
    mode: str = Field(default="manual", description="Execution mode")
    started_at: datetime = Field(..., description="Start time")
    stopped_at: Optional[datetime] = Field(None, description="Stop time")
    workflow_id: Optional[str] = Field(None, description="Workflow ID")
    executed_node: Optional[str] = Field(None, description="Node explicitly executed")
    run_data: RunData = Field(default_factory=dict, description="Run data known so far")
    pin_data: Optional[PinData] = Field(None, description="Pinned data used by the run")
    workflow_data: WorkflowData = Field(..., description="Workflow snapshot being run")


class RunPlanRequest(BaseModel):
    """Request schema for previewing a run plan."""

    workflow_data: WorkflowData = Field(..., description="Workflow snapshot")
    destination_node: Optional[str] = Field(None, description="Destination node whose parents are planned")
    direct_parent_nodes: Optional[List[str]] = Field(None, description="Explicit direct parent nodes")
    run_data: Optional[RunData] = Field(None, description="Prior run data")


class RunPlanResponse(BaseModel):
    """Response schema for a run plan preview."""

    start_node_names: List[str] = Field(..., description="Nodes that will be executed from scratch")
    run_data: Optional[RunData] = Field(None, description="Reused run data")
    reused_nodes: List[str] = Field(default_factory=list, description="Nodes whose output is reused")
