"""
Shared state containers and external collaborator interfaces.

Each field has a single writer: the transport layer owns the push
connection flag, the run orchestrator owns the running action and the
active execution fields, and the document store owns everything else.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

import structlog

from runplan.executions.schemas import (
    ExecutionAck,
    InProgressExecution,
    PinData,
    RunData,
    StartRunData,
)
from runplan.workflows.graph import WorkflowGraph
from runplan.workflows.models import NodeDescriptor, WorkflowData

logger = structlog.get_logger()


class RootStore:
    """Connection state owned by the push transport."""

    def __init__(self, push_connection_active: bool = True):
        self.push_connection_active = push_connection_active

    def set_push_connection_active(self) -> None:
        self.push_connection_active = True

    def set_push_connection_inactive(self) -> None:
        self.push_connection_active = False


class UIStore:
    """Registry of transient UI actions."""

    def __init__(self):
        self.active_actions: List[str] = []

    def add_active_action(self, action: str) -> None:
        if action not in self.active_actions:
            self.active_actions.append(action)

    def remove_active_action(self, action: str) -> None:
        if action in self.active_actions:
            self.active_actions.remove(action)

    def is_action_active(self, action: str) -> bool:
        return action in self.active_actions


class ExecutionBackend(ABC):
    """Backend that actually runs workflows."""

    @abstractmethod
    async def run(self, payload: StartRunData) -> ExecutionAck:
        """Start a run and return the immediate acknowledgement."""
        pass


class WorkflowsStore:
    """Workflow document state the run trigger reads and writes."""

    def __init__(
        self,
        backend: ExecutionBackend,
        nodes: Optional[List[NodeDescriptor]] = None,
        run_data: Optional[RunData] = None,
        pin_data: Optional[PinData] = None,
        is_workflow_active: bool = False,
        nodes_issues_exist: bool = False,
        is_new_workflow: bool = False,
    ):
        self.backend = backend
        self.nodes = nodes or []
        self.workflow_run_data = run_data
        self.workflow_pin_data = pin_data
        self.is_workflow_active = is_workflow_active
        self.nodes_issues_exist = nodes_issues_exist
        self.is_new_workflow = is_new_workflow

        self.active_execution_id: Optional[str] = None
        self.execution_waiting_for_webhook = False
        self.sub_workflow_execution_error: Optional[Any] = None
        self.workflow_execution_data: Optional[InProgressExecution] = None

    async def run_workflow(self, payload: StartRunData) -> ExecutionAck:
        """Hand a run payload to the execution backend."""
        return await self.backend.run(payload)

    def set_workflow_execution_data(self, execution: Optional[InProgressExecution]) -> None:
        self.workflow_execution_data = execution

    def get_node_by_name(self, name: str) -> Optional[NodeDescriptor]:
        for node in self.nodes:
            if node.name == name:
                return node
        return None


class WorkflowHelpers(ABC):
    """Access to the current workflow document and its persistence."""

    @abstractmethod
    def get_current_workflow(self) -> WorkflowGraph:
        """Get a graph view of the workflow currently open in the editor."""
        pass

    @abstractmethod
    async def get_workflow_data_to_save(self) -> WorkflowData:
        """Get the workflow snapshot as it would be saved."""
        pass

    @abstractmethod
    async def save_current_workflow(self) -> bool:
        """Persist the workflow currently open in the editor."""
        pass

    def set_document_title(self, workflow_name: Optional[str], status: str) -> None:
        logger.debug("Document title changed", workflow_name=workflow_name, status=status)
