"""Pytest configuration and fixtures."""

from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from runplan.config import Settings
from runplan.executions.orchestrator import RunOrchestrator
from runplan.executions.schemas import ExecutionAck, TaskData
from runplan.notifications import Notifier
from runplan.stores import ExecutionBackend, RootStore, UIStore, WorkflowHelpers, WorkflowsStore
from runplan.workflows.graph import WorkflowGraph
from runplan.workflows.models import WorkflowData


class StaticWorkflowHelpers(WorkflowHelpers):
    """Workflow helpers serving a fixed workflow snapshot."""

    def __init__(self, workflow_data: WorkflowData):
        self.workflow_data = workflow_data
        self.saved = 0
        self.titles = []

    def get_current_workflow(self) -> WorkflowGraph:
        return WorkflowGraph.from_workflow_data(self.workflow_data)

    async def get_workflow_data_to_save(self) -> WorkflowData:
        return self.workflow_data

    async def save_current_workflow(self) -> bool:
        self.saved += 1
        return True

    def set_document_title(self, workflow_name: Optional[str], status: str) -> None:
        self.titles.append(status)


def ok(value="data") -> TaskData:
    """Successful run result."""
    return TaskData(data={"main": [[{"json": {"value": value}}]]})


def failed(message="error") -> TaskData:
    """Failed run result."""
    return TaskData(error={"message": message})


@pytest.fixture
def test_settings():
    return Settings(environment="testing")


@pytest.fixture
def linear_workflow():
    """Manual Trigger -> Fetch -> Transform."""
    return WorkflowData(
        id="wf-1",
        name="Test Workflow",
        nodes=[
            {"name": "Manual Trigger", "type": "manual.trigger"},
            {"name": "Fetch", "type": "http.request"},
            {"name": "Transform", "type": "transform"},
        ],
        connections=[
            {"source": "Manual Trigger", "target": "Fetch"},
            {"source": "Fetch", "target": "Transform"},
        ],
    )


@pytest.fixture
def root_store():
    return RootStore(push_connection_active=True)


@pytest.fixture
def ui_store():
    return UIStore()


@pytest.fixture
def backend():
    backend = AsyncMock(spec=ExecutionBackend)
    backend.run.return_value = ExecutionAck(execution_id="123", waiting_for_webhook=False)
    return backend


@pytest.fixture
def workflows_store(backend, linear_workflow):
    return WorkflowsStore(backend, nodes=linear_workflow.nodes)


@pytest.fixture
def workflow_helpers(linear_workflow):
    return StaticWorkflowHelpers(linear_workflow)


@pytest.fixture
def notifier():
    return MagicMock(spec=Notifier)


@pytest.fixture
def orchestrator(root_store, ui_store, workflows_store, workflow_helpers, notifier, test_settings):
    return RunOrchestrator(
        root_store,
        ui_store,
        workflows_store,
        workflow_helpers,
        notifier=notifier,
        settings=test_settings,
    )
