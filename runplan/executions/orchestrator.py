"""
Run orchestration for the workflow editor.

Sequences the pre-flight gates, run data consolidation, dispatch to the
execution backend and the write-back of the backend's acknowledgement,
holding the active-run lock for the whole span.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

import structlog

from ..config import Settings, get_settings
from ..i18n import base_text
from ..notifications import LogNotifier, Notifier
from ..stores import RootStore, UIStore, WorkflowHelpers, WorkflowsStore
from ..workflows.graph import WorkflowGraph
from ..workflows.models import WorkflowData
from .consolidation import consolidate_run_data_and_start_nodes
from .errors import ConnectionError, TriggerConflictError, UnresolvedIssuesError
from .gate import RunGate
from .lock import RunLock
from .schemas import (
    ExecutionAck,
    InProgressExecution,
    PinData,
    RunData,
    RunWorkflowOptions,
    StartNodeData,
    StartPlan,
    StartRunData,
    TaskSource,
)

logger = structlog.get_logger()


class RunState(str, Enum):
    """States of a single run request."""
    IDLE = "idle"
    GATING = "gating"
    DISPATCHING = "dispatching"
    APPLYING = "applying"


class RunOrchestrator:
    """
    Entry point of the editor's run trigger.

    One orchestrator owns one active-run lock. A request made while the
    lock is held is ignored rather than queued.
    """

    def __init__(
        self,
        root_store: RootStore,
        ui_store: UIStore,
        workflows_store: WorkflowsStore,
        workflow_helpers: WorkflowHelpers,
        notifier: Optional[Notifier] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.root_store = root_store
        self.ui_store = ui_store
        self.workflows_store = workflows_store
        self.workflow_helpers = workflow_helpers
        self.notifier = notifier or LogNotifier()
        self.lock = RunLock(ui_store, self.settings.running_action_name)
        self.gate = RunGate(root_store, self.settings.single_webhook_trigger_types)
        self.state = RunState.IDLE
        self.logger = logger.bind(component="run_orchestrator")

    def consolidate_run_data_and_start_nodes(
        self,
        direct_parent_nodes: List[str],
        run_data: Optional[RunData],
        pin_data: Optional[PinData],
        graph,
    ) -> StartPlan:
        """Compute start nodes and reusable run data for a partial re-run."""
        return consolidate_run_data_and_start_nodes(direct_parent_nodes, run_data, pin_data, graph)

    async def run_workflow_api(self, start_run_data: StartRunData) -> ExecutionAck:
        """
        Dispatch a prepared run payload to the execution backend.

        Raises:
            ConnectionError: If the push connection is down
            UnresolvedIssuesError: If the run waits on a webhook while nodes have issues
            Exception: Whatever the backend raised, after the lock is released
        """
        self.gate.check_push_connection()

        self.workflows_store.sub_workflow_execution_error = None
        self.lock.acquire()
        return await self._dispatch(start_run_data)

    async def run_workflow(self, options: Optional[RunWorkflowOptions] = None) -> Optional[ExecutionAck]:
        """
        Run the workflow open in the editor.

        Returns None when a run is already in flight or when the run is
        refused because of an active webhook trigger. Other failures are
        shown to the user and re-raised.
        """
        options = options or RunWorkflowOptions()

        if not self.lock.try_acquire():
            self.logger.info("Run already in progress, ignoring request")
            return None

        self.state = RunState.GATING
        workflow_name = None
        dispatched = False
        try:
            workflow = self.workflow_helpers.get_current_workflow()
            workflow_name = workflow.name
            self.workflow_helpers.set_document_title(workflow_name, "EXECUTING")
            self.notifier.clear_all_sticky_notifications()

            self.gate.check_push_connection()

            if self.workflows_store.is_new_workflow:
                await self.workflow_helpers.save_current_workflow()
            workflow_data = await self.workflow_helpers.get_workflow_data_to_save()

            self.gate.check_trigger_conflict(workflow_data.nodes, self.workflows_store.is_workflow_active)

            start_run_data = self._prepare_start_run_data(options, workflow, workflow_data)

            self.workflows_store.sub_workflow_execution_error = None
            ack = await self._dispatch(start_run_data)
            dispatched = True
            return ack

        except TriggerConflictError as e:
            self.notifier.show_message(
                title=base_text("workflowRun.showError.deactivate"),
                message=e.message,
                type="error",
            )
            return None
        except ConnectionError:
            self.workflow_helpers.set_document_title(workflow_name, "ERROR")
            raise
        except Exception as e:
            self.workflow_helpers.set_document_title(workflow_name, "ERROR")
            self.notifier.show_error(e, base_text("workflowRun.showError.title"))
            raise
        finally:
            if not dispatched:
                self.lock.release()
                self.state = RunState.IDLE

    def execution_finished(self) -> None:
        """Release the active-run lock once the execution is seen to complete."""
        self.lock.release()
        self.logger.info("Execution finished", execution_id=self.workflows_store.active_execution_id)

    async def _dispatch(self, start_run_data: StartRunData) -> ExecutionAck:
        self.state = RunState.DISPATCHING
        try:
            ack = await self.workflows_store.run_workflow(start_run_data)
            if not isinstance(ack, ExecutionAck):
                ack = ExecutionAck.model_validate(ack)
        except Exception as e:
            self.logger.error("Workflow dispatch failed", error=str(e))
            self.lock.release()
            self.state = RunState.IDLE
            raise

        self.state = RunState.APPLYING
        try:
            self.gate.check_issues(self.workflows_store.nodes_issues_exist, ack.waiting_for_webhook)
        except UnresolvedIssuesError:
            self.lock.release()
            self.state = RunState.IDLE
            raise

        if ack.execution_id is not None:
            self.workflows_store.active_execution_id = ack.execution_id
        self.workflows_store.execution_waiting_for_webhook = ack.waiting_for_webhook

        self.logger.info(
            "Workflow run started",
            execution_id=ack.execution_id,
            waiting_for_webhook=ack.waiting_for_webhook,
        )
        # Lock stays held until execution_finished()
        self.state = RunState.IDLE
        return ack

    def _prepare_start_run_data(
        self,
        options: RunWorkflowOptions,
        workflow: WorkflowGraph,
        workflow_data: WorkflowData,
    ) -> StartRunData:
        direct_parent_nodes: List[str] = []
        if options.destination_node is not None:
            direct_parent_nodes = workflow.get_parent_nodes(options.destination_node)

        run_data = self.workflows_store.workflow_run_data
        pin_data = workflow_data.pin_data
        if pin_data is None:
            pin_data = self.workflows_store.workflow_pin_data
        plan = self.consolidate_run_data_and_start_nodes(
            direct_parent_nodes, run_data, pin_data, workflow
        )

        start_node_names = list(plan.start_node_names)
        new_run_data = plan.run_data
        executed_node = None

        if not start_node_names and options.destination_node is not None:
            executed_node = options.destination_node
            start_node_names.append(options.destination_node)
        elif options.trigger_node is not None and options.node_data is not None:
            start_node_names.extend(workflow.get_child_nodes(options.trigger_node))
            new_run_data = {options.trigger_node: [options.node_data]}
            executed_node = options.trigger_node

        start_nodes = [
            StartNodeData(name=name, source_data=self._get_source_data(name, run_data, workflow))
            for name in start_node_names
        ]

        start_run_data = StartRunData(
            workflow_data=workflow_data,
            start_nodes=start_nodes or None,
            run_data=new_run_data,
            destination_node=options.destination_node,
        )

        self.workflows_store.set_workflow_execution_data(
            InProgressExecution(
                started_at=datetime.now(timezone.utc),
                workflow_id=workflow_data.id or workflow.id,
                executed_node=executed_node,
                run_data=new_run_data or {},
                pin_data=pin_data,
                workflow_data=workflow_data,
            )
        )

        self.logger.debug(
            "Prepared run payload",
            start_nodes=start_node_names,
            destination_node=options.destination_node,
            source=options.source,
        )
        return start_run_data

    @staticmethod
    def _get_source_data(
        name: str,
        run_data: Optional[RunData],
        workflow: WorkflowGraph,
    ) -> Optional[TaskSource]:
        results = (run_data or {}).get(name)
        if results and results[0].source and results[0].source[0] is not None:
            return results[0].source[0]

        parents = workflow.get_parent_nodes(name)
        if parents:
            return TaskSource(previous_node=parents[0])
        return None
