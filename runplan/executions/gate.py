"""Pre-flight checks deciding whether a run may start."""

from typing import List, Optional

import structlog

from ..i18n import base_text
from ..workflows.models import NodeDescriptor, get_enabled_triggers
from .errors import ConnectionError, TriggerConflictError, UnresolvedIssuesError

logger = structlog.get_logger()


class RunGate:
    """Safety gates evaluated before and around a run dispatch."""

    def __init__(self, root_store, single_webhook_trigger_types: Optional[List[str]] = None):
        self.root_store = root_store
        self.single_webhook_trigger_types = single_webhook_trigger_types or []
        self.logger = logger.bind(component="run_gate")

    def check_push_connection(self) -> None:
        """Fail if the push transport is not connected."""
        if not self.root_store.push_connection_active:
            self.logger.warning("Run rejected, no push connection")
            raise ConnectionError(base_text("workflowRun.noActiveConnectionToTheServer"))

    def check_trigger_conflict(self, nodes: List[NodeDescriptor], is_workflow_active: bool) -> None:
        """
        Fail if a manual run would contend with a live webhook registration.

        Only an active workflow whose single enabled trigger is a
        single-registration webhook trigger conflicts.
        """
        if not is_workflow_active:
            return

        triggers = get_enabled_triggers(nodes)
        if len(triggers) != 1 or triggers[0].type not in self.single_webhook_trigger_types:
            return

        trigger = triggers[0]
        self.logger.warning(
            "Run rejected, active webhook trigger",
            node_name=trigger.name,
            node_type=trigger.type,
        )
        raise TriggerConflictError(
            base_text(
                "workflowRun.showError.productionActive",
                interpolate={"nodeName": trigger.name},
            ),
            node_name=trigger.name,
            node_type=trigger.type,
        )

    def check_issues(self, nodes_have_issues: bool, requires_webhook: bool) -> None:
        """Fail if a run waiting on a webhook call still has node issues."""
        if requires_webhook and nodes_have_issues:
            raise UnresolvedIssuesError(base_text("workflowRun.showError.resolveOutstandingIssues"))
