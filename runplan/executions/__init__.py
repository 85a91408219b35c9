"""Run planning: gates, run data consolidation and dispatch errors."""

from .consolidation import consolidate_run_data_and_start_nodes
from .errors import (
    RunError,
    ConnectionError,
    TriggerConflictError,
    UnresolvedIssuesError,
    BackendDispatchError,
    GraphCycleError,
)
from .gate import RunGate
from .lock import RunLock
from .schemas import (
    ExecutionAck,
    RunWorkflowOptions,
    StartPlan,
    StartRunData,
    TaskData,
)

__all__ = [
    "consolidate_run_data_and_start_nodes",
    "RunError",
    "ConnectionError",
    "TriggerConflictError",
    "UnresolvedIssuesError",
    "BackendDispatchError",
    "GraphCycleError",
    "RunGate",
    "RunLock",
    "ExecutionAck",
    "RunWorkflowOptions",
    "StartPlan",
    "StartRunData",
    "TaskData",
]
