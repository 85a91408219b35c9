"""Run trigger error classes."""

from typing import Any, Dict, List, Optional

from ..exceptions import RunPlanException


class RunError(RunPlanException):
    """Base class for all run trigger errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConnectionError(RunError):
    """Raised when there is no live push connection to the server."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="NO_CONNECTION", **kwargs)


class TriggerConflictError(RunError):
    """Raised when a manual run would contend with a live webhook registration."""

    def __init__(
        self,
        message: str,
        node_name: str,
        node_type: str,
        **kwargs
    ):
        super().__init__(message, error_code="TRIGGER_CONFLICT", **kwargs)
        self.node_name = node_name
        self.node_type = node_type
        self.details.update({
            "node_name": node_name,
            "node_type": node_type,
        })


class UnresolvedIssuesError(RunError):
    """Raised when a webhook-pending run is requested while nodes report issues."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="UNRESOLVED_ISSUES", **kwargs)


class BackendDispatchError(RunError):
    """Raised when the execution backend fails to accept a run."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, error_code="BACKEND_DISPATCH", **kwargs)
        self.status_code = status_code
        self.details["status_code"] = status_code


class GraphCycleError(RunError):
    """Raised when a cycle is found while walking node ancestry."""

    def __init__(
        self,
        message: str,
        cycle_path: List[str],
        **kwargs
    ):
        super().__init__(message, error_code="GRAPH_CYCLE", **kwargs)
        self.cycle_path = cycle_path
        self.details["cycle_path"] = cycle_path
