"""User-visible message catalogue."""

from typing import Dict, Optional

MESSAGES: Dict[str, str] = {
    "workflowRun.noActiveConnectionToTheServer": "Lost connection to the server",
    "workflowRun.showError.title": "Problem running workflow",
    "workflowRun.showError.deactivate": "Deactivate workflow to execute",
    "workflowRun.showError.productionActive": (
        "Because of limitations in {nodeName}, the workflow cannot listen for "
        "test executions at the same time as it is active. Deactivate the "
        "workflow to execute."
    ),
    "workflowRun.showError.resolveOutstandingIssues": (
        "Please resolve outstanding issues before you activate it"
    ),
}


def base_text(key: str, interpolate: Optional[Dict[str, str]] = None) -> str:
    """Format the message for ``key``. Unknown keys are returned unchanged."""
    text = MESSAGES.get(key)
    if text is None:
        return key
    if interpolate:
        return text.format(**interpolate)
    return text
