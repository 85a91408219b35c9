"""Active-run lock backed by the UI action registry."""

import structlog

logger = structlog.get_logger()


class RunLock:
    """
    Non-blocking mutex marking a workflow run as in flight.

    The lock state lives in the shared UI action registry so the editor
    can reflect it, but only the owning orchestrator adds or removes it.
    """

    def __init__(self, ui_store, action: str = "workflowRunning"):
        self.ui_store = ui_store
        self.action = action

    @property
    def held(self) -> bool:
        return self.ui_store.is_action_active(self.action)

    def try_acquire(self) -> bool:
        """Take the lock. Returns False without waiting if it is already held."""
        if self.held:
            return False
        self.ui_store.add_active_action(self.action)
        return True

    def acquire(self) -> None:
        """Mark the lock as held, whether or not it already was."""
        self.ui_store.add_active_action(self.action)

    def release(self) -> None:
        self.ui_store.remove_active_action(self.action)
        logger.debug("Released run lock", action=self.action)
