"""User-facing notification surface."""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

logger = structlog.get_logger()


class Notifier(ABC):
    """Toast-style notification surface of the editor."""

    @abstractmethod
    def show_message(self, title: str, message: str, type: str = "info") -> None:
        pass

    @abstractmethod
    def show_error(self, error: Exception, title: str, message: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def clear_all_sticky_notifications(self) -> None:
        pass


class LogNotifier(Notifier):
    """Notifier that writes notifications to the structured log."""

    def __init__(self):
        self.logger = logger.bind(component="notifier")

    def show_message(self, title: str, message: str, type: str = "info") -> None:
        if type == "error":
            self.logger.error(title, message=message)
        elif type == "warning":
            self.logger.warning(title, message=message)
        else:
            self.logger.info(title, message=message)

    def show_error(self, error: Exception, title: str, message: Optional[str] = None) -> None:
        self.logger.error(
            title,
            message=message or str(error),
            error_type=type(error).__name__,
        )

    def clear_all_sticky_notifications(self) -> None:
        self.logger.debug("Cleared sticky notifications")
