"""
Notification sinks.

The core announces noteworthy events (day completed, sign-off requested,
card quarantined, item escalated) through a NotificationSink. Delivery is
fire-and-forget: nothing the sink returns is consumed.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class Severity(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class NotificationSink(ABC):
    """Where user-facing notices go (toasts, email, chat...)."""

    @abstractmethod
    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        ...


class LoggingNotificationSink(NotificationSink):
    """Default sink: notices become log records."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        logger.log(_LOG_LEVELS[severity], "[%s] %s", severity.value, message)


@dataclass
class RecordingNotificationSink(NotificationSink):
    """Keeps every notice in memory. Used by the CLI summary and tests."""

    notices: list[tuple[str, Severity]] = field(default_factory=list)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.notices.append((message, severity))

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.notices]
