"""
User-facing notifications (toast sink).

The presentation layer supplies its own Notifier; LogNotifier is the
default and only writes to the "notifications" logger.
"""
import logging
from dataclasses import dataclass
from typing import List, Protocol

logger = logging.getLogger(__name__)
notification_logger = logging.getLogger("notifications")

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = DEFAULT


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None:
        ...


class LogNotifier:
    """Writes every notification to the log."""

    def notify(self, notification: Notification) -> None:
        level = logging.ERROR if notification.variant == DESTRUCTIVE else logging.INFO
        notification_logger.log(level, f"{notification.title}: {notification.description}")


class MemoryNotifier:
    """Keeps notifications in order of arrival."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> List[str]:
        return [n.title for n in self.notifications]


def report_failure(notifier: Notifier, title: str, error: Exception) -> None:
    """Log a failure and emit a destructive notification for it."""
    logger.error(f"{title}: {error}")
    description = getattr(error, "message", None) or str(error)
    notifier.notify(Notification(title=title, description=description, variant=DESTRUCTIVE))
