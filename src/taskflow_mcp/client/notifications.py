"""User-facing notifications emitted by the board and the mutation coordinator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    description: str
    level: NotificationLevel = NotificationLevel.INFO

    @classmethod
    def info(cls, title: str, description: str) -> Notification:
        return cls(title=title, description=description)

    @classmethod
    def error(cls, title: str, description: str) -> Notification:
        return cls(title=title, description=description, level=NotificationLevel.ERROR)

    @property
    def is_error(self) -> bool:
        return self.level is NotificationLevel.ERROR


Notifier = Callable[[Notification], None]


def log_notifier(notification: Notification) -> None:
    """Default notifier: write the notification to the log."""
    if notification.is_error:
        logger.warning("%s: %s", notification.title, notification.description)
    else:
        logger.info("%s: %s", notification.title, notification.description)
