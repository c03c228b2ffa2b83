"""Transient user-facing notifications (toasts).

A notification disappears on its own after ``duration`` seconds unless the
duration is 0, in which case it stays until dismissed. Removal timers run
on their own threads, so the queue guards its list with a lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from jobtracker.models import Notification, NotificationAction, Severity, new_id

logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 3.0

TimerFactory = Callable[..., Any]


class NotificationQueue:
    def __init__(
        self,
        default_duration: float = DEFAULT_DURATION_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.default_duration = default_duration
        self._timer_factory = timer_factory
        self._items: list[Notification] = []
        self._timers: dict[str, Any] = {}
        self._lock = threading.Lock()

    def enqueue(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        action: Optional[NotificationAction] = None,
        duration: Optional[float] = None,
    ) -> Notification:
        """Append a notification and schedule its removal."""
        if duration is None:
            duration = self.default_duration
        notification = Notification(
            id=new_id("toast"),
            message=message,
            severity=severity,
            action=action,
            duration=duration,
        )
        with self._lock:
            self._items.append(notification)

        if duration > 0:
            timer = self._timer_factory(duration, self.dismiss, args=(notification.id,))
            timer.daemon = True
            with self._lock:
                self._timers[notification.id] = timer
            timer.start()

        logger.debug("Notification [%s] %s", severity.value, message)
        return notification

    def dismiss(self, notification_id: str) -> bool:
        """Remove a notification now, whether or not its timer has fired."""
        with self._lock:
            timer = self._timers.pop(notification_id, None)
            before = len(self._items)
            self._items = [n for n in self._items if n.id != notification_id]
            removed = len(self._items) != before
        if timer is not None:
            timer.cancel()
        return removed

    def clear(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
            self._items = []
        for timer in timers:
            timer.cancel()

    @property
    def items(self) -> list[Notification]:
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
