"""In-memory notification store with key-based deduplication."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from nexus_flow.client.base import Store
from nexus_flow.notifications.desktop import DesktopNotifier
from nexus_flow.notifications.rules import (
    NotificationCategory,
    NotificationDraft,
    NotificationThresholds,
    NotificationType,
    finance_alerts,
    focus_alerts,
    task_alerts,
)
from nexus_flow.schemas import FocusSessionRead, TaskRead, TransactionRead, utcnow

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A notification as shown to the user."""

    key: str
    title: str
    message: str
    type: NotificationType
    category: NotificationCategory
    link: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=utcnow)
    read: bool = False

    @classmethod
    def from_draft(cls, draft: NotificationDraft) -> Notification:
        return cls(
            key=draft.key,
            title=draft.title,
            message=draft.message,
            type=draft.type,
            category=draft.category,
            link=draft.link,
        )


class NotificationStore(Store):
    """Holds at most one notification per key.

    Adding a draft whose key already has an unread notification is a no-op;
    a read one is replaced by a fresh unread notification.
    """

    def __init__(
        self,
        thresholds: NotificationThresholds | None = None,
        notifier: DesktopNotifier | None = None,
    ):
        super().__init__()
        self.thresholds = thresholds or NotificationThresholds()
        self.notifier = notifier
        self._by_key: dict[str, Notification] = {}
        self._key_by_id: dict[str, str] = {}

    @property
    def notifications(self) -> list[Notification]:
        """All notifications, newest first."""
        return list(reversed(self._by_key.values()))

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._by_key.values() if not n.read)

    def get(self, key: str) -> Notification | None:
        return self._by_key.get(key)

    def add(self, draft: NotificationDraft) -> Notification | None:
        """Insert a notification unless an unread one with the same key exists.

        Returns the new notification, or None when the draft was skipped.
        """
        existing = self._by_key.get(draft.key)
        if existing is not None and not existing.read:
            return None
        if existing is not None:
            del self._key_by_id[existing.id]
            del self._by_key[draft.key]

        notification = Notification.from_draft(draft)
        self._by_key[draft.key] = notification
        self._key_by_id[notification.id] = draft.key
        logger.debug(f"Notification added: {draft.key}")

        self._deliver(notification)
        self._notify()
        return notification

    def add_all(self, drafts: Iterable[NotificationDraft]) -> list[Notification]:
        added = []
        for draft in drafts:
            notification = self.add(draft)
            if notification is not None:
                added.append(notification)
        return added

    def _deliver(self, notification: Notification) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.send(notification.title, notification.message)
        except Exception as e:
            logger.warning(f"Desktop notification failed for {notification.key}: {e}")

    def mark_as_read(self, notification_id: str) -> None:
        key = self._key_by_id.get(notification_id)
        if key is None:
            return
        self._by_key[key].read = True
        self._notify()

    def mark_all_as_read(self) -> None:
        for notification in self._by_key.values():
            notification.read = True
        self._notify()

    def remove(self, notification_id: str) -> None:
        key = self._key_by_id.pop(notification_id, None)
        if key is None:
            return
        del self._by_key[key]
        self._notify()

    def clear_all(self) -> None:
        self._by_key.clear()
        self._key_by_id.clear()
        self._notify()

    # ============ Rule checks ============

    def check_tasks(self, tasks: Iterable[TaskRead], now: datetime | None = None) -> list[Notification]:
        return self.add_all(task_alerts(tasks, now or utcnow(), self.thresholds))

    def check_finance(
        self, transactions: Iterable[TransactionRead], now: datetime | None = None
    ) -> list[Notification]:
        return self.add_all(finance_alerts(transactions, now or utcnow(), self.thresholds))

    def check_focus(
        self,
        session: FocusSessionRead | None,
        time_left: int,
        is_active: bool = True,
    ) -> list[Notification]:
        return self.add_all(focus_alerts(session, time_left, is_active, self.thresholds))
