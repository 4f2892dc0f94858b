"""Task store with Kanban grouping."""

from __future__ import annotations

import logging

from nexus_flow.client.api import ApiClient
from nexus_flow.client.base import CollectionStore
from nexus_flow.notifications.store import NotificationStore
from nexus_flow.schemas import TaskRead, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore(CollectionStore[TaskRead]):
    entity = "task"
    plural = "tasks"

    def __init__(self, api: ApiClient, notifications: NotificationStore | None = None):
        super().__init__(api.tasks)
        self.notifications = notifications

    @property
    def tasks(self) -> list[TaskRead]:
        return self.items

    def matches(self, task: TaskRead, query: str) -> bool:
        return query in task.title.lower() or query in (task.description or "").lower()

    def board(self) -> dict[TaskStatus, list[TaskRead]]:
        """Filtered tasks grouped into one Kanban column per status."""
        columns: dict[TaskStatus, list[TaskRead]] = {status: [] for status in TaskStatus}
        for task in self.filtered:
            columns[task.status].append(task)
        return columns

    def _after_change(self) -> None:
        if self.notifications is None:
            return
        try:
            self.notifications.check_tasks(self.items)
        except Exception as e:
            logger.error(f"Error checking task notifications: {e}")
