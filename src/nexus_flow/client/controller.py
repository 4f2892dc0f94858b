"""Application controller owning every client store."""

from __future__ import annotations

import asyncio
import logging

from nexus_flow.client.api import ApiClient
from nexus_flow.client.base import CollectionStore
from nexus_flow.client.finance import FinanceStore
from nexus_flow.client.focus import FocusStore
from nexus_flow.client.inventory import InventoryStore
from nexus_flow.client.scheduler import PeriodicTask
from nexus_flow.client.tasks import TaskStore
from nexus_flow.core.config import Config
from nexus_flow.notifications.desktop import DesktopNotifier
from nexus_flow.notifications.store import NotificationStore

logger = logging.getLogger(__name__)

VIEWS = ("dashboard", "tasks", "kanban", "inventory", "finance", "focus")


class AppController:
    """Builds the stores, wires them together and runs the alert check.

    Usage:
        controller = AppController.from_config(config)
        await controller.load()
        controller.start_monitoring()
        ...
        await controller.close()
    """

    def __init__(
        self,
        api: ApiClient,
        notifications: NotificationStore | None = None,
        tick_seconds: float = 1.0,
        check_interval: float = 60.0,
        auto_tick: bool = True,
    ):
        self.api = api
        self.notifications = notifications or NotificationStore()
        self.tasks = TaskStore(api, self.notifications)
        self.inventory = InventoryStore(api)
        self.finance = FinanceStore(api, self.notifications)
        self.focus = FocusStore(
            api, self.notifications, tick_seconds=tick_seconds, auto_tick=auto_tick
        )

        self.current_view = "dashboard"
        self.search_query = ""
        self._monitor = PeriodicTask(check_interval, self.check_focus, name="focus-alerts")

    @classmethod
    def from_config(cls, config: Config, api: ApiClient | None = None) -> AppController:
        notifier = DesktopNotifier(enabled=config.notifications.desktop_enabled)
        return cls(
            api or ApiClient(config.client.api_url, token=config.client.token),
            notifications=NotificationStore(config.notifications.thresholds(), notifier),
            tick_seconds=config.focus.tick_seconds,
            check_interval=config.notifications.check_interval_seconds,
        )

    def _store_for(self, view: str) -> CollectionStore | None:
        if view in ("tasks", "kanban"):
            return self.tasks
        if view == "inventory":
            return self.inventory
        if view == "finance":
            return self.finance
        return None

    def set_view(self, view: str) -> None:
        """Switch views; the global search follows to the new view's store."""
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self.current_view = view
        store = self._store_for(view)
        if store is not None:
            store.set_search_query(self.search_query)

    def search(self, query: str) -> None:
        """Apply the global search box to the store behind the current view."""
        self.search_query = query
        store = self._store_for(self.current_view)
        if store is not None:
            store.set_search_query(query)

    async def load(self) -> None:
        """Fetch every collection. Failures land in each store's ``error``."""
        await asyncio.gather(
            self.tasks.fetch(),
            self.inventory.fetch(),
            self.finance.fetch(),
            self._load_focus(),
        )

    async def _load_focus(self) -> None:
        # One store, one is_loading flag: fetch in turn
        await self.focus.fetch_sessions()
        await self.focus.fetch_presets()

    def check_focus(self) -> None:
        self.notifications.check_focus(
            self.focus.current_session, self.focus.time_left, self.focus.is_active
        )

    def start_monitoring(self) -> None:
        self._monitor.start()

    async def stop_monitoring(self) -> None:
        await self._monitor.cancel()

    async def close(self) -> None:
        """Stop background tasks and release the HTTP session."""
        await self.stop_monitoring()
        await self.focus.close()
        await self.api.close()
        logger.debug("App controller closed")
