"""Observable store base class."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from pydantic import BaseModel

from nexus_flow.client.api import ApiError

if TYPE_CHECKING:
    from nexus_flow.client.api import ResourceClient

logger = logging.getLogger(__name__)

Listener = Callable[["Store"], None]
ItemT = TypeVar("ItemT", bound=BaseModel)


class Store:
    """Application state with subscribe/notify.

    Every state change goes through ``_set`` so subscribers see one
    notification per update.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self.is_loading = False
        self.error: str | None = None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Error in {type(self).__name__} listener: {e}")

    def _set(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self._notify()

    def clear_error(self) -> None:
        self._set(error=None)


class CollectionStore(Store, Generic[ItemT]):
    """Cached copy of one server collection with client-side search.

    A failed fetch keeps previously loaded items; only a store that has never
    loaded falls back to an empty list. Failed mutations record ``error``,
    leave the cache untouched and re-raise.
    """

    entity = "item"
    plural = "items"
    # New items go to the front of the list instead of the back
    prepend_new = False

    def __init__(self, resource: ResourceClient[ItemT]):
        super().__init__()
        self.resource = resource
        self.items: list[ItemT] = []
        self.search_query = ""
        self._loaded = False

    def matches(self, item: ItemT, query: str) -> bool:
        raise NotImplementedError

    @property
    def filtered(self) -> list[ItemT]:
        """Items matching the search query (all items when it is empty)."""
        query = self.search_query.strip().lower()
        if not query:
            return list(self.items)
        return [item for item in self.items if self.matches(item, query)]

    def set_search_query(self, query: str) -> None:
        self._set(search_query=query)

    def find(self, item_id: str) -> ItemT | None:
        return next((item for item in self.items if item.id == item_id), None)

    def _after_change(self) -> None:
        """Hook run after every successful fetch or mutation."""

    def _fail(self, action: str, error: Exception) -> str:
        message = f"Failed to {action}: {error}"
        logger.error(message)
        return message

    async def fetch(self) -> None:
        self._set(is_loading=True, error=None)
        try:
            items = await self.resource.list()
        except ApiError as e:
            changes = {"is_loading": False, "error": self._fail(f"fetch {self.plural}", e)}
            if not self._loaded:
                changes["items"] = []
            self._set(**changes)
            return

        self._loaded = True
        self._set(items=items, is_loading=False)
        self._after_change()

    async def create(self, data: BaseModel) -> ItemT:
        self._set(error=None)
        try:
            item = await self.resource.create(data)
        except ApiError as e:
            self._set(error=self._fail(f"create {self.entity}", e))
            raise

        items = [item, *self.items] if self.prepend_new else [*self.items, item]
        self._set(items=items)
        self._after_change()
        return item

    async def update(self, item_id: str, data: BaseModel) -> ItemT:
        self._set(error=None)
        try:
            updated = await self.resource.update(item_id, data)
        except ApiError as e:
            self._set(error=self._fail(f"update {self.entity}", e))
            raise

        self._replace(updated)
        self._after_change()
        return updated

    async def delete(self, item_id: str) -> None:
        self._set(error=None)
        try:
            await self.resource.delete(item_id)
        except ApiError as e:
            self._set(error=self._fail(f"delete {self.entity}", e))
            raise

        self._set(items=[item for item in self.items if item.id != item_id])
        self._after_change()

    def _replace(self, updated: ItemT) -> None:
        self._set(items=[updated if item.id == updated.id else item for item in self.items])
