"""Inventory store."""

from __future__ import annotations

from nexus_flow.client.api import ApiClient, ApiError
from nexus_flow.client.base import CollectionStore
from nexus_flow.schemas import InventoryBulkUpdate, InventoryItemCreate, InventoryItemRead


class InventoryStore(CollectionStore[InventoryItemRead]):
    entity = "inventory item"
    plural = "inventory items"

    def __init__(self, api: ApiClient):
        super().__init__(api.inventory)
        self.api = api

    def matches(self, item: InventoryItemRead, query: str) -> bool:
        fields = (item.name, item.description or "", item.category, item.location)
        return any(query in value.lower() for value in fields)

    @property
    def low_stock(self) -> list[InventoryItemRead]:
        return [item for item in self.items if item.is_low_stock]

    async def bulk_create(self, items: list[InventoryItemCreate]) -> list[InventoryItemRead]:
        self._set(error=None)
        try:
            created = await self.api.bulk_create_inventory(items)
        except ApiError as e:
            self._set(error=self._fail("create inventory items", e))
            raise
        self._set(items=[*self.items, *created])
        return created

    async def bulk_update(self, updates: list[InventoryBulkUpdate]) -> list[InventoryItemRead]:
        self._set(error=None)
        try:
            updated = await self.api.bulk_update_inventory(updates)
        except ApiError as e:
            self._set(error=self._fail("update inventory items", e))
            raise
        by_id = {item.id: item for item in updated}
        self._set(items=[by_id.get(item.id, item) for item in self.items])
        return updated

    async def bulk_delete(self, ids: list[str]) -> None:
        self._set(error=None)
        try:
            await self.api.bulk_delete_inventory(ids)
        except ApiError as e:
            self._set(error=self._fail("delete inventory items", e))
            raise
        removed = set(ids)
        self._set(items=[item for item in self.items if item.id not in removed])
