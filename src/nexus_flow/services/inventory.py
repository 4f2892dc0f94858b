"""Inventory service: CRUD, bulk operations and low-stock lookup."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select

from nexus_flow.core.errors import NotFoundError, ValidationError
from nexus_flow.schemas import (
    InventoryBulkUpdate,
    InventoryItemCreate,
    InventoryItemRead,
)
from nexus_flow.services.base import CrudService, storage_errors
from nexus_flow.storage.models import InventoryItem

logger = logging.getLogger(__name__)

NON_NEGATIVE_FIELDS = ("quantity", "min_quantity", "price")

# Blank values for these fields mean "leave unchanged"
KEEP_IF_BLANK = ("category", "location")


def _check_non_negative(values: dict[str, Any]) -> None:
    errors = [
        {"field": name, "message": "must not be negative"}
        for name in NON_NEGATIVE_FIELDS
        if values.get(name) is not None and values[name] < 0
    ]
    if errors:
        raise ValidationError("Quantity, minimum quantity and price must not be negative", details=errors)


class InventoryService(CrudService[InventoryItemRead]):
    model = InventoryItem
    read_schema = InventoryItemRead
    entity = "Inventory item"
    plural = "inventory items"

    def ordering(self):
        return (InventoryItem.name.asc(),)

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        _check_non_negative(values)
        return values

    def prepare_update(self, obj: InventoryItem, changes: dict[str, Any]) -> dict[str, Any]:
        changes = {
            key: value
            for key, value in changes.items()
            if not (key in KEEP_IF_BLANK and value == "")
        }
        merged = {name: getattr(obj, name) for name in NON_NEGATIVE_FIELDS}
        merged.update({k: v for k, v in changes.items() if k in NON_NEGATIVE_FIELDS})
        _check_non_negative(merged)
        return changes

    async def low_stock(self) -> list[InventoryItemRead]:
        """Items whose quantity is at or below their minimum."""
        with storage_errors("Failed to fetch low stock items", "FETCH_ERROR"):
            async with self.db.session() as session:
                result = await session.execute(
                    select(InventoryItem)
                    .where(InventoryItem.quantity <= InventoryItem.min_quantity)
                    .order_by(InventoryItem.name.asc())
                )
                return [self.to_read(obj) for obj in result.scalars()]

    async def bulk_create(self, items: list[InventoryItemCreate]) -> list[InventoryItemRead]:
        """Create every item or none of them."""
        if not items:
            raise ValidationError("No items provided")
        rows = [self.prepare_create(item.model_dump()) for item in items]

        with storage_errors("Failed to create inventory items", "BULK_CREATE_ERROR"):
            async with self.db.transaction() as session:
                objs = [InventoryItem(**values) for values in rows]
                session.add_all(objs)
                await session.flush()
                for obj in objs:
                    await session.refresh(obj)
                logger.info(f"Bulk created {len(objs)} inventory items")
                return [self.to_read(obj) for obj in objs]

    async def bulk_update(self, updates: list[InventoryBulkUpdate]) -> list[InventoryItemRead]:
        """Apply every update or none of them.

        All ids are resolved and every merged row is validated before the
        first write.
        """
        if not updates:
            raise ValidationError("No items provided")

        with storage_errors("Failed to update inventory items", "BULK_UPDATE_ERROR"):
            async with self.db.transaction() as session:
                objs = await self._load_all(session, [u.id for u in updates])
                planned = [
                    (objs[u.id], self.prepare_update(objs[u.id], u.data.changes()))
                    for u in updates
                ]
                for obj, changes in planned:
                    self._apply(obj, changes)
                await session.flush()
                for obj, _ in planned:
                    await session.refresh(obj)
                logger.info(f"Bulk updated {len(planned)} inventory items")
                return [self.to_read(obj) for obj, _ in planned]

    async def bulk_delete(self, ids: list[str]) -> int:
        """Delete every listed item or none of them. Returns the number deleted."""
        if not ids:
            raise ValidationError("No ids provided")

        with storage_errors("Failed to delete inventory items", "BULK_DELETE_ERROR"):
            async with self.db.transaction() as session:
                objs = await self._load_all(session, ids)
                for obj in objs.values():
                    await session.delete(obj)
                logger.info(f"Bulk deleted {len(objs)} inventory items")
                return len(objs)

    async def _load_all(self, session, ids: list[str]) -> dict[str, InventoryItem]:
        unique_ids = list(dict.fromkeys(ids))
        result = await session.execute(select(InventoryItem).where(InventoryItem.id.in_(unique_ids)))
        objs = {obj.id: obj for obj in result.scalars()}
        missing = [item_id for item_id in unique_ids if item_id not in objs]
        if missing:
            raise NotFoundError("Inventory items not found", details={"ids": missing})
        return objs
