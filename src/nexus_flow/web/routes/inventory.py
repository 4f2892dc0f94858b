"""Inventory routes, including bulk operations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from nexus_flow.schemas import (
    InventoryBulkDelete,
    InventoryBulkUpdate,
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
    SuccessResponse,
)
from nexus_flow.services import InventoryService
from nexus_flow.web.dependencies import get_inventory_service

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=list[InventoryItemRead])
async def list_items(
    service: InventoryService = Depends(get_inventory_service),
) -> list[InventoryItemRead]:
    return await service.list_all()


@router.get("/low-stock", response_model=list[InventoryItemRead])
async def low_stock_items(
    service: InventoryService = Depends(get_inventory_service),
) -> list[InventoryItemRead]:
    """Items at or below their minimum quantity."""
    return await service.low_stock()


# Bulk routes must be declared before /{item_id}

@router.post("/bulk", response_model=list[InventoryItemRead], status_code=status.HTTP_201_CREATED)
async def bulk_create_items(
    items: list[InventoryItemCreate],
    service: InventoryService = Depends(get_inventory_service),
) -> list[InventoryItemRead]:
    return await service.bulk_create(items)


@router.patch("/bulk", response_model=list[InventoryItemRead])
async def bulk_update_items(
    updates: list[InventoryBulkUpdate],
    service: InventoryService = Depends(get_inventory_service),
) -> list[InventoryItemRead]:
    return await service.bulk_update(updates)


@router.delete("/bulk", response_model=SuccessResponse)
async def bulk_delete_items(
    data: InventoryBulkDelete,
    service: InventoryService = Depends(get_inventory_service),
) -> SuccessResponse:
    await service.bulk_delete(data.ids)
    return SuccessResponse()


@router.get("/{item_id}", response_model=InventoryItemRead)
async def get_item(
    item_id: str,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    return await service.get(item_id)


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(
    data: InventoryItemCreate,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    return await service.create(data)


@router.api_route("/{item_id}", methods=["PUT", "PATCH"], response_model=InventoryItemRead)
async def update_item(
    item_id: str,
    data: InventoryItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    return await service.update(item_id, data)


@router.delete("/{item_id}", response_model=SuccessResponse)
async def delete_item(
    item_id: str,
    service: InventoryService = Depends(get_inventory_service),
) -> SuccessResponse:
    await service.delete(item_id)
    return SuccessResponse()
