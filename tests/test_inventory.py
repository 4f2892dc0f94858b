"""Tests for the inventory service."""

import pytest

from nexus_flow.core.errors import NotFoundError, ValidationError
from nexus_flow.schemas import InventoryBulkUpdate, InventoryItemCreate, InventoryItemUpdate


def make_item(name="Widget", **overrides):
    values = {"name": name, "quantity": 10, "min_quantity": 2, "price": 1.5, "category": "parts"}
    values.update(overrides)
    return InventoryItemCreate(**values)


async def test_create_and_list_by_name(inventory_service):
    """Test that items are listed alphabetically."""
    await inventory_service.create(make_item("Zipper"))
    await inventory_service.create(make_item("Anvil"))

    items = await inventory_service.list_all()

    assert [i.name for i in items] == ["Anvil", "Zipper"]
    assert items[0].location == ""


async def test_create_rejects_negative_values(inventory_service):
    """Test that negative amounts are refused before anything is stored."""
    bad = InventoryItemCreate.model_construct(
        name="Bad", quantity=-1, min_quantity=0, price=1.0, category="parts", location="", description=None
    )

    with pytest.raises(ValidationError) as exc_info:
        await inventory_service.create(bad)

    assert exc_info.value.details == [{"field": "quantity", "message": "must not be negative"}]
    assert await inventory_service.list_all() == []


async def test_update_rejects_negative_quantity(inventory_service):
    """Test that a partial update cannot push quantity below zero."""
    item = await inventory_service.create(make_item())
    bad = InventoryItemUpdate.model_construct(quantity=-5, _fields_set={"quantity"})

    with pytest.raises(ValidationError):
        await inventory_service.update(item.id, bad)

    stored = await inventory_service.get(item.id)
    assert stored.quantity == 10


async def test_blank_category_and_location_keep_stored_values(inventory_service):
    """Test that empty strings for category/location leave them unchanged."""
    item = await inventory_service.create(make_item(location="Shelf A"))

    updated = await inventory_service.update(
        item.id, InventoryItemUpdate(category="", location="", quantity=3)
    )

    assert updated.category == "parts"
    assert updated.location == "Shelf A"
    assert updated.quantity == 3


async def test_low_stock(inventory_service):
    """Test that items at or below their minimum are reported."""
    await inventory_service.create(make_item("Plenty", quantity=10, min_quantity=2))
    await inventory_service.create(make_item("Exact", quantity=2, min_quantity=2))
    await inventory_service.create(make_item("Empty", quantity=0, min_quantity=1))

    low = await inventory_service.low_stock()

    assert [i.name for i in low] == ["Empty", "Exact"]
    assert all(i.is_low_stock for i in low)


async def test_bulk_create(inventory_service):
    """Test that bulk create stores every item."""
    created = await inventory_service.bulk_create([make_item("A"), make_item("B")])

    assert len(created) == 2
    assert len(await inventory_service.list_all()) == 2


async def test_bulk_create_is_all_or_nothing(inventory_service):
    """Test that one invalid item prevents the whole batch."""
    bad = InventoryItemCreate.model_construct(
        name="Bad", quantity=1, min_quantity=0, price=-3.0, category="parts", location="", description=None
    )

    with pytest.raises(ValidationError):
        await inventory_service.bulk_create([make_item("Good"), bad])

    assert await inventory_service.list_all() == []


async def test_bulk_update_with_missing_id_changes_nothing(inventory_service):
    """Test that an unknown id aborts the batch before any write."""
    item = await inventory_service.create(make_item())

    with pytest.raises(NotFoundError) as exc_info:
        await inventory_service.bulk_update(
            [
                InventoryBulkUpdate(id=item.id, data=InventoryItemUpdate(quantity=99)),
                InventoryBulkUpdate(id="missing", data=InventoryItemUpdate(quantity=1)),
            ]
        )

    assert exc_info.value.details == {"ids": ["missing"]}
    assert (await inventory_service.get(item.id)).quantity == 10


async def test_bulk_update_with_invalid_row_changes_nothing(inventory_service):
    """Test that a later invalid update rolls back earlier ones in the batch."""
    first = await inventory_service.create(make_item("First"))
    second = await inventory_service.create(make_item("Second"))
    bad = InventoryItemUpdate.model_construct(price=-1.0, _fields_set={"price"})

    with pytest.raises(ValidationError):
        await inventory_service.bulk_update(
            [
                InventoryBulkUpdate(id=first.id, data=InventoryItemUpdate(quantity=0)),
                InventoryBulkUpdate.model_construct(id=second.id, data=bad),
            ]
        )

    assert (await inventory_service.get(first.id)).quantity == 10


async def test_bulk_update_applies_all(inventory_service):
    """Test a successful bulk update."""
    a = await inventory_service.create(make_item("A"))
    b = await inventory_service.create(make_item("B"))

    updated = await inventory_service.bulk_update(
        [
            InventoryBulkUpdate(id=a.id, data=InventoryItemUpdate(quantity=1)),
            InventoryBulkUpdate(id=b.id, data=InventoryItemUpdate(price=9.99)),
        ]
    )

    assert [u.quantity for u in updated] == [1, 10]
    assert updated[1].price == 9.99


async def test_bulk_delete(inventory_service):
    """Test that bulk delete removes every listed item or none."""
    a = await inventory_service.create(make_item("A"))
    b = await inventory_service.create(make_item("B"))

    with pytest.raises(NotFoundError):
        await inventory_service.bulk_delete([a.id, "missing"])
    assert len(await inventory_service.list_all()) == 2

    assert await inventory_service.bulk_delete([a.id, b.id]) == 2
    assert await inventory_service.list_all() == []


async def test_bulk_operations_reject_empty_batches(inventory_service):
    """Test that empty batches are validation errors."""
    with pytest.raises(ValidationError):
        await inventory_service.bulk_create([])
    with pytest.raises(ValidationError):
        await inventory_service.bulk_delete([])
