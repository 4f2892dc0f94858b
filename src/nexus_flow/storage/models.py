"""SQLAlchemy models for tasks, inventory, transactions and focus sessions."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

from nexus_flow.schemas import (
    FocusType,
    TaskPriority,
    TaskStatus,
    TransactionCategory,
    TransactionType,
    utcnow,
)

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _enum(enum_cls: type) -> Enum:
    # Store the enum values ("income"), not the member names ("INCOME")
    return Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        validate_strings=True,
        length=32,
    )


class Task(Base):
    """A to-do item shown in the list and Kanban views."""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(_enum(TaskStatus), nullable=False, default=TaskStatus.TODO)
    priority = Column(_enum(TaskPriority), nullable=False, default=TaskPriority.MEDIUM)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_tasks_status", "status"),
        Index("idx_tasks_due_date", "due_date"),
    )


class InventoryItem(Base):
    """Tracked stock item. Non-negative amounts are enforced by InventoryService."""
    __tablename__ = "inventory"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0.0)
    category = Column(String(50), nullable=False)
    location = Column(String(100), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_inventory_category", "category"),
    )


class Transaction(Base):
    """Income or expense entry."""
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    type = Column(_enum(TransactionType), nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(_enum(TransactionCategory), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_transactions_date", "date"),
    )


class FocusSession(Base):
    """One timed focus or break interval. Duration is in minutes."""
    __tablename__ = "focus_sessions"

    id = Column(String(36), primary_key=True, default=_new_id)
    duration = Column(Integer, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    type = Column(_enum(FocusType), nullable=False, default=FocusType.FOCUS)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_focus_start_time", "start_time"),
    )


class FocusPreset(Base):
    """Named template for starting sessions."""
    __tablename__ = "focus_presets"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)
    type = Column(_enum(FocusType), nullable=False, default=FocusType.FOCUS)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
