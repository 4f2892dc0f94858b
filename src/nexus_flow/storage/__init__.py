"""Storage module for Nexus Flow."""

from nexus_flow.storage.database import Database, init_database
from nexus_flow.storage.models import (
    Base,
    FocusPreset,
    FocusSession,
    InventoryItem,
    Task,
    Transaction,
)

__all__ = [
    "Base",
    "Database",
    "FocusPreset",
    "FocusSession",
    "InventoryItem",
    "Task",
    "Transaction",
    "init_database",
]
