"""Domain services: validate, persist and shape each entity."""

from nexus_flow.services.finance import FinanceService
from nexus_flow.services.focus import FocusPresetService, FocusService
from nexus_flow.services.inventory import InventoryService
from nexus_flow.services.tasks import TaskService

__all__ = [
    "FinanceService",
    "FocusPresetService",
    "FocusService",
    "InventoryService",
    "TaskService",
]
