"""FastAPI dependency providers."""

from fastapi import Depends, Request

from nexus_flow.services import FinanceService, FocusService, InventoryService, TaskService
from nexus_flow.storage.database import Database


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_task_service(db: Database = Depends(get_database)) -> TaskService:
    return TaskService(db)


def get_inventory_service(db: Database = Depends(get_database)) -> InventoryService:
    return InventoryService(db)


def get_finance_service(db: Database = Depends(get_database)) -> FinanceService:
    return FinanceService(db)


def get_focus_service(db: Database = Depends(get_database)) -> FocusService:
    return FocusService(db)
