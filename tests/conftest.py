"""Shared pytest fixtures for nexus_flow tests."""

import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from nexus_flow.client.api import ApiError
from nexus_flow.core.config import Config
from nexus_flow.schemas import (
    FinanceStats,
    FocusPresetRead,
    FocusSessionRead,
    FocusStats,
    InventoryItemRead,
    TaskRead,
    TransactionRead,
    utcnow,
)
from nexus_flow.services import FinanceService, FocusService, InventoryService, TaskService
from nexus_flow.storage.database import Database
from nexus_flow.web.app import create_app


@pytest.fixture
def db_url(tmp_path):
    """URL of a throwaway SQLite database."""
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def db(db_url):
    """Connected database with all tables created."""
    database = Database(db_url)
    await database.connect()
    yield database
    await database.close()


@pytest.fixture
def task_service(db):
    return TaskService(db)


@pytest.fixture
def inventory_service(db):
    return InventoryService(db)


@pytest.fixture
def finance_service(db):
    return FinanceService(db)


@pytest.fixture
def focus_service(db):
    return FocusService(db)


@pytest.fixture
def config(tmp_path, db_url):
    """Configuration isolated from the user's home directory."""
    return Config(
        data_dir=tmp_path / "data",
        log_dir=tmp_path / "logs",
        config_dir=tmp_path / "config",
        database_url=db_url,
    )


@pytest.fixture
def client(config):
    """HTTP client for the API, with the lifespan (database) running."""
    app = create_app(config)
    with TestClient(app) as test_client:
        yield test_client


# ============ In-memory API double ============


class FakeResource:
    """Stands in for ResourceClient, keeping records in a dict."""

    def __init__(self, schema, extra=None):
        self.schema = schema
        self.extra = extra or (lambda values: {})
        self.records = {}
        self.fail = False
        self.calls = []

    def _check(self, op):
        self.calls.append(op)
        if self.fail:
            raise ApiError("Server unavailable", status=500, code="INTERNAL_ERROR")

    def seed(self, **values):
        now = utcnow()
        record = self.schema.model_validate(
            {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **values}
        )
        self.records[record.id] = record
        return record

    async def list(self):
        self._check("list")
        return list(self.records.values())

    async def get(self, item_id):
        self._check("get")
        if item_id not in self.records:
            raise ApiError("Not found", status=404, code="NOT_FOUND")
        return self.records[item_id]

    async def create(self, data):
        self._check("create")
        values = data.model_dump()
        return self.seed(**values, **self.extra(values))

    async def update(self, item_id, data):
        self._check("update")
        if item_id not in self.records:
            raise ApiError("Not found", status=404, code="NOT_FOUND")
        updated = self.records[item_id].model_copy(update={**data.changes(), "updated_at": utcnow()})
        self.records[item_id] = updated
        return updated

    async def delete(self, item_id):
        self._check("delete")
        if item_id not in self.records:
            raise ApiError("Not found", status=404, code="NOT_FOUND")
        del self.records[item_id]


class FakeApi:
    """Duck-typed ApiClient backed by FakeResources."""

    def __init__(self):
        self.tasks = FakeResource(TaskRead)
        self.inventory = FakeResource(InventoryItemRead)
        self.finance = FakeResource(TransactionRead)
        self.focus_sessions = FakeResource(
            FocusSessionRead, extra=lambda values: {"completed": values.get("end_time") is not None}
        )
        self.focus_presets = FakeResource(FocusPresetRead)
        self.closed = False

    async def complete_session(self, session_id):
        self.focus_sessions._check("complete")
        session = self.focus_sessions.records[session_id]
        completed = session.model_copy(update={"completed": True, "end_time": utcnow()})
        self.focus_sessions.records[session_id] = completed
        return completed

    async def focus_stats(self, start, end):
        self.focus_sessions._check("stats")
        done = [s for s in self.focus_sessions.records.values() if s.completed]
        return FocusStats(total_sessions=len(done), completed_sessions=len(done))

    async def finance_stats(self, start, end):
        self.finance._check("stats")
        return FinanceStats()

    async def bulk_create_inventory(self, items):
        self.inventory._check("bulk_create")
        return [self.inventory.seed(**item.model_dump()) for item in items]

    async def bulk_update_inventory(self, updates):
        self.inventory._check("bulk_update")
        return [await self.inventory.update(u.id, u.data) for u in updates]

    async def bulk_delete_inventory(self, ids):
        self.inventory._check("bulk_delete")
        for item_id in ids:
            self.inventory.records.pop(item_id, None)

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def now():
    """A fixed mid-month reference time."""
    return datetime(2024, 5, 15, 12, 0, 0)


@pytest.fixture
def yesterday(now):
    return now - timedelta(days=1)
