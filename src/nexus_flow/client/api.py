"""Async REST client for the Nexus Flow API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Generic, TypeVar

import aiohttp
from pydantic import BaseModel

from nexus_flow.schemas import (
    DateRange,
    FinanceStats,
    FocusPresetRead,
    FocusSessionRead,
    FocusStats,
    InventoryBulkUpdate,
    InventoryItemCreate,
    InventoryItemRead,
    TaskRead,
    TransactionRead,
)

logger = logging.getLogger(__name__)

ReadT = TypeVar("ReadT", bound=BaseModel)


class ApiError(Exception):
    """Non-2xx response or transport failure. ``status`` is 0 for the latter."""

    def __init__(self, message: str, status: int = 0, code: str | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details

    def __str__(self) -> str:
        if self.status:
            return f"{self.message} ({self.status})"
        return self.message


def _body(data: BaseModel | dict | list | None) -> Any:
    if data is None:
        return None
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(data, list):
        return [_body(item) for item in data]
    return data


class ResourceClient(Generic[ReadT]):
    """list/get/create/update/delete against one collection path."""

    def __init__(self, api: ApiClient, path: str, schema: type[ReadT]):
        self.api = api
        self.path = path
        self.schema = schema

    async def list(self) -> list[ReadT]:
        data = await self.api.request("GET", self.path)
        return [self.schema.model_validate(item) for item in data]

    async def get(self, item_id: str) -> ReadT:
        return self.schema.model_validate(await self.api.request("GET", f"{self.path}/{item_id}"))

    async def create(self, data: BaseModel) -> ReadT:
        return self.schema.model_validate(await self.api.request("POST", self.path, data))

    async def update(self, item_id: str, data: BaseModel) -> ReadT:
        return self.schema.model_validate(
            await self.api.request("PUT", f"{self.path}/{item_id}", data)
        )

    async def delete(self, item_id: str) -> None:
        await self.api.request("DELETE", f"{self.path}/{item_id}")


class ApiClient:
    """aiohttp-based client covering every endpoint.

    Usage:
        async with ApiClient("http://localhost:3001/api") as api:
            tasks = await api.tasks.list()
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._session = session
        self._owns_session = session is None

        self.tasks = ResourceClient(self, "/tasks", TaskRead)
        self.inventory = ResourceClient(self, "/inventory", InventoryItemRead)
        self.finance = ResourceClient(self, "/finance", TransactionRead)
        self.focus_sessions = ResourceClient(self, "/focus", FocusSessionRead)
        self.focus_presets = ResourceClient(self, "/focus/presets", FocusPresetRead)

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def request(self, method: str, path: str, data: Any = None) -> Any:
        """Send one request and return the decoded JSON body (None for 204)."""
        url = f"{self.base_url}{path}"
        session = self._get_session()
        try:
            async with session.request(
                method, url, json=_body(data), headers=self._headers()
            ) as resp:
                if resp.status == 204:
                    return None
                if resp.status >= 400:
                    raise await self._error_from(resp)
                return await resp.json()
        except aiohttp.ClientError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ApiError(f"Network error: {e}") from e

    @staticmethod
    async def _error_from(resp: aiohttp.ClientResponse) -> ApiError:
        try:
            payload = await resp.json(content_type=None)
        except ValueError:
            payload = None

        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict):
            return ApiError(
                error.get("message") or resp.reason or "Request failed",
                status=resp.status,
                code=error.get("code"),
                details=error.get("details"),
            )
        return ApiError(resp.reason or "Request failed", status=resp.status)

    # ============ Extra endpoints ============

    async def complete_session(self, session_id: str) -> FocusSessionRead:
        data = await self.request("POST", f"/focus/{session_id}/complete")
        return FocusSessionRead.model_validate(data)

    async def focus_stats(self, start: datetime, end: datetime) -> FocusStats:
        data = await self.request("POST", "/focus/stats", DateRange(start_date=start, end_date=end))
        return FocusStats.model_validate(data)

    async def finance_stats(self, start: datetime, end: datetime) -> FinanceStats:
        data = await self.request("POST", "/finance/stats", DateRange(start_date=start, end_date=end))
        return FinanceStats.model_validate(data)

    async def low_stock(self) -> list[InventoryItemRead]:
        data = await self.request("GET", "/inventory/low-stock")
        return [InventoryItemRead.model_validate(item) for item in data]

    async def bulk_create_inventory(self, items: list[InventoryItemCreate]) -> list[InventoryItemRead]:
        data = await self.request("POST", "/inventory/bulk", items)
        return [InventoryItemRead.model_validate(item) for item in data]

    async def bulk_update_inventory(self, updates: list[InventoryBulkUpdate]) -> list[InventoryItemRead]:
        data = await self.request("PATCH", "/inventory/bulk", updates)
        return [InventoryItemRead.model_validate(item) for item in data]

    async def bulk_delete_inventory(self, ids: list[str]) -> None:
        await self.request("DELETE", "/inventory/bulk", {"ids": ids})

    async def health(self) -> dict[str, Any]:
        # Health lives at the server root, not under /api
        root = self.base_url.rsplit("/api", 1)[0]
        session = self._get_session()
        try:
            async with session.get(f"{root}/health", headers=self._headers()) as resp:
                if resp.status >= 400:
                    raise await self._error_from(resp)
                return await resp.json()
        except aiohttp.ClientError as e:
            raise ApiError(f"Network error: {e}") from e
