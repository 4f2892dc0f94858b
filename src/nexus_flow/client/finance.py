"""Finance store with running totals."""

from __future__ import annotations

import logging
from datetime import datetime

from nexus_flow.client.api import ApiClient, ApiError
from nexus_flow.client.base import CollectionStore
from nexus_flow.notifications.store import NotificationStore
from nexus_flow.schemas import FinanceStats, TransactionRead, TransactionType

logger = logging.getLogger(__name__)


class FinanceStore(CollectionStore[TransactionRead]):
    entity = "transaction"
    plural = "transactions"
    prepend_new = True

    def __init__(self, api: ApiClient, notifications: NotificationStore | None = None):
        super().__init__(api.finance)
        self.api = api
        self.notifications = notifications
        self.stats: FinanceStats | None = None

    @property
    def transactions(self) -> list[TransactionRead]:
        return self.items

    def matches(self, t: TransactionRead, query: str) -> bool:
        fields = (t.description or "", t.category.value, t.type.value, f"{t.amount:g}")
        return any(query in value.lower() for value in fields)

    def get_income_total(self) -> float:
        return sum(t.amount for t in self.items if t.type is TransactionType.INCOME)

    def get_expense_total(self) -> float:
        return sum(t.amount for t in self.items if t.type is TransactionType.EXPENSE)

    def get_balance(self) -> float:
        return self.get_income_total() - self.get_expense_total()

    async def fetch_stats(self, start: datetime, end: datetime) -> FinanceStats | None:
        self._set(is_loading=True, error=None)
        try:
            stats = await self.api.finance_stats(start, end)
        except ApiError as e:
            self._set(is_loading=False, error=self._fail("fetch finance stats", e))
            return None
        self._set(stats=stats, is_loading=False)
        return stats

    def _after_change(self) -> None:
        if self.notifications is None:
            return
        try:
            self.notifications.check_finance(self.items)
        except Exception as e:
            logger.error(f"Error checking finance notifications: {e}")
