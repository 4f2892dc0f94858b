"""Finance service: transaction CRUD and range statistics."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from sqlalchemy import select

from nexus_flow.core.errors import ValidationError
from nexus_flow.schemas import (
    DateRange,
    FinanceStats,
    TransactionRead,
    TransactionType,
    categories_for,
)
from nexus_flow.services.base import CrudService, check_range, storage_errors
from nexus_flow.storage.models import Transaction


def _check_category(transaction_type: TransactionType, category) -> None:
    if category not in categories_for(transaction_type):
        raise ValidationError(
            f"Category '{category.value}' is not valid for {transaction_type.value} transactions",
            details=[{"field": "category", "message": f"not a {transaction_type.value} category"}],
        )


class FinanceService(CrudService[TransactionRead]):
    model = Transaction
    read_schema = TransactionRead
    entity = "Transaction"
    plural = "transactions"

    def ordering(self):
        return (Transaction.date.desc(), Transaction.created_at.desc())

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        _check_category(values["type"], values["category"])
        return values

    def prepare_update(self, obj: Transaction, changes: dict[str, Any]) -> dict[str, Any]:
        if "type" in changes or "category" in changes:
            _check_category(
                changes.get("type", obj.type),
                changes.get("category", obj.category),
            )
        return changes

    async def stats(self, date_range: DateRange) -> FinanceStats:
        """Income, expense and per-category totals for transactions dated in the range."""
        check_range(date_range)
        with storage_errors("Failed to get finance stats", "FETCH_ERROR"):
            async with self.db.session() as session:
                result = await session.execute(
                    select(Transaction).where(
                        Transaction.date >= date_range.start_date,
                        Transaction.date <= date_range.end_date,
                    )
                )
                transactions = list(result.scalars())

        total_income = 0.0
        total_expenses = 0.0
        by_category: dict[str, float] = defaultdict(float)
        for t in transactions:
            if t.type is TransactionType.INCOME:
                total_income += t.amount
            else:
                total_expenses += t.amount
            by_category[t.category.value] += t.amount

        return FinanceStats(
            total_income=total_income,
            total_expenses=total_expenses,
            balance=total_income - total_expenses,
            by_category=dict(by_category),
        )
