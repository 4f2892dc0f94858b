"""Finance routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from nexus_flow.schemas import (
    DateRange,
    FinanceStats,
    SuccessResponse,
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
)
from nexus_flow.services import FinanceService
from nexus_flow.web.dependencies import get_finance_service

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get("", response_model=list[TransactionRead])
async def list_transactions(
    service: FinanceService = Depends(get_finance_service),
) -> list[TransactionRead]:
    """All transactions, most recent date first."""
    return await service.list_all()


@router.post("/stats", response_model=FinanceStats)
async def finance_stats(
    date_range: DateRange,
    service: FinanceService = Depends(get_finance_service),
) -> FinanceStats:
    return await service.stats(date_range)


@router.get("/{transaction_id}", response_model=TransactionRead)
async def get_transaction(
    transaction_id: str,
    service: FinanceService = Depends(get_finance_service),
) -> TransactionRead:
    return await service.get(transaction_id)


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    data: TransactionCreate,
    service: FinanceService = Depends(get_finance_service),
) -> TransactionRead:
    return await service.create(data)


@router.api_route("/{transaction_id}", methods=["PUT", "PATCH"], response_model=TransactionRead)
async def update_transaction(
    transaction_id: str,
    data: TransactionUpdate,
    service: FinanceService = Depends(get_finance_service),
) -> TransactionRead:
    return await service.update(transaction_id, data)


@router.delete("/{transaction_id}", response_model=SuccessResponse)
async def delete_transaction(
    transaction_id: str,
    service: FinanceService = Depends(get_finance_service),
) -> SuccessResponse:
    await service.delete(transaction_id)
    return SuccessResponse()
