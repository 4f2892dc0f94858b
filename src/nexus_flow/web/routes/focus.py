"""Focus session and preset routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from nexus_flow.schemas import (
    DateRange,
    FocusPresetCreate,
    FocusPresetRead,
    FocusPresetUpdate,
    FocusSessionCreate,
    FocusSessionRead,
    FocusSessionUpdate,
    FocusStats,
    SuccessResponse,
)
from nexus_flow.services import FocusService
from nexus_flow.web.dependencies import get_focus_service

router = APIRouter(prefix="/focus", tags=["focus"])


# ============ Presets ============


@router.get("/presets", response_model=list[FocusPresetRead])
async def list_presets(service: FocusService = Depends(get_focus_service)) -> list[FocusPresetRead]:
    return await service.list_presets()


@router.get("/presets/{preset_id}", response_model=FocusPresetRead)
async def get_preset(
    preset_id: str,
    service: FocusService = Depends(get_focus_service),
) -> FocusPresetRead:
    return await service.get_preset(preset_id)


@router.post("/presets", response_model=FocusPresetRead, status_code=status.HTTP_201_CREATED)
async def create_preset(
    data: FocusPresetCreate,
    service: FocusService = Depends(get_focus_service),
) -> FocusPresetRead:
    return await service.create_preset(data)


@router.api_route("/presets/{preset_id}", methods=["PUT", "PATCH"], response_model=FocusPresetRead)
async def update_preset(
    preset_id: str,
    data: FocusPresetUpdate,
    service: FocusService = Depends(get_focus_service),
) -> FocusPresetRead:
    return await service.update_preset(preset_id, data)


@router.delete("/presets/{preset_id}", response_model=SuccessResponse)
async def delete_preset(
    preset_id: str,
    service: FocusService = Depends(get_focus_service),
) -> SuccessResponse:
    await service.delete_preset(preset_id)
    return SuccessResponse()


# ============ Sessions ============


@router.get("", response_model=list[FocusSessionRead])
async def list_sessions(service: FocusService = Depends(get_focus_service)) -> list[FocusSessionRead]:
    """All sessions, latest start first."""
    return await service.list_all()


@router.post("/stats", response_model=FocusStats)
async def focus_stats(
    date_range: DateRange,
    service: FocusService = Depends(get_focus_service),
) -> FocusStats:
    """Totals over completed sessions started within the range."""
    return await service.stats(date_range)


@router.get("/{session_id}", response_model=FocusSessionRead)
async def get_session(
    session_id: str,
    service: FocusService = Depends(get_focus_service),
) -> FocusSessionRead:
    return await service.get(session_id)


@router.post("", response_model=FocusSessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    data: FocusSessionCreate,
    service: FocusService = Depends(get_focus_service),
) -> FocusSessionRead:
    return await service.create(data)


@router.post("/{session_id}/complete", response_model=FocusSessionRead)
async def complete_session(
    session_id: str,
    service: FocusService = Depends(get_focus_service),
) -> FocusSessionRead:
    return await service.complete(session_id)


@router.api_route("/{session_id}", methods=["PUT", "PATCH"], response_model=FocusSessionRead)
async def update_session(
    session_id: str,
    data: FocusSessionUpdate,
    service: FocusService = Depends(get_focus_service),
) -> FocusSessionRead:
    return await service.update(session_id, data)


@router.delete("/{session_id}", response_model=SuccessResponse)
async def delete_session(
    session_id: str,
    service: FocusService = Depends(get_focus_service),
) -> SuccessResponse:
    await service.delete(session_id)
    return SuccessResponse()
