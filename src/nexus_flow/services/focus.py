"""Focus service: sessions, presets and range statistics."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select

from nexus_flow.schemas import (
    DateRange,
    FocusPresetCreate,
    FocusPresetRead,
    FocusPresetUpdate,
    FocusSessionRead,
    FocusStats,
    FocusType,
    utcnow,
)
from nexus_flow.services.base import CrudService, check_range, storage_errors
from nexus_flow.storage.models import FocusPreset, FocusSession

logger = logging.getLogger(__name__)


class FocusPresetService(CrudService[FocusPresetRead]):
    model = FocusPreset
    read_schema = FocusPresetRead
    entity = "Focus preset"
    plural = "focus presets"

    def ordering(self):
        return (FocusPreset.name.asc(),)


class FocusService(CrudService[FocusSessionRead]):
    """Focus sessions, with preset management delegated to FocusPresetService."""

    model = FocusSession
    read_schema = FocusSessionRead
    entity = "Focus session"
    plural = "focus sessions"

    def __init__(self, db):
        super().__init__(db)
        self.presets = FocusPresetService(db)

    def ordering(self):
        return (FocusSession.start_time.desc(),)

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        # A session submitted with an end time has already finished
        values["completed"] = values.get("end_time") is not None
        return values

    def prepare_update(self, obj: FocusSession, changes: dict[str, Any]) -> dict[str, Any]:
        if changes.get("completed") and changes.get("end_time") is None and obj.end_time is None:
            changes["end_time"] = utcnow()
        return changes

    async def complete(self, session_id: str) -> FocusSessionRead:
        """Mark a session completed, ending it now."""
        with storage_errors("Failed to complete focus session", "UPDATE_ERROR"):
            async with self.db.transaction() as session:
                obj = await self._get_or_raise(session, session_id)
                obj.completed = True
                obj.end_time = utcnow()
                await session.flush()
                await session.refresh(obj)
                logger.info(f"Focus session completed: {session_id} ({obj.duration} min)")
                return self.to_read(obj)

    async def stats(self, date_range: DateRange) -> FocusStats:
        """Totals over completed sessions started within the range."""
        check_range(date_range)
        with storage_errors("Failed to get focus stats", "FETCH_ERROR"):
            async with self.db.session() as session:
                result = await session.execute(
                    select(FocusSession).where(
                        FocusSession.start_time >= date_range.start_date,
                        FocusSession.start_time <= date_range.end_date,
                        FocusSession.completed.is_(True),
                    )
                )
                sessions = list(result.scalars())

        by_type = {focus_type.value: 0 for focus_type in FocusType}
        for s in sessions:
            by_type[s.type.value] += s.duration

        return FocusStats(
            total_sessions=len(sessions),
            total_focus_time=by_type[FocusType.FOCUS.value],
            total_break_time=by_type[FocusType.BREAK.value],
            completed_sessions=sum(1 for s in sessions if s.completed),
            by_type=by_type,
        )

    # ============ Presets ============

    async def list_presets(self) -> list[FocusPresetRead]:
        return await self.presets.list_all()

    async def get_preset(self, preset_id: str) -> FocusPresetRead:
        return await self.presets.get(preset_id)

    async def create_preset(self, data: FocusPresetCreate) -> FocusPresetRead:
        return await self.presets.create(data)

    async def update_preset(self, preset_id: str, data: FocusPresetUpdate) -> FocusPresetRead:
        return await self.presets.update(preset_id, data)

    async def delete_preset(self, preset_id: str) -> None:
        await self.presets.delete(preset_id)
