"""Tests for focus sessions and presets."""

from datetime import datetime

import pytest

from nexus_flow.core.errors import NotFoundError
from nexus_flow.schemas import (
    DateRange,
    FocusPresetCreate,
    FocusPresetUpdate,
    FocusSessionCreate,
    FocusSessionUpdate,
    FocusType,
)

JANUARY = DateRange(start_date=datetime(2024, 1, 1), end_date=datetime(2024, 1, 31, 23, 59))


async def test_session_with_end_time_is_completed(focus_service):
    """Test that submitting a finished session marks it completed."""
    open_session = await focus_service.create(
        FocusSessionCreate(duration=25, start_time=datetime(2024, 1, 1, 9))
    )
    finished = await focus_service.create(
        FocusSessionCreate(
            duration=25, start_time=datetime(2024, 1, 1, 10), end_time=datetime(2024, 1, 1, 10, 25)
        )
    )

    assert open_session.completed is False
    assert finished.completed is True


async def test_complete_sets_end_time(focus_service):
    """Test that completing a session records when it ended."""
    session = await focus_service.create(
        FocusSessionCreate(duration=25, start_time=datetime(2024, 1, 1, 9))
    )

    completed = await focus_service.complete(session.id)

    assert completed.completed is True
    assert completed.end_time is not None
    assert completed.duration == 25


async def test_complete_unknown_session(focus_service):
    """Test that completing a missing session raises NotFoundError."""
    with pytest.raises(NotFoundError):
        await focus_service.complete("missing")


async def test_update_completed_fills_end_time(focus_service):
    """Test that marking a session completed without an end time sets one."""
    session = await focus_service.create(
        FocusSessionCreate(duration=10, start_time=datetime(2024, 1, 1, 9))
    )

    updated = await focus_service.update(session.id, FocusSessionUpdate(completed=True))

    assert updated.completed is True
    assert updated.end_time is not None


async def test_sessions_listed_latest_first(focus_service):
    """Test session ordering by start time."""
    early = await focus_service.create(FocusSessionCreate(duration=5, start_time=datetime(2024, 1, 1, 8)))
    late = await focus_service.create(FocusSessionCreate(duration=5, start_time=datetime(2024, 1, 1, 18)))

    assert [s.id for s in await focus_service.list_all()] == [late.id, early.id]


async def test_stats_count_completed_sessions_only(focus_service):
    """Test focus/break totals over completed sessions in range."""
    for start, duration, kind in [
        (datetime(2024, 1, 2, 9), 25, FocusType.FOCUS),
        (datetime(2024, 1, 2, 10), 50, FocusType.FOCUS),
        (datetime(2024, 1, 2, 11), 5, FocusType.BREAK),
    ]:
        session = await focus_service.create(
            FocusSessionCreate(duration=duration, start_time=start, type=kind)
        )
        await focus_service.complete(session.id)
    # Incomplete and out-of-range sessions are ignored
    await focus_service.create(FocusSessionCreate(duration=90, start_time=datetime(2024, 1, 3)))
    outside = await focus_service.create(FocusSessionCreate(duration=30, start_time=datetime(2024, 2, 3)))
    await focus_service.complete(outside.id)

    stats = await focus_service.stats(JANUARY)

    assert stats.total_sessions == 3
    assert stats.completed_sessions == 3
    assert stats.total_focus_time == 75
    assert stats.total_break_time == 5
    assert stats.by_type == {"focus": 75, "break": 5}


async def test_preset_crud(focus_service):
    """Test the preset lifecycle and name ordering."""
    deep = await focus_service.create_preset(FocusPresetCreate(name="Deep work", duration=50))
    short = await focus_service.create_preset(
        FocusPresetCreate(name="Coffee", duration=10, type=FocusType.BREAK)
    )

    assert [p.name for p in await focus_service.list_presets()] == ["Coffee", "Deep work"]

    renamed = await focus_service.update_preset(deep.id, FocusPresetUpdate(duration=45))
    assert renamed.duration == 45
    assert renamed.name == "Deep work"

    await focus_service.delete_preset(short.id)
    with pytest.raises(NotFoundError):
        await focus_service.get_preset(short.id)
