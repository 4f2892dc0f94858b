"""Focus timer state machine and focus session/preset cache."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from enum import Enum

from nexus_flow.client.api import ApiClient, ApiError
from nexus_flow.client.base import Store
from nexus_flow.client.scheduler import PeriodicTask
from nexus_flow.notifications.rules import focus_complete
from nexus_flow.notifications.store import NotificationStore
from nexus_flow.schemas import (
    FocusPresetCreate,
    FocusPresetRead,
    FocusPresetUpdate,
    FocusSessionCreate,
    FocusSessionRead,
    FocusSessionUpdate,
    FocusStats,
    FocusType,
    utcnow,
)

logger = logging.getLogger(__name__)


class TimerState(Enum):
    """Derived state of the focus timer."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class TimerStateError(Exception):
    """Operation not allowed in the timer's current state."""


class FocusStore(Store):
    """Focus timer plus the server-side session and preset caches.

    Usage:
        store = FocusStore(api, notifications)
        await store.start(25)
        await store.pause()
        await store.resume()
        await store.stop()  # records a partial focus session
        await store.close()

    The timer ticks once per ``tick_seconds`` while running. When ``time_left``
    reaches zero the session is completed on the server and the store returns
    to idle. With ``auto_tick=False`` nothing drives the timer and callers
    invoke ``tick`` themselves.
    """

    def __init__(
        self,
        api: ApiClient,
        notifications: NotificationStore | None = None,
        tick_seconds: float = 1.0,
        auto_tick: bool = True,
    ):
        super().__init__()
        self.api = api
        self.notifications = notifications
        self.auto_tick = auto_tick

        self.sessions: list[FocusSessionRead] = []
        self.presets: list[FocusPresetRead] = []
        self.stats: FocusStats | None = None

        self.is_active = False
        self.time_left = 0  # seconds
        self.current_session: FocusSessionRead | None = None
        self._total_seconds = 0

        self._driver = PeriodicTask(tick_seconds, self.tick, name="focus-timer")
        self._lock = asyncio.Lock()

    # ============ Timer state ============

    @property
    def state(self) -> TimerState:
        if self.current_session is None:
            return TimerState.IDLE
        return TimerState.RUNNING if self.is_active else TimerState.PAUSED

    @property
    def ticking(self) -> bool:
        return self._driver.running

    @property
    def time_left_display(self) -> str:
        """Format time left as MM:SS."""
        minutes, seconds = divmod(self.time_left, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def progress_percent(self) -> float:
        """Progress through the current session (0-100)."""
        if not self._total_seconds:
            return 0.0
        elapsed = self._total_seconds - self.time_left
        return min(100.0, max(0.0, elapsed / self._total_seconds * 100))

    async def start(self, duration: int, type: FocusType = FocusType.FOCUS) -> FocusSessionRead:
        """Create a session starting now and begin counting down ``duration`` minutes."""
        async with self._lock:
            if self.current_session is not None:
                raise TimerStateError(
                    f"A {self.current_session.type.value} session is already {self.state.value}"
                )

            data = FocusSessionCreate(duration=duration, start_time=utcnow(), type=type)
            self._set(is_loading=True, error=None)
            try:
                session = await self.api.focus_sessions.create(data)
            except ApiError as e:
                self._set(is_loading=False, error=self._fail("start session", e))
                raise

            self._total_seconds = session.duration * 60
            self._set(
                sessions=[session, *self.sessions],
                current_session=session,
                is_active=True,
                time_left=self._total_seconds,
                is_loading=False,
            )
            self._start_driver()
            logger.info(f"Focus timer started: {session.type.value} for {session.duration} min")
            return session

    async def start_preset(self, preset_id: str) -> FocusSessionRead:
        """Start a session from a cached preset."""
        preset = next((p for p in self.presets if p.id == preset_id), None)
        if preset is None:
            raise ValueError(f"Unknown preset: {preset_id}")
        return await self.start(preset.duration, preset.type)

    async def tick(self) -> None:
        """Advance the countdown by one second."""
        if not self.is_active or self.time_left <= 0:
            return

        self._set(time_left=self.time_left - 1)
        if self.time_left == 0:
            await self._finish()

    async def pause(self) -> None:
        if self.state is not TimerState.RUNNING:
            return
        await self._driver.cancel()
        self._set(is_active=False)
        logger.info(f"Focus timer paused at {self.time_left_display}")

    async def resume(self) -> None:
        if self.state is not TimerState.PAUSED:
            return
        self._set(is_active=True)
        self._start_driver()
        logger.info("Focus timer resumed")

    async def stop(self) -> FocusSessionRead | None:
        """End the current session early.

        A focus session stopped before zero is saved with the elapsed time as
        its duration; one stopped at zero is completed.
        """
        await self._driver.cancel()
        session = self.current_session
        if session is None:
            return None

        time_left = self.time_left
        elapsed = self._total_seconds - time_left
        self._reset()

        if time_left == 0:
            return await self._record_completion(session)

        if session.type is not FocusType.FOCUS:
            logger.info("Break stopped early")
            return session

        partial = FocusSessionUpdate(
            duration=max(1, round(elapsed / 60)),
            end_time=utcnow(),
            completed=False,
        )
        try:
            recorded = await self.api.focus_sessions.update(session.id, partial)
        except ApiError as e:
            self._set(error=self._fail("record partial session", e))
            raise

        self._replace_session(recorded)
        logger.info(f"Focus session stopped early after {recorded.duration} min")
        return recorded

    async def close(self) -> None:
        """Cancel the tick driver."""
        await self._driver.cancel()

    def _start_driver(self) -> None:
        if self.auto_tick:
            self._driver.start()

    def _reset(self) -> None:
        self._total_seconds = 0
        self._set(current_session=None, is_active=False, time_left=0)

    async def _finish(self) -> None:
        # Idle only once the completion is recorded
        session = self.current_session
        await self._driver.cancel()
        if session is not None:
            completed = await self._record_completion(session)
            if self.notifications is not None:
                self.notifications.add(focus_complete(completed))
        self._reset()

    async def _record_completion(self, session: FocusSessionRead) -> FocusSessionRead:
        try:
            completed = await self.api.complete_session(session.id)
        except ApiError as e:
            # Keep the local copy consistent even if the server missed it
            self._set(error=self._fail("complete session", e))
            completed = session.model_copy(update={"completed": True, "end_time": utcnow()})

        self._replace_session(completed)
        logger.info(f"Focus session completed: {completed.id}")
        return completed

    def _fail(self, action: str, error: Exception) -> str:
        message = f"Failed to {action}: {error}"
        logger.error(message)
        return message

    def _replace_session(self, updated: FocusSessionRead) -> None:
        self._set(sessions=[updated if s.id == updated.id else s for s in self.sessions])

    # ============ Sessions ============

    async def fetch_sessions(self) -> None:
        self._set(is_loading=True, error=None)
        try:
            sessions = await self.api.focus_sessions.list()
        except ApiError as e:
            self._set(is_loading=False, error=self._fail("fetch focus sessions", e))
            return
        self._set(sessions=sessions, is_loading=False)

    async def add_session(self, data: FocusSessionCreate) -> FocusSessionRead:
        self._set(error=None)
        try:
            session = await self.api.focus_sessions.create(data)
        except ApiError as e:
            self._set(error=self._fail("create focus session", e))
            raise
        self._set(sessions=[session, *self.sessions])
        return session

    async def update_session(self, session_id: str, data: FocusSessionUpdate) -> FocusSessionRead:
        self._set(error=None)
        try:
            updated = await self.api.focus_sessions.update(session_id, data)
        except ApiError as e:
            self._set(error=self._fail("update focus session", e))
            raise
        self._replace_session(updated)
        if self.current_session is not None and self.current_session.id == session_id:
            self._set(current_session=updated)
        return updated

    async def delete_session(self, session_id: str) -> None:
        self._set(error=None)
        try:
            await self.api.focus_sessions.delete(session_id)
        except ApiError as e:
            self._set(error=self._fail("delete focus session", e))
            raise
        if self.current_session is not None and self.current_session.id == session_id:
            await self._driver.cancel()
            self._reset()
        self._set(sessions=[s for s in self.sessions if s.id != session_id])

    async def complete_session(self, session_id: str) -> FocusSessionRead:
        self._set(error=None)
        try:
            completed = await self.api.complete_session(session_id)
        except ApiError as e:
            self._set(error=self._fail("complete focus session", e))
            raise
        if self.current_session is not None and self.current_session.id == session_id:
            await self._driver.cancel()
            self._reset()
        self._replace_session(completed)
        return completed

    async def fetch_stats(self, start: datetime, end: datetime) -> FocusStats | None:
        self._set(is_loading=True, error=None)
        try:
            stats = await self.api.focus_stats(start, end)
        except ApiError as e:
            self._set(is_loading=False, error=self._fail("fetch focus stats", e))
            return None
        self._set(stats=stats, is_loading=False)
        return stats

    # ============ Presets ============

    async def fetch_presets(self) -> None:
        self._set(is_loading=True, error=None)
        try:
            presets = await self.api.focus_presets.list()
        except ApiError as e:
            self._set(is_loading=False, error=self._fail("fetch presets", e))
            return
        self._set(presets=presets, is_loading=False)

    async def add_preset(self, data: FocusPresetCreate) -> FocusPresetRead:
        self._set(error=None)
        try:
            preset = await self.api.focus_presets.create(data)
        except ApiError as e:
            self._set(error=self._fail("create preset", e))
            raise
        self._set(presets=sorted([*self.presets, preset], key=lambda p: p.name))
        return preset

    async def update_preset(self, preset_id: str, data: FocusPresetUpdate) -> FocusPresetRead:
        self._set(error=None)
        try:
            updated = await self.api.focus_presets.update(preset_id, data)
        except ApiError as e:
            self._set(error=self._fail("update preset", e))
            raise
        self._set(presets=[updated if p.id == preset_id else p for p in self.presets])
        return updated

    async def delete_preset(self, preset_id: str) -> None:
        self._set(error=None)
        try:
            await self.api.focus_presets.delete(preset_id)
        except ApiError as e:
            self._set(error=self._fail("delete preset", e))
            raise
        self._set(presets=[p for p in self.presets if p.id != preset_id])
