"""Cancellable fixed-period task used by the focus timer and alert checks."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs ``callback`` every ``interval`` seconds on the running loop.

    Firings never overlap: the next sleep starts only after the callback
    returns. ``cancel`` may be called from inside the callback itself.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[None] | None],
        name: str = "periodic-task",
    ):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._task: asyncio.Task | None = None
        # Loop that cancelled itself and is still finishing its last callback
        self._exiting: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the loop. A no-op while already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug(f"{self.name} started (every {self.interval}s)")

    async def cancel(self) -> None:
        """Stop the loop and wait for it to finish.

        Called from inside the callback, the loop exits once the callback
        returns; a later ``cancel`` from elsewhere waits for that callback.
        """
        task, self._task = self._task, None
        current = asyncio.current_task()

        if task is not None and task is current:
            self._exiting = task
            return

        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.debug(f"{self.name} cancelled")

        exiting = self._exiting
        if exiting is not None and exiting is not current:
            self._exiting = None
            try:
                await exiting
            except asyncio.CancelledError:
                pass

    async def _run(self) -> None:
        me = asyncio.current_task()
        while self._task is me:
            await asyncio.sleep(self.interval)
            if self._task is not me:
                break
            try:
                result = self.callback()
                if asyncio.iscoroutine(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error in {self.name} callback: {e}")
