"""Periodic expiry sweep for the session store.

Conversations are never evicted on read; this task is what removes idle
ones. It runs on the event loop until stopped.
"""

import asyncio
import logging
from typing import Optional

from sms_agent.conversation.session_store import SessionStore

logger = logging.getLogger(__name__)


class SessionSweeper:
    """Calls ``SessionStore.sweep_expired`` every ``interval_sec`` seconds."""

    def __init__(self, store: SessionStore, interval_sec: float) -> None:
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be > 0, got {interval_sec}")
        self.store = store
        self.interval_sec = interval_sec
        self.total_removed = 0
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task  # type: ignore[return-value]
        self._stop.clear()
        self._task = asyncio.create_task(self._run())
        logger.info("Session sweeper started (every %.0fs)", self.interval_sec)
        return self._task

    async def stop(self) -> None:
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None
        logger.info("Session sweeper stopped after removing %d conversations", self.total_removed)

    async def _run(self) -> None:
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval_sec)
            except asyncio.TimeoutError:
                self.total_removed += self.store.sweep_expired()
