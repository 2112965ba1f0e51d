"""
Tracking session lifecycle.
Each open tracking view owns one session with its own repeating asyncio task.
Closing the view cancels the task; no tick runs after stop() returns.
"""

import asyncio
import logging
import uuid
from typing import Callable, Dict, List, Optional

from utils.progress_simulator import (
    MAP_VIEW, TickConfig, TripProgress, TripStatus, advance, start_trip
)

logger = logging.getLogger(__name__)


class SessionLimitError(Exception):
    """Raised when opening a session would exceed the configured maximum."""
    pass


class TrackingSession:
    """
    Simulated live progress for a single tracking view.

    Usage:
        session = TrackingSession(progress, MAP_VIEW)
        session.start()      # inside a running event loop
        ...
        await session.stop()
    """

    def __init__(
        self,
        progress: TripProgress,
        config: TickConfig = MAP_VIEW,
        session_id: Optional[str] = None,
        bus_id: Optional[str] = None,
        on_tick: Optional[Callable[[TripProgress], None]] = None
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.config = config
        self.bus_id = bus_id
        self.ticks = 0
        self._progress = progress
        self._on_tick = on_tick
        self._task: Optional[asyncio.Task] = None

    @property
    def progress(self) -> TripProgress:
        return self._progress

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the tick loop on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def tick(self, ticks: int = 1) -> TripProgress:
        """Apply ticks immediately, bypassing the timer."""
        self._progress = advance(self._progress, ticks, self.config)
        self.ticks += max(0, ticks)
        if self._on_tick is not None:
            self._on_tick(self._progress)
        return self._progress

    async def _run(self) -> None:
        while self._progress.status is not TripStatus.ARRIVED:
            await asyncio.sleep(self.config.interval_seconds)
            self.tick()
        logger.info(f"Tracking session {self.session_id} arrived at {self._progress.destination}")

    async def stop(self) -> None:
        """Cancel the tick loop and wait until it has finished."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"Tracking session {self.session_id} stopped after {self.ticks} ticks")


class TrackingSessionManager:
    """Owns every open tracking session, keyed by session id."""

    def __init__(self, max_sessions: int = 1000) -> None:
        self.max_sessions = max_sessions
        self._sessions: Dict[str, TrackingSession] = {}

    def open(
        self,
        path: List[str],
        total_minutes: int,
        config: TickConfig = MAP_VIEW,
        bus_id: Optional[str] = None
    ) -> TrackingSession:
        """
        Create and start a session for a resolved path.

        Only running sessions count toward max_sessions. Finished sessions
        stay readable until room is needed, then the oldest are dropped.

        Raises:
            SessionLimitError: If max_sessions are already running
        """
        if self.running_count() >= self.max_sessions:
            raise SessionLimitError(f"Maximum of {self.max_sessions} tracking sessions reached")
        self._prune_finished()

        session = TrackingSession(start_trip(path, total_minutes), config, bus_id=bus_id)
        self._sessions[session.session_id] = session
        session.start()
        logger.info(
            f"Opened tracking session {session.session_id}: "
            f"{session.progress.origin} -> {session.progress.destination}"
        )
        return session

    def running_count(self) -> int:
        return sum(1 for session in self._sessions.values() if session.is_running)

    def _prune_finished(self) -> None:
        finished = [sid for sid, session in self._sessions.items() if not session.is_running]
        excess = len(self._sessions) + 1 - self.max_sessions
        for session_id in finished[:max(0, excess)]:
            del self._sessions[session_id]
            logger.debug(f"Dropped finished tracking session {session_id}")

    def get(self, session_id: str) -> Optional[TrackingSession]:
        return self._sessions.get(session_id)

    async def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        await session.stop()
        logger.info(f"Closed tracking session {session_id}")
        return True

    async def close_all(self) -> int:
        session_ids = list(self._sessions)
        for session_id in session_ids:
            await self.close(session_id)
        return len(session_ids)

    def __len__(self) -> int:
        return len(self._sessions)
