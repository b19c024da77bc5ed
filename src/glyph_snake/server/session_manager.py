"""In-memory session registry, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from glyph_snake.config import GameConfig
from glyph_snake.server.models import SessionSummary
from glyph_snake.session import GameSession
from glyph_snake.snake import Button

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 100


@dataclass
class HostedSession:
    """A game session plus the sockets and input queue that drive it."""

    session_id: str
    game: GameSession
    pending: set[Button] = field(default_factory=set)
    sockets: list[WebSocket] = field(default_factory=list)
    # Monotonic time the last client left; None while any client is attached.
    idle_since: float | None = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def config(self) -> GameConfig:
        return self.game.config

    def frame(self) -> dict:
        """Return the compact per-render payload sent to clients."""
        outcome = self.game.outcome
        return {
            "rows": self.game.render(),
            "running": self.game.is_running,
            "score": self.game.score,
            "steps": self.game.steps,
            "outcome": outcome.value if outcome else None,
        }

    def has_live_clients(self) -> bool:
        """Return True if any attached socket is still open at both ends."""
        return any(
            ws.application_state == WebSocketState.CONNECTED
            and ws.client_state == WebSocketState.CONNECTED
            for ws in self.sockets
        )

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            height=self.config.height,
            width=self.config.width,
            step_cadence=self.config.step_cadence,
            tick_rate_ms=self.config.tick_rate_ms,
            running=self.game.is_running,
            score=self.game.score,
            connected=len(self.sockets),
        )


class SessionManager:
    """Central registry managing all hosted sessions."""

    def __init__(self, max_sessions: int = _MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._sessions: dict[str, HostedSession] = {}
        self._max_sessions = max_sessions

    def create_session(self, config: GameConfig) -> HostedSession:
        """Register a new, not yet started session.

        At capacity, the session idle the longest is evicted to make room.
        """
        if len(self._sessions) >= self._max_sessions:
            self._evict_idle()
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Session limit reached. Try again later.")
        session_id = uuid.uuid4().hex[:12]
        hosted = HostedSession(session_id=session_id, game=GameSession(config))
        self._sessions[session_id] = hosted
        logger.info(
            "Session %s created (%dx%d, cadence=%d).",
            session_id, config.height, config.width, config.step_cadence,
        )
        return hosted

    def get_session(self, session_id: str) -> HostedSession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[SessionSummary]:
        return [h.summary() for h in self._sessions.values()]

    async def remove_session(self, session_id: str) -> None:
        """Stop the tick loop, close sockets, and forget the session."""
        hosted = self._sessions.pop(session_id, None)
        if hosted is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._stop(hosted)
        await self._close_connections(hosted)
        logger.info("Session %s removed.", session_id)

    def _evict_idle(self) -> None:
        """Drop the longest-idle session that has no open client."""
        idle = [h for h in self._sessions.values() if not h.has_live_clients()]
        if not idle:
            return
        stale = min(idle, key=lambda h: h.idle_since or 0.0)
        del self._sessions[stale.session_id]
        if stale._task is not None and not stale._task.done():
            stale._task.cancel()
        stale._task = None
        logger.info("Evicted idle session %s.", stale.session_id)

    def attach(self, hosted: HostedSession, ws: WebSocket) -> None:
        """Register *ws* as a client of *hosted*."""
        hosted.sockets.append(ws)
        hosted.idle_since = None

    async def detach(self, hosted: HostedSession, ws: WebSocket) -> None:
        """Forget *ws*; the last client leaving pauses the tick loop."""
        if ws in hosted.sockets:
            hosted.sockets.remove(ws)
        if not hosted.sockets:
            hosted.idle_since = time.monotonic()
            await self._stop(hosted)
            logger.info("Session %s idle; tick loop stopped.", hosted.session_id)

    def ensure_ticking(self, hosted: HostedSession) -> None:
        """Start the tick loop for *hosted* if it is not already running."""
        if hosted._task is None or hosted._task.done():
            hosted._task = asyncio.create_task(self._tick_loop(hosted))

    async def queue_buttons(
        self, hosted: HostedSession, buttons: Iterable[Button],
    ) -> None:
        """Record buttons to be delivered on the session's next tick."""
        async with hosted.lock:
            hosted.pending.update(buttons)

    async def _tick_loop(self, hosted: HostedSession) -> None:
        """Tick the session at its configured rate, broadcasting renders."""
        tick_interval = hosted.config.tick_rate_ms / 1000.0
        try:
            while True:
                await asyncio.sleep(tick_interval)
                async with hosted.lock:
                    pressed, hosted.pending = hosted.pending, set()
                    rows = hosted.game.tick(pressed)
                if rows is not None:
                    await self._broadcast(hosted, hosted.frame())
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", hosted.session_id)
        except Exception:
            logger.exception(
                "Tick loop error in session %s.", hosted.session_id,
            )

    async def _broadcast(self, hosted: HostedSession, frame: dict) -> None:
        """Send a frame to every connected client, dropping dead sockets."""
        payload = json.dumps(frame, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(hosted.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in hosted.sockets:
                hosted.sockets.remove(ws)

    async def _stop(self, hosted: HostedSession) -> None:
        task = hosted._task
        hosted._task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def _close_connections(self, hosted: HostedSession) -> None:
        for ws in list(hosted.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing socket in session %s.", hosted.session_id,
                )
        hosted.sockets.clear()

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        for hosted in list(self._sessions.values()):
            await self._stop(hosted)
        logger.info("SessionManager cleanup complete.")
