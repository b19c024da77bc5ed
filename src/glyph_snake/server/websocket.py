"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from glyph_snake.server.session_manager import SessionManager
from glyph_snake.snake import Button

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _parse_buttons(raw: str) -> set[Button]:
    """Extract known buttons from a client message; anything else is ignored."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return set()
    if not isinstance(msg, dict):
        return set()

    names = msg.get("buttons")
    if not isinstance(names, list):
        return set()

    buttons: set[Button] = set()
    for name in names:
        if not isinstance(name, str):
            continue
        try:
            buttons.add(Button(name.lower()))
        except ValueError:
            continue
    return buttons


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send buttons, receive a frame after each render."""
    manager = _get_manager(websocket)
    hosted = manager.get_session(session_id)
    if hosted is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    manager.attach(hosted, websocket)
    logger.info("Client connected to session %s.", session_id)

    try:
        # Send the current board so the client has something to draw.
        await websocket.send_text(
            json.dumps(hosted.frame(), separators=(",", ":")),
        )
        manager.ensure_ticking(hosted)

        while True:
            buttons = _parse_buttons(await websocket.receive_text())
            if Button.EXIT in buttons:
                await websocket.close(code=1000, reason="Exit requested.")
                break
            if buttons:
                await manager.queue_buttons(hosted, buttons)
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    finally:
        await manager.detach(hosted, websocket)
