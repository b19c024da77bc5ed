"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from glyph_snake.config import GameConfig
from glyph_snake.errors import ConfigError
from glyph_snake.server.models import CreateSessionRequest, SessionSummary

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request):
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new game session."""
    manager = _get_manager(request)
    try:
        config = GameConfig(
            height=body.height,
            width=body.width,
            step_cadence=body.step_cadence,
            seed=body.seed,
            tick_rate_ms=body.tick_rate_ms,
        )
    except ConfigError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    try:
        hosted = manager.create_session(config)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return hosted.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List all hosted sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the full game snapshot."""
    hosted = _get_manager(request).get_session(session_id)
    if hosted is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    result = hosted.summary().model_dump()
    result["state"] = hosted.game.snapshot()
    return result


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> None:
    """Stop and forget a session."""
    try:
        await _get_manager(request).remove_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
