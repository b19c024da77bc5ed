"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    height: int = Field(default=8, ge=4, le=64)
    width: int = Field(default=10, ge=4, le=64)
    step_cadence: int = Field(default=30, ge=1)
    seed: int | None = None
    tick_rate_ms: int = Field(default=16, ge=5, le=2000)


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    height: int
    width: int
    step_cadence: int
    tick_rate_ms: int
    running: bool
    score: int
    connected: int
