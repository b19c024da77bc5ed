"""REST API endpoint tests."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.websockets import WebSocketState

from glyph_snake.config import GameConfig
from glyph_snake.server.app import create_app
from glyph_snake.server.session_manager import SessionManager

BASE = "http://test"


class _LiveSocket:
    """Stand-in client whose connection is open at both ends."""

    application_state = WebSocketState.CONNECTED
    client_state = WebSocketState.CONNECTED


@pytest.fixture()
def app():
    application = create_app()
    application.state.session_manager = SessionManager()
    return application


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_create_default(self, client):
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 201
        data = resp.json()
        assert data["height"] == 8
        assert data["width"] == 10
        assert data["step_cadence"] == 30
        assert data["running"] is False
        assert data["connected"] == 0
        assert "session_id" in data

    @pytest.mark.asyncio
    async def test_create_custom(self, client):
        resp = await client.post("/sessions", json={
            "height": 12, "width": 20, "step_cadence": 5,
            "seed": 4, "tick_rate_ms": 50,
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["height"] == 12
        assert data["width"] == 20
        assert data["tick_rate_ms"] == 50

    @pytest.mark.asyncio
    async def test_create_too_small(self, client):
        resp = await client.post("/sessions", json={"height": 3})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_bad_cadence(self, client):
        resp = await client.post("/sessions", json={"step_cadence": 0})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_idle_session_replaced_at_limit(self, app, client):
        app.state.session_manager = SessionManager(max_sessions=1)
        first = (await client.post("/sessions", json={})).json()
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 201
        listed = (await client.get("/sessions")).json()
        assert [s["session_id"] for s in listed] == [resp.json()["session_id"]]
        assert first["session_id"] != resp.json()["session_id"]

    @pytest.mark.asyncio
    async def test_session_limit_with_live_clients(self, app, client):
        manager = SessionManager(max_sessions=1)
        app.state.session_manager = manager
        first = (await client.post("/sessions", json={})).json()
        manager.attach(manager.get_session(first["session_id"]), _LiveSocket())
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 409
        assert "limit" in resp.json()["detail"]


class TestListSessions:
    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        resp = await client.get("/sessions")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_list_after_create(self, client):
        await client.post("/sessions", json={})
        await client.post("/sessions", json={})
        resp = await client.get("/sessions")
        assert len(resp.json()) == 2


class TestGetSession:
    @pytest.mark.asyncio
    async def test_get_includes_state(self, client):
        created = (await client.post("/sessions", json={"seed": 1})).json()
        resp = await client.get(f"/sessions/{created['session_id']}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] == created["session_id"]
        state = data["state"]
        assert state["running"] is False
        assert len(state["rows"]) == 8
        assert state["snake"]["segments"] == [[3, 5], [2, 5], [1, 5]]

    @pytest.mark.asyncio
    async def test_get_unknown(self, client):
        resp = await client.get("/sessions/nope")
        assert resp.status_code == 404


class TestDeleteSession:
    @pytest.mark.asyncio
    async def test_delete(self, client):
        created = (await client.post("/sessions", json={})).json()
        sid = created["session_id"]
        resp = await client.delete(f"/sessions/{sid}")
        assert resp.status_code == 204
        assert (await client.get(f"/sessions/{sid}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown(self, client):
        resp = await client.delete("/sessions/nope")
        assert resp.status_code == 404


class TestSessionManager:
    def test_invalid_max_sessions(self):
        with pytest.raises(ValueError, match="at least 1"):
            SessionManager(max_sessions=0)


class _IdleSocket:
    """Stand-in client that is never written to."""


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_last_client_leaving_stops_ticks(self):
        manager = SessionManager()
        hosted = manager.create_session(GameConfig(seed=0, tick_rate_ms=5))
        ws = _IdleSocket()
        manager.attach(hosted, ws)
        assert hosted.idle_since is None
        manager.ensure_ticking(hosted)
        task = hosted._task

        await manager.detach(hosted, ws)
        assert task.done()
        assert hosted._task is None
        assert hosted.idle_since is not None
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_oldest_idle_session_evicted_at_capacity(self):
        manager = SessionManager(max_sessions=2)
        older = manager.create_session(GameConfig(seed=0))
        newer = manager.create_session(GameConfig(seed=1))
        older.idle_since, newer.idle_since = 1.0, 2.0

        latest = manager.create_session(GameConfig(seed=2))
        assert manager.get_session(older.session_id) is None
        assert manager.get_session(newer.session_id) is newer
        assert manager.get_session(latest.session_id) is latest
