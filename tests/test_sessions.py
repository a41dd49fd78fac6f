"""Server-side HTTP session store."""

from datetime import UTC, datetime, timedelta

from fastapi import Response, status
from fastapi.testclient import TestClient
from sqlalchemy import select
from starlette.requests import Request

from imagehoster.core.sessions import SESSION_USER_KEY, HttpSession, HttpSessionStore, hash_token
from imagehoster.main_config import SessionConfig, session_config
from imagehoster.models import HttpSessionRecord

CONFIG = SessionConfig(cookie_name="TEST_SESSION", max_age_seconds=60)


def _request(token: str | None = None) -> Request:
    headers = [(b"cookie", f"{CONFIG.cookie_name}={token}".encode())] if token else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def test_http_session_tracks_modifications() -> None:
    http_session = HttpSession(token=None)
    assert http_session.is_new
    assert not http_session.modified

    http_session[SESSION_USER_KEY] = {"id": 1}
    assert http_session.modified
    assert SESSION_USER_KEY in http_session
    assert len(http_session) == 1

    del http_session[SESSION_USER_KEY]
    assert http_session.get(SESSION_USER_KEY) is None


def test_session_id_is_token_digest() -> None:
    http_session = HttpSession(token="abc")
    assert http_session.session_id == hash_token("abc")
    assert len(http_session.session_id) == 64


def test_empty_new_session_is_not_stored(client: TestClient, db_call) -> None:
    async def fn(session):
        store = HttpSessionStore(session, CONFIG)
        http_session = await store.load(_request())
        response = Response()
        await store.save(http_session, response)
        return http_session, response

    http_session, response = db_call(fn)
    assert http_session.token is None
    assert "set-cookie" not in response.headers


def test_save_then_load_round_trip(client: TestClient, db_call) -> None:
    async def save(session):
        store = HttpSessionStore(session, CONFIG)
        http_session = await store.load(_request())
        http_session["cart"] = [1, 2]
        response = Response()
        await store.save(http_session, response)
        return http_session.token, response.headers["set-cookie"]

    token, cookie = db_call(save)
    assert cookie.startswith(f"{CONFIG.cookie_name}={token}")
    assert "httponly" in cookie.lower()

    async def load(session):
        return await HttpSessionStore(session, CONFIG).load(_request(token))

    loaded = db_call(load)
    assert loaded.token == token
    assert loaded["cart"] == [1, 2]


def test_expired_session_is_discarded(client: TestClient, db_call) -> None:
    token = "expired-token"

    async def seed(session):
        session.add(
            HttpSessionRecord(
                id=hash_token(token),
                data={SESSION_USER_KEY: {"id": 1, "username": "alice"}},
                expires_at=datetime.now(UTC) - timedelta(seconds=1),
            )
        )

    db_call(seed)

    async def load(session):
        return await HttpSessionStore(session, CONFIG).load(_request(token))

    loaded = db_call(load)
    assert loaded.is_new
    assert SESSION_USER_KEY not in loaded
    assert loaded.discarded_expired


def test_purge_expired_keeps_live_sessions(client: TestClient, db_call) -> None:
    now = datetime.now(UTC)

    async def seed(session):
        session.add_all(
            [
                HttpSessionRecord(id="a" * 64, data={}, expires_at=now - timedelta(minutes=5)),
                HttpSessionRecord(id="b" * 64, data={}, expires_at=now + timedelta(minutes=5)),
            ]
        )

    db_call(seed)

    async def purge(session):
        removed = await HttpSessionStore(session, CONFIG).purge_expired()
        remaining = (await session.execute(select(HttpSessionRecord.id))).scalars().all()
        return removed, list(remaining)

    removed, remaining = db_call(purge)
    assert removed == 1
    assert remaining == ["b" * 64]


def test_expired_session_row_is_removed_by_page_visit(client: TestClient, db_call) -> None:
    token = "stale-token"

    async def seed(session):
        session.add(
            HttpSessionRecord(
                id=hash_token(token),
                data={SESSION_USER_KEY: {"id": 1, "username": "alice"}},
                expires_at=datetime.now(UTC) - timedelta(minutes=1),
            )
        )

    db_call(seed)
    client.cookies.set(session_config.cookie_name, token)

    response = client.get("/images", follow_redirects=False)

    assert response.status_code == status.HTTP_303_SEE_OTHER

    async def rows(session):
        return (await session.execute(select(HttpSessionRecord.id))).scalars().all()

    assert db_call(rows) == []
