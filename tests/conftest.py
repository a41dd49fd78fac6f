"""Shared fixtures: the application on a throwaway SQLite database per test."""

import os

os.environ.setdefault("ENV", "test")

from collections.abc import Awaitable, Callable, Iterator  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from imagehoster.core.database import AsyncDBPool  # noqa: E402
from imagehoster.main import app  # noqa: E402
from imagehoster.main_config import DatabaseConfig  # noqa: E402

PASSWORD = "abc@123"
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR fake image body"


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """App client whose lifespan creates a fresh SQLite schema under tmp_path."""
    config = DatabaseConfig(dsn=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", create_schema=True)
    monkeypatch.setattr("imagehoster.core.lifespan.database_config", config)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_call(client: TestClient) -> Callable[[Callable[[AsyncSession], Awaitable[Any]]], Any]:
    """Run ``fn(session)`` on the app's event loop and return its result."""

    async def _run(fn: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async with AsyncDBPool.get_session() as session:
            result = await fn(session)
            await session.commit()
            return result

    def call(fn: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        return client.portal.call(_run, fn)

    return call


def register(client: TestClient, username: str, password: str = PASSWORD, **profile: str):
    data = {"username": username, "password": password, **profile}
    return client.post("/users/registration", data=data, follow_redirects=False)


def login(client: TestClient, username: str, password: str = PASSWORD):
    return client.post(
        "/users/login", data={"username": username, "password": password}, follow_redirects=False
    )


def logout(client: TestClient):
    return client.post("/users/logout")


def upload(
    client: TestClient,
    title: str = "Sunset",
    tags: str = "",
    description: str = "Evening sky",
    filename: str = "sunset.png",
    content: bytes = PNG_BYTES,
):
    return client.post(
        "/images/upload",
        data={"title": title, "description": description, "tags": tags},
        files={"file": (filename, content, "image/png")},
        follow_redirects=False,
    )


@pytest.fixture
def logged_in(client: TestClient) -> TestClient:
    """Client with a registered user ``alice`` logged in."""
    register(client, "alice", full_name="Alice Doe", email_address="alice@example.com")
    login(client, "alice")
    return client
