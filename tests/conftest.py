"""Shared test fixtures."""
from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.main import create_app
from core.config import Settings
from services.bookmark_store import BookmarkStore


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the local .env, without the DNS-based URL guard."""
    return Settings(
        _env_file=None,
        block_private_urls=False,
        log_level="WARNING",
    )


@pytest.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI]:
    """A fresh application with its lifespan running (new store per test)."""
    application = create_app(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the test application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def store() -> BookmarkStore:
    """An empty standalone store."""
    return BookmarkStore()
