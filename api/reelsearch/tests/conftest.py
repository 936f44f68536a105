"""Shared pytest fixtures for pipeline and API tests."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from reelsearch import ingestion
from reelsearch.core.config import settings
from reelsearch.ingestion.observability import pipeline_monitor
from reelsearch.main import app


@pytest.fixture(autouse=True)
def _configure_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "omdb_api_key", "test-key")
    monkeypatch.setattr(settings, "display_budget", 9)
    monkeypatch.setattr(settings, "search_result_cap", 15)
    monkeypatch.setattr(settings, "max_concurrency", None)
    monkeypatch.setattr(ingestion, "_CLIENTS", {})


@pytest.fixture(autouse=True)
def _reset_monitor():
    pipeline_monitor.reset()
    yield
    pipeline_monitor.reset()


@pytest_asyncio.fixture()
async def client() -> AsyncClient:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()
