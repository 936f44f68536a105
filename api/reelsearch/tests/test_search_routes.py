"""Tests for the gallery search route and its error mapping."""

from __future__ import annotations

import pytest

from reelsearch.api.deps import get_assembler
from reelsearch.core.config import settings
from reelsearch.ingestion.base import MetadataNotFoundError
from reelsearch.main import app
from reelsearch.services.gallery_service import GalleryAssembler
from reelsearch.tests.utils import FakeMetadataClient, FakeValidator, make_candidates, make_detail


def _override(client: FakeMetadataClient, validator: FakeValidator | None = None) -> None:
    app.dependency_overrides[get_assembler] = lambda: GalleryAssembler(client, validator or FakeValidator())


@pytest.mark.asyncio
async def test_search_returns_cards(client) -> None:
    detail = make_detail(
        "tt1375666",
        title="Inception",
        poster_url="https://m.media-amazon.com/images/M/poster.jpg",
        rating_value="8.8",
    )
    _override(FakeMetadataClient(candidates=make_candidates("tt1375666"), details={"tt1375666": detail}))

    response = await client.get("/api/search", params={"q": " Inception "})

    assert response.status_code == 200
    payload = response.json()
    assert payload["query"] == "Inception"
    assert payload["status"] == "results"
    assert payload["truncated"] is False
    assert payload["notice"] is None
    card = payload["cards"][0]
    assert card["imdb_id"] == "tt1375666"
    assert card["rating_tier"] == "high"
    assert card["rating_color"] == "#4CAF50"


@pytest.mark.asyncio
async def test_search_reports_truncation(client) -> None:
    identifiers = [f"tt{i:02d}" for i in range(12)]
    _override(
        FakeMetadataClient(
            candidates=make_candidates(*identifiers),
            details={ident: make_detail(ident) for ident in identifiers},
        )
    )

    response = await client.get("/api/search", params={"q": "Star Wars"})

    payload = response.json()
    assert [card["imdb_id"] for card in payload["cards"]] == identifiers[:9]
    assert payload["truncated"] is True
    assert payload["notice"] == "Only 9 of 12 movies shown."


@pytest.mark.asyncio
async def test_search_failure_is_a_normal_response(client) -> None:
    _override(FakeMetadataClient(search_error=MetadataNotFoundError("Movie not found!")))

    response = await client.get("/api/search", params={"q": "Zzzznotamovie123"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "search_failed"
    assert payload["message"] == "No results found."
    assert payload["cards"] == []


@pytest.mark.asyncio
async def test_blank_query_is_rejected(client) -> None:
    search_client = FakeMetadataClient()
    _override(search_client)

    response = await client.get("/api/search", params={"q": "   "})

    assert response.status_code == 422
    assert response.json()["detail"] == "Please enter a movie title."
    assert search_client.search_calls == []


@pytest.mark.asyncio
async def test_missing_api_key_returns_503(client, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "omdb_api_key", None)

    response = await client.get("/api/search", params={"q": "Inception"})

    assert response.status_code == 503
    assert "OMDB_API_KEY" in response.json()["detail"]
