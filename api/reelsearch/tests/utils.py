"""Shared fakes for pipeline and client tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from reelsearch.ingestion.base import (
    BaseMetadataClient,
    MetadataError,
    MovieDetail,
    SearchCandidate,
)


def make_detail(
    identifier: str,
    *,
    title: str | None = None,
    poster_url: str | None = None,
    rating_value: str = "7.0",
) -> MovieDetail:
    return MovieDetail(
        identifier=identifier,
        title=title or f"Movie {identifier}",
        year="2010",
        genre="Drama",
        plot="A plot.",
        poster_url=poster_url if poster_url is not None else f"https://img.example.com/{identifier}.jpg",
        rating_value=rating_value,
    )


def make_candidates(*identifiers: str) -> list[SearchCandidate]:
    return [SearchCandidate(identifier=ident, title=f"Movie {ident}", year="2010") for ident in identifiers]


@dataclass
class FakeMetadataClient(BaseMetadataClient):
    """In-memory metadata client with per-identifier delays and failures."""

    candidates: list[SearchCandidate] = field(default_factory=list)
    details: dict[str, MovieDetail] = field(default_factory=dict)
    failures: dict[str, MetadataError] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    search_error: MetadataError | None = None
    search_calls: list[str] = field(default_factory=list)
    fetch_calls: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    source_name: str = "fake"

    async def search(self, title: str) -> list[SearchCandidate]:
        self.search_calls.append(title)
        if self.search_error is not None:
            raise self.search_error
        return list(self.candidates)

    async def fetch_details(self, identifier: str) -> MovieDetail:
        self.fetch_calls.append(identifier)
        delay = self.delays.get(identifier)
        if delay:
            await asyncio.sleep(delay)
        self.completed.append(identifier)
        if identifier in self.failures:
            raise self.failures[identifier]
        return self.details[identifier]


@dataclass
class FakeValidator:
    """Poster verifier that answers from a URL -> bool map (default True)."""

    results: dict[str, bool] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def verify(self, poster_url: str) -> bool:
        self.calls.append(poster_url)
        delay = self.delays.get(poster_url)
        if delay:
            await asyncio.sleep(delay)
        return self.results.get(poster_url, True)


def build_response(url: str, *, status: int = 200, json_data: Any | None = None, params: dict | None = None) -> httpx.Response:
    request = httpx.Request("GET", url, params=params)
    return httpx.Response(status_code=status, json=json_data if json_data is not None else {}, request=request)


def make_async_client(
    handler: Callable[[str, dict | None], httpx.Response], call_log: list[tuple[str, dict | None]]
) -> type:
    """Return a stand-in for ``httpx.AsyncClient`` routing GETs to ``handler``."""

    class DummyAsyncClient:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            self.kwargs = kwargs

        async def __aenter__(self) -> "DummyAsyncClient":
            return self

        async def __aexit__(self, *args: Any) -> bool:
            return False

        async def get(self, url: str, *, params: dict | None = None, headers: dict | None = None) -> httpx.Response:
            call_log.append((url, params))
            return handler(url, params)

    return DummyAsyncClient


_RealAsyncClient = httpx.AsyncClient


def make_transport_client(handler: Callable[[httpx.Request], httpx.Response]) -> Callable[..., httpx.AsyncClient]:
    """Return an ``httpx.AsyncClient`` factory whose requests go to a ``MockTransport``."""

    def factory(*args: Any, **kwargs: Any) -> httpx.AsyncClient:
        return _RealAsyncClient(*args, transport=httpx.MockTransport(handler), **kwargs)

    return factory
