from __future__ import annotations

from typing import Any

from reelsearch.core.config import settings
from reelsearch.ingestion.base import (
    NOT_AVAILABLE,
    BaseMetadataClient,
    MetadataNotFoundError,
    MetadataTransportError,
    MovieDetail,
    SearchCandidate,
)
from reelsearch.ingestion.http import ExternalAPIError, TransportError, fetch_json

SEARCH_NOT_FOUND_MESSAGE = "No results found."
DETAIL_NOT_FOUND_MESSAGE = "No details found."


def _text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return NOT_AVAILABLE
    return str(value).strip() or NOT_AVAILABLE


def _succeeded(payload: dict[str, Any]) -> bool:
    return str(payload.get("Response", "")).strip().lower() == "true"


class OMDbClient(BaseMetadataClient):
    source_name = "omdb"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        result_cap: int | None = None,
    ) -> None:
        self.api_key = api_key or settings.omdb_api_key
        if not self.api_key:
            raise ExternalAPIError("OMDb API key missing; set OMDB_API_KEY")
        self.base_url = base_url or settings.omdb_base_url
        self.timeout = timeout if timeout is not None else settings.omdb_timeout_seconds
        self.result_cap = result_cap if result_cap is not None else settings.search_result_cap
        if self.result_cap < 1:
            raise ValueError("result_cap must be positive")

    def search_params(self, title: str) -> dict[str, str]:
        cleaned = title.strip()
        if not cleaned:
            raise ValueError("Search title must not be empty")
        return {"apikey": self.api_key, "s": cleaned}

    def detail_params(self, identifier: str) -> dict[str, str]:
        token = self.parse_identifier(identifier)
        if not token:
            raise ValueError("Identifier must not be empty")
        return {"apikey": self.api_key, "i": token}

    async def _request(self, params: dict[str, str]) -> dict[str, Any]:
        try:
            return await fetch_json(self.base_url, params=params, timeout=self.timeout)
        except TransportError as exc:
            raise MetadataTransportError(str(exc)) from exc

    async def search(self, title: str) -> list[SearchCandidate]:
        payload = await self._request(self.search_params(title))
        if not _succeeded(payload):
            raise MetadataNotFoundError(payload.get("Error") or SEARCH_NOT_FOUND_MESSAGE)
        results = payload.get("Search") or []
        if not isinstance(results, list):
            raise MetadataTransportError("OMDb search payload is not a list")
        candidates: list[SearchCandidate] = []
        for entry in results:
            if not isinstance(entry, dict):
                continue
            identifier = str(entry.get("imdbID") or "").strip()
            if not identifier:
                continue
            candidates.append(
                SearchCandidate(
                    identifier=identifier,
                    title=_text(entry, "Title"),
                    year=_text(entry, "Year"),
                    kind=entry.get("Type"),
                )
            )
            if len(candidates) >= self.result_cap:
                break
        return candidates

    async def fetch_details(self, identifier: str) -> MovieDetail:
        params = self.detail_params(identifier)
        payload = await self._request(params)
        if not _succeeded(payload):
            raise MetadataNotFoundError(payload.get("Error") or DETAIL_NOT_FOUND_MESSAGE)
        return MovieDetail(
            identifier=str(payload.get("imdbID") or params["i"]),
            title=_text(payload, "Title"),
            year=_text(payload, "Year"),
            genre=_text(payload, "Genre"),
            plot=_text(payload, "Plot"),
            poster_url=_text(payload, "Poster"),
            rating_value=_text(payload, "imdbRating"),
        )
