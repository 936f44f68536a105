"""Base client primitives and record types for movie metadata sources."""

from __future__ import annotations

from dataclasses import dataclass

from reelsearch.ingestion.http import ExternalAPIError

NOT_AVAILABLE = "N/A"


class MetadataError(ExternalAPIError):
    """Failure reported by, or while talking to, a metadata source."""


class MetadataNotFoundError(MetadataError):
    """The upstream answered but signaled no match."""


class MetadataTransportError(MetadataError):
    """The request failed before a usable answer arrived."""


@dataclass(frozen=True, slots=True)
class SearchCandidate:
    """Lightweight search hit prior to detail enrichment."""
    identifier: str
    title: str
    year: str
    kind: str | None = None


@dataclass(frozen=True, slots=True)
class MovieDetail:
    """Full metadata for one title.

    ``poster_url`` and ``rating_value`` keep the upstream "N/A" sentinel as-is.
    """
    identifier: str
    title: str
    year: str
    genre: str
    plot: str
    poster_url: str
    rating_value: str

    @property
    def has_poster(self) -> bool:
        url = self.poster_url.strip()
        return bool(url) and url != NOT_AVAILABLE


class BaseMetadataClient:
    """Abstract client interface for movie metadata sources."""
    source_name: str

    def parse_identifier(self, identifier: str) -> str:
        """Normalize external identifiers before lookup."""
        return identifier.strip()

    async def search(self, title: str) -> list[SearchCandidate]:
        """Return ranked candidates for a title query."""
        raise NotImplementedError

    async def fetch_details(self, identifier: str) -> MovieDetail:
        """Fetch the full detail record for one identifier."""
        raise NotImplementedError
