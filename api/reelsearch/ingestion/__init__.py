"""Client registry for movie metadata sources."""

from __future__ import annotations

from typing import Dict

from reelsearch.ingestion.base import BaseMetadataClient
from reelsearch.ingestion.omdb import OMDbClient

_CLIENTS: Dict[str, BaseMetadataClient] = {}


def get_client(source: str = "omdb") -> BaseMetadataClient:
    """Return a client instance for the given source name."""
    key = source.lower()
    if key not in _CLIENTS:
        if key == "omdb":
            _CLIENTS[key] = OMDbClient()
        else:
            raise ValueError(f"Unsupported source {source}")
    return _CLIENTS[key]
