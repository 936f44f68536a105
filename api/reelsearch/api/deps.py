from fastapi import HTTPException, status

from reelsearch.ingestion import get_client
from reelsearch.ingestion.base import BaseMetadataClient
from reelsearch.ingestion.http import ExternalAPIError
from reelsearch.ingestion.posters import PosterValidator
from reelsearch.services.gallery_service import GalleryAssembler


def get_metadata_client() -> BaseMetadataClient:
    try:
        return get_client("omdb")
    except ExternalAPIError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def get_assembler() -> GalleryAssembler:
    """Build a fresh assembler per request so runs never share working state."""
    return GalleryAssembler(get_metadata_client(), PosterValidator())
