from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from reelsearch.api.deps import get_assembler
from reelsearch.schema.gallery import GalleryResponse
from reelsearch.services.gallery_service import GalleryAssembler, InvalidQueryError
from reelsearch.services.presentation import render_outcome

router = APIRouter()


@router.get("", response_model=GalleryResponse)
async def search(
    q: str = Query(default="", max_length=200),
    assembler: GalleryAssembler = Depends(get_assembler),
) -> GalleryResponse:
    """Search OMDb by title and return validated poster cards."""
    try:
        outcome = await assembler.run(q)
    except InvalidQueryError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return render_outcome(q.strip(), outcome)
