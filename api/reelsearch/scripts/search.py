"""Run one gallery search from the command line and print the cards."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from reelsearch.core.config import settings
from reelsearch.ingestion import get_client
from reelsearch.ingestion.http import ExternalAPIError
from reelsearch.ingestion.posters import PosterValidator
from reelsearch.schema.gallery import GalleryResponse
from reelsearch.services.gallery_service import GalleryAssembler, InvalidQueryError
from reelsearch.services.presentation import render_outcome

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"

EXIT_RESULTS = 0
EXIT_NO_RESULTS = 1
EXIT_INVALID = 2
EXIT_CONFIG = 3


def _format_text(view: GalleryResponse) -> str:
    if not view.cards:
        return view.message or "No results."
    lines: list[str] = []
    for card in view.cards:
        lines.append(f"{card.title} ({card.year}) [{card.imdb_id}]")
        lines.append(f"  {card.genre} | IMDb {card.rating} ({card.rating_tier.value})")
        lines.append(f"  {card.poster_url}")
    if view.notice:
        lines.append(view.notice)
    return "\n".join(lines)


async def search(title: str, *, assembler: GalleryAssembler | None = None) -> GalleryResponse:
    assembler = assembler or GalleryAssembler(get_client("omdb"), PosterValidator())
    outcome = await assembler.run(title)
    return render_outcome(title.strip(), outcome)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Search OMDb and list movies with loadable posters")
    parser.add_argument("title", help="Movie title to search for")
    parser.add_argument("--json", action="store_true", help="Print the gallery response as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, stream=sys.stderr)
    try:
        view = asyncio.run(search(args.title))
    except InvalidQueryError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_INVALID
    except ExternalAPIError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG

    if args.json:
        print(json.dumps(view.model_dump(mode="json"), indent=2))
    else:
        print(_format_text(view))
    return EXIT_RESULTS if view.cards else EXIT_NO_RESULTS


if __name__ == "__main__":
    raise SystemExit(main())
