"""Search, enrich, validate, and truncate movie results for the poster gallery.

Implementation notes:
- Fan-out stages use ``asyncio.gather``, which returns results in input order,
  so the surviving sequence always follows the search ranking.
- Per-candidate failures are absorbed as ``Dropped`` entries; only the search
  stage can fail a whole run.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from time import monotonic
from typing import Awaitable, Callable, Iterable, Protocol, Sequence, TypeVar, Union

from reelsearch.core.config import settings
from reelsearch.ingestion.base import (
    BaseMetadataClient,
    MetadataError,
    MetadataNotFoundError,
    MovieDetail,
    SearchCandidate,
)
from reelsearch.ingestion.observability import PipelineMonitor, pipeline_monitor

logger = logging.getLogger("reelsearch.services.gallery")

T = TypeVar("T")
R = TypeVar("R")

NOT_FOUND_MESSAGE = "No results found."
TRANSPORT_MESSAGE = "Error fetching movie data."


class InvalidQueryError(ValueError):
    """Raised for blank titles before any network call is made."""


class PosterVerifier(Protocol):
    async def verify(self, poster_url: str) -> bool: ...


class PipelineStage(str, enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    DETAIL_FETCHING = "detail_fetching"
    POSTER_VALIDATING = "poster_validating"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class ValidatedDetail:
    """A detail record whose poster passed image verification."""
    detail: MovieDetail

    def __getattr__(self, name: str):
        if name.startswith("__") or name == "detail":
            raise AttributeError(name)
        return getattr(self.detail, name)


@dataclass(frozen=True, slots=True)
class Fetched:
    detail: MovieDetail


@dataclass(frozen=True, slots=True)
class Dropped:
    identifier: str
    reason: str


DetailFetch = Union[Fetched, Dropped]


@dataclass(frozen=True)
class PipelineOutcome:
    kind = "outcome"


@dataclass(frozen=True)
class Results(PipelineOutcome):
    items: tuple[ValidatedDetail, ...] = ()
    truncated: bool = False
    validated_count: int = 0
    kind = "results"


@dataclass(frozen=True)
class EmptySearch(PipelineOutcome):
    kind = "empty_search"


@dataclass(frozen=True)
class NoUsablePosters(PipelineOutcome):
    kind = "no_usable_posters"


@dataclass(frozen=True)
class NoLoadablePosters(PipelineOutcome):
    kind = "no_loadable_posters"


@dataclass(frozen=True)
class SearchFailed(PipelineOutcome):
    message: str = TRANSPORT_MESSAGE
    reason: str = "transport"
    kind = "search_failed"


def drop_missing_posters(details: Iterable[MovieDetail]) -> list[MovieDetail]:
    """Keep details with a real poster URL, preserving order."""
    return [detail for detail in details if detail.has_poster]


def truncate_to_budget(
    validated: Sequence[ValidatedDetail], budget: int
) -> tuple[tuple[ValidatedDetail, ...], bool]:
    """Return the first ``budget`` items and whether anything was cut."""
    return tuple(validated[:budget]), len(validated) > budget


@dataclass
class RunReport:
    """Per-run diagnostics kept for logging and tests."""
    candidates: int = 0
    dropped: list[Dropped] = field(default_factory=list)
    without_poster: int = 0
    unloadable: int = 0
    stage_ms: dict[str, float] = field(default_factory=dict)


class GalleryAssembler:
    """Runs the search-resolve-validate pipeline for one query at a time."""

    def __init__(
        self,
        client: BaseMetadataClient,
        validator: PosterVerifier,
        *,
        display_budget: int | None = None,
        result_cap: int | None = None,
        max_concurrency: int | None = None,
        monitor: PipelineMonitor | None = None,
    ) -> None:
        self.client = client
        self.validator = validator
        self.display_budget = display_budget if display_budget is not None else settings.display_budget
        self.result_cap = result_cap if result_cap is not None else settings.search_result_cap
        if self.display_budget < 1 or self.result_cap < 1:
            raise ValueError("display_budget and result_cap must be positive")
        self.max_concurrency = max_concurrency if max_concurrency is not None else settings.max_concurrency
        self.monitor = monitor or pipeline_monitor
        self.state = PipelineStage.IDLE
        self.last_report: RunReport | None = None

    def _enter(self, stage: PipelineStage, title: str) -> None:
        self.state = stage
        logger.debug("Pipeline stage changed", extra={"stage": stage.value, "query": title})

    async def _gather_ordered(
        self, items: Sequence[T], func: Callable[[T], Awaitable[R]], semaphore: asyncio.Semaphore | None
    ) -> list[R]:
        async def _run(item: T) -> R:
            if semaphore is None:
                return await func(item)
            async with semaphore:
                return await func(item)

        return list(await asyncio.gather(*(_run(item) for item in items)))

    async def _fetch_one(self, candidate: SearchCandidate) -> DetailFetch:
        try:
            detail = await self.monitor.track(
                self.client.source_name,
                "fetch",
                lambda: self.client.fetch_details(candidate.identifier),
                context={"identifier": candidate.identifier},
            )
        except MetadataError as exc:
            return Dropped(identifier=candidate.identifier, reason=str(exc) or exc.__class__.__name__)
        except ValueError as exc:
            return Dropped(identifier=candidate.identifier, reason=str(exc))
        return Fetched(detail=detail)

    async def _verify_one(self, detail: MovieDetail) -> bool:
        try:
            return bool(await self.validator.verify(detail.poster_url))
        except Exception:  # noqa: BLE001
            # Validators should not raise; treat one that does as a failed load.
            logger.warning("Poster validator raised", extra={"identifier": detail.identifier}, exc_info=True)
            return False

    async def run(self, title: str) -> PipelineOutcome:
        """Resolve a title query into a single pipeline outcome."""
        query = (title or "").strip()
        if not query:
            raise InvalidQueryError("Please enter a movie title.")
        report = RunReport()
        self.last_report = report
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        started = monotonic()

        self._enter(PipelineStage.SEARCHING, query)
        try:
            candidates = await self.monitor.track(
                self.client.source_name,
                "search",
                lambda: self.client.search(query),
                context={"query": query},
            )
        except MetadataNotFoundError:
            return self._finish(query, SearchFailed(message=NOT_FOUND_MESSAGE, reason="not_found"), started)
        except MetadataError:
            return self._finish(query, SearchFailed(message=TRANSPORT_MESSAGE, reason="transport"), started)
        candidates = list(candidates)[: self.result_cap]
        report.candidates = len(candidates)
        report.stage_ms["search"] = round((monotonic() - started) * 1000, 2)
        if not candidates:
            return self._finish(query, EmptySearch(), started)

        self._enter(PipelineStage.DETAIL_FETCHING, query)
        stage_start = monotonic()
        fetches = await self._gather_ordered(candidates, self._fetch_one, semaphore)
        report.stage_ms["details"] = round((monotonic() - stage_start) * 1000, 2)
        details: list[MovieDetail] = []
        for fetch in fetches:
            if isinstance(fetch, Dropped):
                report.dropped.append(fetch)
                logger.info(
                    "Candidate dropped",
                    extra={"query": query, "identifier": fetch.identifier, "reason": fetch.reason},
                )
            else:
                details.append(fetch.detail)
        with_posters = drop_missing_posters(details)
        report.without_poster = len(details) - len(with_posters)
        if not with_posters:
            return self._finish(query, NoUsablePosters(), started)

        self._enter(PipelineStage.POSTER_VALIDATING, query)
        stage_start = monotonic()
        loaded = await self._gather_ordered(with_posters, self._verify_one, semaphore)
        report.stage_ms["posters"] = round((monotonic() - stage_start) * 1000, 2)
        validated = [ValidatedDetail(detail) for detail, ok in zip(with_posters, loaded) if ok]
        report.unloadable = len(with_posters) - len(validated)
        if not validated:
            return self._finish(query, NoLoadablePosters(), started)

        items, truncated = truncate_to_budget(validated, self.display_budget)
        return self._finish(
            query, Results(items=items, truncated=truncated, validated_count=len(validated)), started
        )

    def _finish(self, query: str, outcome: PipelineOutcome, started: float) -> PipelineOutcome:
        self.state = PipelineStage.DONE
        report = self.last_report or RunReport()
        logger.info(
            "Gallery search completed",
            extra={
                "query": query,
                "outcome": outcome.kind,
                "candidates": report.candidates,
                "dropped": len(report.dropped),
                "without_poster": report.without_poster,
                "unloadable": report.unloadable,
                "returned": len(outcome.items) if isinstance(outcome, Results) else 0,
                "stage_ms": report.stage_ms,
                "total_ms": round((monotonic() - started) * 1000, 2),
            },
        )
        return outcome
