"""Last-run-wins coordination for interactive gallery searches."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from reelsearch.services.gallery_service import GalleryAssembler, InvalidQueryError, PipelineOutcome

logger = logging.getLogger("reelsearch.services.run_coordinator")


class RunSuperseded(Exception):
    """Raised to the awaiter of a run that a newer submission replaced."""

    def __init__(self, title: str) -> None:
        super().__init__(f"Search for {title!r} was superseded by a newer query")
        self.title = title


class RunCoordinator:
    """Owns at most one in-flight pipeline run; a new submission cancels the old one.

    This is the entry point for interactive embedders (a UI or a long-lived
    session that re-queries as the user types). The HTTP route and the CLI
    serve one independent query per call and use ``GalleryAssembler`` directly.
    Each run gets a fresh assembler so no working state is shared between runs.
    """

    def __init__(self, assembler_factory: Callable[[], GalleryAssembler]) -> None:
        self._assembler_factory = assembler_factory
        self._current: asyncio.Task[PipelineOutcome] | None = None

    @property
    def active(self) -> bool:
        return self._current is not None and not self._current.done()

    async def submit(self, title: str) -> PipelineOutcome:
        if not (title or "").strip():
            raise InvalidQueryError("Please enter a movie title.")
        previous = self._current
        task = asyncio.create_task(self._assembler_factory().run(title))
        self._current = task
        if previous is not None and not previous.done():
            logger.info("Cancelling superseded search", extra={"query": title})
            previous.cancel()
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled() and self._current is not task:
                raise RunSuperseded(title) from None
            raise
        finally:
            if self._current is task:
                self._current = None

    async def cancel(self) -> None:
        """Cancel the in-flight run, if any, and wait for it to unwind."""
        task = self._current
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:  # noqa: BLE001
            logger.debug("Cancelled run raised during unwind", exc_info=True)
