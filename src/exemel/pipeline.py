"""Cleaning pipeline: runs the cleaner stages over one piece of candidate text."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .cleaners.added_root import AddedRootCleaner
from .cleaners.base import BaseCleaner
from .cleaners.format import FormatCleaner
from .cleaners.surrounding_garbage import SurroundingGarbageCleaner, markup_span
from .cleaners.visual_studio import VisualStudioCleaner, VisualStudioVBScriptCleaner
from .cleaners.whitespace import NewLineCleaner, TrimCleaner
from .config import Settings, get_settings
from .models import CleaningContext, CleanOutcome, CleanResult

logger = logging.getLogger(__name__)

StatusSink = Callable[[str], None]


def default_cleaners(settings: Settings) -> List[BaseCleaner]:
    """The stage order every clean request goes through."""
    return [
        TrimCleaner(settings),
        NewLineCleaner(settings),
        SurroundingGarbageCleaner(settings),
        VisualStudioCleaner(settings),
        VisualStudioVBScriptCleaner(settings),
        AddedRootCleaner(settings),
        FormatCleaner(settings),
    ]


def should_clean(text: str) -> bool:
    """Cheap gate: some ``<`` must come before the last ``>``."""
    return markup_span(text) is not None


class CleaningPipeline:
    """Fixed, ordered sequence of cleaner stages with early exit on error."""

    def __init__(
        self,
        stages: Optional[Sequence[BaseCleaner]] = None,
        settings: Settings | None = None,
        status_sink: Optional[StatusSink] = None,
    ):
        self.settings = settings or get_settings()
        self.stages = tuple(stages) if stages is not None else tuple(default_cleaners(self.settings))
        self.status_sink = status_sink

    def run(self, context: CleaningContext) -> CleaningContext:
        """Apply each stage in order, stopping at the first error message."""
        for stage in self.stages:
            context = stage.clean(context)
            if context.halted:
                logger.debug("Stage %s halted the pipeline: %s", stage.name, context.error_message)
                break
            logger.debug("Stage %s done (%d chars)", stage.name, len(context.working_text))
        return context

    def clean(self, raw_text: str) -> CleanResult:
        """Clean ``raw_text`` and report exactly one status message."""
        result = self._classify(raw_text)
        logger.info("Clean finished: %s (%s)", result.outcome.value, result.message)
        if self.status_sink is not None:
            self.status_sink(result.message)
        return result

    def _classify(self, raw_text: str) -> CleanResult:
        if not should_clean(raw_text):
            return CleanResult(
                outcome=CleanOutcome.UNCHANGED,
                text=raw_text,
                message=self.settings.status_skipped,
            )

        context = self.run(CleaningContext.start(raw_text))
        if context.halted:
            return CleanResult(
                outcome=CleanOutcome.FAILED,
                text=context.working_text,
                message=context.error_message,
                diagnostic=context.error_message,
            )
        if context.parsed_result is not None:
            return CleanResult(
                outcome=CleanOutcome.CLEANED,
                text=context.working_text,
                parsed=True,
                message=self.settings.status_parsed,
            )
        return CleanResult(
            outcome=CleanOutcome.CLEANED,
            text=context.working_text,
            message=self.settings.status_not_parseable,
        )


def clean_xml(raw_text: str, settings: Settings | None = None) -> CleanResult:
    """Clean text with the default stages and no status sink."""
    return CleaningPipeline(settings=settings).clean(raw_text)
