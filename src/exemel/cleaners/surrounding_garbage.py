"""Removal of prose and log noise around the markup."""

from __future__ import annotations

from typing import Optional, Tuple

from ..models import CleaningContext
from .base import BaseCleaner


def markup_span(text: str) -> Optional[Tuple[int, int]]:
    """Return ``(start, end)`` covering the first ``<`` through the last ``>``.

    ``None`` when the text has no ``<`` ahead of a ``>``.
    """
    start = text.find("<")
    end = text.rfind(">")
    if start < 0 or end < 0 or start > end:
        return None
    return start, end + 1


class SurroundingGarbageCleaner(BaseCleaner):
    """Keeps only the outermost ``<`` ... ``>`` span of the text."""

    name = "surrounding_garbage"

    def clean(self, context: CleaningContext) -> CleaningContext:
        span = markup_span(context.working_text)
        if span is None:
            return context
        start, end = span
        return context.with_text(context.working_text[start:end])
