"""Wraps multiple top-level elements in a synthetic root element."""

from __future__ import annotations

from ..models import CleaningContext
from ..utils.markup import top_level_element_starts
from .base import BaseCleaner


class AddedRootCleaner(BaseCleaner):
    """Makes sibling fragments such as ``<a/><b/>`` parseable.

    The XML declaration, DOCTYPE and comments ahead of the first element stay
    outside the added root.
    """

    name = "added_root"

    def clean(self, context: CleaningContext) -> CleaningContext:
        text = context.working_text
        starts = top_level_element_starts(text, limit=2)
        if len(starts) < 2:
            return context

        root = self.settings.synthetic_root_name
        prolog, body = text[: starts[0]], text[starts[0] :]
        return context.with_text(f"{prolog}<{root}>{body}</{root}>")
