"""Whitespace and line-ending cleanup stages."""

from __future__ import annotations

import re

from ..models import CleaningContext
from .base import BaseCleaner

LINE_BREAK_RE = re.compile(r"\r\n?")


class TrimCleaner(BaseCleaner):
    """Drops leading and trailing whitespace."""

    name = "trim"

    def clean(self, context: CleaningContext) -> CleaningContext:
        return context.with_text(context.working_text.strip())


class NewLineCleaner(BaseCleaner):
    """Rewrites CRLF and lone CR line endings as LF."""

    name = "newline"

    def clean(self, context: CleaningContext) -> CleaningContext:
        return context.with_text(LINE_BREAK_RE.sub("\n", context.working_text))
