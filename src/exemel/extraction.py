"""Locating and decoding XML that was stored as escaped text inside a document.

Typical case: a message log where the payload of one element is a whole XML
document written as ``&lt;Order&gt;...&lt;/Order&gt;``, either as an attribute
value or as element text. Given a caret offset, the locator finds the run of
text around it, checks that it really holds encoded markup and decodes one
level of escaping.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from html import unescape
from typing import Optional

from .cleaners.surrounding_garbage import markup_span
from .utils.markup import ATTRIBUTE_RE, enclosing_cdata, enclosing_start_tag

ENCODED_OPEN_RE = re.compile(r"&(?:amp;)*(?:lt|#60|#x3[cC]);")
MAX_ESCAPE_LEVELS = 8


def unescape_markup(value: str) -> str:
    """Undo entity escaping until literal markup shows up.

    Values escaped more than once (``&amp;lt;``) are unwrapped level by level;
    decoding stops at the first level that contains a literal ``<`` so XML
    nested further inside stays encoded for the next delve.
    """
    for _ in range(MAX_ESCAPE_LEVELS):
        if "<" in value or not ENCODED_OPEN_RE.search(value):
            break
        value = unescape(value)
    return value


@dataclass(frozen=True)
class EncodedRun:
    """A candidate span of ``text[start:end]``."""

    start: int
    end: int
    kind: str  # cdata | attribute | text
    raw: str

    def decode(self) -> Optional[str]:
        if self.kind == "cdata":
            decoded = self.raw
        else:
            if not ENCODED_OPEN_RE.search(self.raw):
                return None
            decoded = unescape_markup(self.raw)
        if markup_span(decoded) is None:
            return None
        return decoded.strip()


class EncodedXmlLocator:
    """Finds the encoded XML run around an offset in one fixed text.

    The search only looks as far as the delimiters surrounding the offset:
    the enclosing CDATA section, the enclosing start tag or the nearest
    ``>`` / ``<`` pair.
    """

    def __init__(self, text: str):
        self.text = text

    def locate(self, offset: int) -> Optional[EncodedRun]:
        """Return the run whose span holds or touches ``offset``."""
        if offset < 0 or offset > len(self.text):
            return None
        return (
            self._cdata_run(offset)
            or self._attribute_run(offset)
            or self._text_run(offset)
        )

    def decode_around(self, offset: int) -> Optional[str]:
        """Decoded fragment around ``offset`` or ``None`` when there is none."""
        run = self.locate(offset)
        if run is None:
            return None
        return run.decode()

    async def decode_around_async(self, offset: int) -> Optional[str]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.decode_around, offset)

    def _cdata_run(self, offset: int) -> Optional[EncodedRun]:
        span = enclosing_cdata(self.text, offset)
        if span is None:
            return None
        start, end = span
        return EncodedRun(start, end, "cdata", self.text[start:end])

    def _attribute_run(self, offset: int) -> Optional[EncodedRun]:
        tag = enclosing_start_tag(self.text, offset)
        if tag is None:
            return None
        for attribute in ATTRIBUTE_RE.finditer(self.text, tag.start(), tag.end()):
            group = "dq" if attribute.group("dq") is not None else "sq"
            start, end = attribute.span(group)
            # The quotes count as part of the value.
            if start - 1 <= offset <= end + 1:
                return EncodedRun(start, end, "attribute", attribute.group(group))
        return None

    def _text_run(self, offset: int) -> Optional[EncodedRun]:
        if enclosing_start_tag(self.text, offset) is not None:
            return None
        start = max(self.text.rfind(">", 0, offset), self.text.rfind("<", 0, offset)) + 1
        end_candidates = [
            index
            for index in (self.text.find("<", offset), self.text.find(">", offset))
            if index >= 0
        ]
        end = min(end_candidates) if end_candidates else len(self.text)
        return EncodedRun(start, end, "text", self.text[start:end])


def locate_and_decode(full_text: str, offset: int) -> Optional[str]:
    """Decode the encoded XML around ``offset`` in ``full_text``, if any."""
    return EncodedXmlLocator(full_text).decode_around(offset)
