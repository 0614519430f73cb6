"""Lightweight markup scanning used where a full parse is too strict or too costly."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

# Attribute values are matched as whole quoted strings so a ``>`` inside a
# value does not end the tag.
TAG_BODY = r"(?:\"[^\"]*\"|'[^']*'|[^'\">])*?"
MARKUP_TOKEN_RE = re.compile(
    r"(?P<comment><!--.*?-->)"
    r"|(?P<cdata><!\[CDATA\[.*?\]\]>)"
    r"|(?P<pi><\?.*?\?>)"
    r"|(?P<doctype><!DOCTYPE(?:[^\[>]|\[.*?\])*>)"
    rf"|<(?P<closing>/)?(?P<name>[^\s/>!?<]+){TAG_BODY}(?P<empty>/)?>",
    re.DOTALL | re.IGNORECASE,
)
START_TAG_RE = re.compile(rf"<(?P<name>[^\s/>!?<]+){TAG_BODY}/?>", re.DOTALL)
ATTRIBUTE_RE = re.compile(
    r"(?P<name>[^\s=\"'<>/]+)\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)')"
)
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"


@dataclass(frozen=True)
class ElementTag:
    name: str
    start: int
    end: int
    closing: bool
    empty: bool


def iter_element_tags(text: str) -> Iterator[ElementTag]:
    """Yield element start/end tags, skipping comments, CDATA, PIs and DOCTYPE."""
    for match in MARKUP_TOKEN_RE.finditer(text):
        if match.group("name") is None:
            continue
        yield ElementTag(
            name=match.group("name"),
            start=match.start(),
            end=match.end(),
            closing=bool(match.group("closing")),
            empty=bool(match.group("empty")),
        )


def top_level_element_starts(text: str, limit: int | None = None) -> list[int]:
    """Offsets of elements that open at nesting depth zero.

    Unbalanced closing tags never push the depth below zero; the real parse
    reports them later.
    """
    starts: list[int] = []
    depth = 0
    for tag in iter_element_tags(text):
        if tag.closing:
            depth = max(depth - 1, 0)
            continue
        if depth == 0:
            starts.append(tag.start)
            if limit is not None and len(starts) >= limit:
                break
        if not tag.empty:
            depth += 1
    return starts


def enclosing_start_tag(text: str, offset: int) -> Optional[re.Match]:
    """Return the start tag whose span holds ``offset``, if any."""
    tag_start = text.rfind("<", 0, offset)
    if tag_start < 0:
        return None
    match = START_TAG_RE.match(text, tag_start)
    if match is None or match.end() <= offset:
        return None
    return match


def enclosing_cdata(text: str, offset: int) -> Optional[tuple[int, int]]:
    """Return the ``(start, end)`` of the CDATA content holding ``offset``."""
    open_at = text.rfind(CDATA_OPEN, 0, offset)
    if open_at < 0:
        return None
    content_start = open_at + len(CDATA_OPEN)
    close_at = text.find(CDATA_CLOSE, content_start)
    if close_at < 0 or offset > close_at + len(CDATA_CLOSE):
        return None
    return content_start, close_at
