"""Stages that undo string-literal escaping picked up when copying from Visual Studio.

Two conventions show up in practice and are kept apart:

* values copied out of the debugger (watch, locals, immediate and output
  windows) are C#-style literals: ``<Root Name=\\"x\\">\\r\\n</Root>``;
* values lifted from VB / VBScript source are VB literals with doubled quotes
  and ``" & vbCrLf & "`` concatenations.

Both stages only act when the text carries clear evidence of their escaping.
Text that already parses is left alone, except that escaped line breaks
standing alone between tags are always debugger layout.
"""

from __future__ import annotations

import re

from ..models import CleaningContext
from .base import BaseCleaner
from .format import is_well_formed
from .whitespace import LINE_BREAK_RE

ESCAPED_ATTRIBUTE_QUOTE_RE = re.compile(r'=\s*\\"')
ESCAPED_LAYOUT_BREAK_RE = re.compile(r">(?:\\r)?\\n(?:[ \t]|\\t)*<")
BACKSLASH_ESCAPE_RE = re.compile(
    r"\\(\\|\"|'|r\\n|r|n|t|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2})"
)
SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "r\\n": "\n",
    "r": "\n",
    "n": "\n",
    "t": "\t",
}

VB_TOKEN = r"(?:vbCrLf|vbNewLine|vbLf|vbCr|vbTab|ChrW?\(\s*\d+\s*\))"
VB_JOIN = r"\s*&\s*(?:_\s*)?"
VB_TOKEN_CONCAT_RE = re.compile(
    rf'"{VB_JOIN}(?P<tokens>{VB_TOKEN}(?:{VB_JOIN}{VB_TOKEN})*){VB_JOIN}"',
    re.IGNORECASE,
)
VB_PLAIN_CONCAT_RE = re.compile(rf'"{VB_JOIN}"')
VB_CONTINUATION_RE = re.compile(r'"\s*&\s*_\s*\n')
VB_DOUBLED_ATTRIBUTE_QUOTE_RE = re.compile(r'<[^\s/>!?<]+[^<>]*?\s[^\s=<>]+\s*=\s*""[^"\s/>]')
VB_CHR_RE = re.compile(r"ChrW?\(\s*(\d+)\s*\)", re.IGNORECASE)
VB_CONSTANTS = {
    "vbcrlf": "\r\n",
    "vbnewline": "\r\n",
    "vblf": "\n",
    "vbcr": "\r",
    "vbtab": "\t",
}


def looks_debugger_escaped(text: str) -> bool:
    if ESCAPED_LAYOUT_BREAK_RE.search(text):
        return True
    return bool(ESCAPED_ATTRIBUTE_QUOTE_RE.search(text)) and not is_well_formed(text)


def unescape_debugger_literal(text: str) -> str:
    """Reverse C#-style backslash escapes in a single pass.

    Unknown escape sequences are left exactly as written.
    """

    def _replace(match: re.Match) -> str:
        escape = match.group(1)
        if escape in SIMPLE_ESCAPES:
            return SIMPLE_ESCAPES[escape]
        return chr(int(escape[1:], 16))

    return BACKSLASH_ESCAPE_RE.sub(_replace, text)


def looks_vb_escaped(text: str) -> bool:
    evidence = (
        VB_DOUBLED_ATTRIBUTE_QUOTE_RE.search(text)
        or VB_TOKEN_CONCAT_RE.search(text)
        or VB_CONTINUATION_RE.search(text)
    )
    return bool(evidence) and not is_well_formed(text)


def _vb_token_text(token: str) -> str:
    chr_match = VB_CHR_RE.fullmatch(token)
    if chr_match:
        code = int(chr_match.group(1))
        # Kept doubled so the quote collapse below turns it into one quote.
        return '""' if code == 34 else chr(code)
    return VB_CONSTANTS[token.lower()]


def unescape_vb_literal(text: str) -> str:
    """Rejoin VB string concatenations and collapse doubled quotes."""

    def _replace(match: re.Match) -> str:
        tokens = re.split(VB_JOIN, match.group("tokens"))
        joined = "".join(_vb_token_text(token) for token in tokens if token)
        return LINE_BREAK_RE.sub("\n", joined)

    text = VB_TOKEN_CONCAT_RE.sub(_replace, text)
    text = VB_PLAIN_CONCAT_RE.sub("", text)
    return text.replace('""', '"')


class VisualStudioCleaner(BaseCleaner):
    """Unescapes XML copied from the Visual Studio debugger or output window."""

    name = "visual_studio"

    def clean(self, context: CleaningContext) -> CleaningContext:
        text = context.working_text
        if not looks_debugger_escaped(text):
            return context
        return context.with_text(unescape_debugger_literal(text))


class VisualStudioVBScriptCleaner(BaseCleaner):
    """Unescapes XML embedded in VB / VBScript string literals."""

    name = "visual_studio_vbscript"

    def clean(self, context: CleaningContext) -> CleaningContext:
        text = context.working_text
        if not looks_vb_escaped(text):
            return context
        return context.with_text(unescape_vb_literal(text))
