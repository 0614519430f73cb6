"""Final stage: parse the cleaned text and pretty-print it."""

from __future__ import annotations

import io
import re
from typing import List, Tuple
from xml.dom import Node
from xml.dom.minidom import Document, Element
from xml.parsers.expat import ExpatError
from xml.sax.saxutils import escape

from defusedxml import DefusedXmlException
from defusedxml.minidom import parseString

from ..models import CleaningContext
from .base import BaseCleaner

DECLARATION_RE = re.compile(r"^\s*<\?xml\s.*?\?>", re.DOTALL)
ENCODING_PSEUDO_ATTR_RE = re.compile(r"\s+encoding\s*=\s*(\"[^\"]*\"|'[^']*')")
PARSE_ERRORS = (ExpatError, DefusedXmlException, ValueError)

# Whitespace in attribute values is written as character references, otherwise
# attribute-value normalization turns it into spaces on the next parse.
ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}
TEXT_ENTITIES = {"\r": "&#13;"}
INLINE_CHILD_TYPES = (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)


def split_declaration(text: str) -> Tuple[str, str]:
    """Return ``(declaration, rest)``; the declaration is ``""`` when absent."""
    match = DECLARATION_RE.match(text)
    if match is None:
        return "", text
    return match.group(0).strip(), text[match.end() :]


def parse_xml(text: str) -> Document:
    """Parse text into a DOM, rejecting entity expansion and external resources.

    The text is already decoded, so any ``encoding`` in the declaration is
    dropped before it reaches expat.
    """
    declaration, rest = split_declaration(text)
    if declaration:
        text = ENCODING_PSEUDO_ATTR_RE.sub("", declaration) + rest
    return parseString(text)


def is_well_formed(text: str) -> bool:
    """True when ``text`` parses as a document or as a run of sibling elements."""
    _, rest = split_declaration(text)
    for candidate in (text, f"<fragment>{rest}</fragment>"):
        try:
            parse_xml(candidate)
        except PARSE_ERRORS:
            continue
        return True
    return False


def tidy_whitespace(node: Node) -> None:
    """Drop layout-only text between nodes and trim text in mixed content.

    Text that is the only child of an element is left alone so leaf values
    keep their exact content.
    """
    children = list(node.childNodes)
    if len(children) > 1:
        for child in children:
            if child.nodeType != Node.TEXT_NODE:
                continue
            stripped = child.data.strip()
            if stripped:
                child.data = stripped
            else:
                node.removeChild(child)
    for child in node.childNodes:
        if child.nodeType == Node.ELEMENT_NODE:
            tidy_whitespace(child)


def _inline(node: Node) -> str:
    if node.nodeType == Node.CDATA_SECTION_NODE:
        return f"<![CDATA[{node.data}]]>"
    return escape(node.data, TEXT_ENTITIES)


def _write_element(element: Element, out: List[str], indent: str, level: int) -> None:
    prefix = indent * level
    attributes = "".join(
        f' {name}="{escape(value, ATTRIBUTE_ENTITIES)}"'
        for name, value in element.attributes.items()
    )
    start = f"{prefix}<{element.tagName}{attributes}"
    children = element.childNodes
    if not children:
        out.append(f"{start}/>\n")
    elif len(children) == 1 and children[0].nodeType in INLINE_CHILD_TYPES:
        out.append(f"{start}>{_inline(children[0])}</{element.tagName}>\n")
    else:
        out.append(f"{start}>\n")
        for child in children:
            _write_node(child, out, indent, level + 1)
        out.append(f"{prefix}</{element.tagName}>\n")


def _write_node(node: Node, out: List[str], indent: str, level: int) -> None:
    if node.nodeType == Node.ELEMENT_NODE:
        _write_element(node, out, indent, level)
    elif node.nodeType in INLINE_CHILD_TYPES:
        out.append(f"{indent * level}{_inline(node)}\n")
    else:
        # Comments, processing instructions and the doctype carry no attributes.
        buffer = io.StringIO()
        node.writexml(buffer, indent * level, indent, "\n")
        out.append(buffer.getvalue())


def render_document(document: Document, declaration: str = "", indent: str = "  ") -> str:
    """Serialize a parsed document as indented XML without a trailing newline."""
    out: List[str] = []
    for child in document.childNodes:
        if child.nodeType == Node.ELEMENT_NODE:
            tidy_whitespace(child)
        _write_node(child, out, indent, 0)
    body = "".join(out).rstrip("\n")
    if declaration:
        return f"{declaration}\n{body}"
    return body


class FormatCleaner(BaseCleaner):
    """Parses the working text and replaces it with a formatted rendering."""

    name = "format"

    def clean(self, context: CleaningContext) -> CleaningContext:
        text = context.working_text
        try:
            document = parse_xml(text)
        except PARSE_ERRORS as exc:
            return context.fail(f"XML could not be parsed: {exc}")

        declaration, _ = split_declaration(text)
        formatted = render_document(document, declaration, indent=self.settings.indent)
        return context.model_copy(
            update={"working_text": formatted, "parsed_result": document}
        )
