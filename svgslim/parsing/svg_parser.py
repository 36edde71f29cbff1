"""Text <-> lxml tree conversion for SVG documents."""
import re
from typing import Iterable, Optional

from lxml import etree

from .tree import is_element, localname
from ..errors.exceptions import ParseError, SvgValidationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"

ENCODING_DECL_RE = re.compile(r"^(\s*<\?xml[^?]*?)\s+encoding\s*=\s*(['\"])[^'\"]*\2", re.IGNORECASE)
WHITESPACE_RUN_RE = re.compile(r"\s+")

# Elements whose character data is significant and must not be collapsed.
WHITESPACE_SIGNIFICANT_TAGS = frozenset(
    {"text", "tspan", "textPath", "title", "desc", "style", "script"}
)

# libxml2 messages mapped onto the vocabulary the error classifier understands.
_PARSE_ERROR_KINDS = (
    (
        "missing quote",
        re.compile(r"AttValue: \" or ' expected|Unescaped '<' not allowed in attributes|"
                   r"attributes construct error.*quote", re.IGNORECASE),
    ),
    (
        "unclosed tag",
        re.compile(r"Premature end of data|Couldn't find end of Start Tag|"
                   r"Opening and ending tag mismatch|EndTag|end of document|"
                   r"not properly terminated", re.IGNORECASE),
    ),
    (
        "invalid attribute",
        re.compile(r"Specification mandates value for attribute|Attribute \S+ redefined|"
                   r"attributes construct error|Namespace prefix \S+ for", re.IGNORECASE),
    ),
    (
        "unexpected character",
        re.compile(r"invalid element name|Start tag expected|Extra content|"
                   r"xmlParseCharRef|invalid character|not allowed|"
                   r"Document is empty|PCDATA", re.IGNORECASE),
    ),
)


def _classify_syntax_error(error: etree.XMLSyntaxError) -> str:
    messages = [entry.message for entry in error.error_log] or [str(error)]
    combined = " | ".join(messages)
    for kind, pattern in _PARSE_ERROR_KINDS:
        if pattern.search(combined):
            return kind
    return "syntax error"


class SVGParser:
    """Parse raw SVG text into an lxml tree and serialize it back."""

    def parse(self, svg_string: str, require_svg_root: bool = False) -> etree._Element:
        """
        Parse SVG text.

        Args:
            svg_string: Complete SVG document.
            require_svg_root: Also reject documents whose root is not <svg>.

        Returns:
            The root element of a freshly built tree.

        Raises:
            ParseError: Empty input or malformed XML.
            SvgValidationError: Well-formed, but the root is not <svg>.
        """
        if not isinstance(svg_string, str):
            raise ParseError(
                f"Expected SVG text, got {type(svg_string).__name__}", kind="syntax error"
            )
        if not svg_string.strip():
            raise ParseError("Empty SVG content", kind="empty content")

        # The text is already decoded; a stale encoding declaration would
        # make libxml2 decode the UTF-8 bytes a second time.
        source = ENCODING_DECL_RE.sub(r"\1", svg_string, count=1).encode("utf-8")

        parser = etree.XMLParser(
            remove_blank_text=False,
            remove_comments=False,
            resolve_entities=False,
            no_network=True,
        )
        try:
            root = etree.fromstring(source, parser)
        except etree.XMLSyntaxError as e:
            kind = _classify_syntax_error(e)
            line, column = (e.position if e.position else (e.lineno, None))
            raise ParseError(f"{kind}: {e.msg}", kind=kind, line=line, column=column) from e

        if root is None:
            raise ParseError("unexpected character: no root element", kind="unexpected character")

        if require_svg_root and localname(root.tag) != "svg":
            raise SvgValidationError(
                f"No valid SVG root element found (root is <{localname(root.tag)}>)"
            )
        return root

    def serialize(self, root: etree._Element) -> str:
        """Serialize a tree to text. The XML prolog and DOCTYPE are not emitted."""
        return etree.tostring(root, encoding="unicode")

    def minify(self, root: etree._Element, preserve_attributes: Iterable[str] = ()) -> None:
        """
        Collapse insignificant whitespace in place.

        Whitespace-only text between tags is dropped and whitespace runs in
        attribute values become single spaces. Character data inside text-like
        elements (and under xml:space="preserve") is left untouched.
        """
        preserved = set(preserve_attributes)
        stack = [(root, False)]
        while stack:
            node, inherited = stack.pop()
            keeps_space = inherited or node.get(XML_SPACE) == "preserve" or (
                localname(node.tag) in WHITESPACE_SIGNIFICANT_TAGS
            )

            if not keeps_space:
                node.text = _collapse_text(node.text)

            for name, value in node.attrib.items():
                if localname(name) in preserved:
                    continue
                collapsed = WHITESPACE_RUN_RE.sub(" ", value).strip()
                if collapsed != value:
                    node.set(name, collapsed)

            for child in node:
                if not keeps_space:
                    child.tail = _collapse_text(child.tail)
                if is_element(child):
                    stack.append((child, keeps_space))


def _collapse_text(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    if not text.strip():
        return None
    return WHITESPACE_RUN_RE.sub(" ", text)


def recover_markup(svg_string: str) -> Optional[str]:
    """Re-serialize text through libxml2's recovering parser, or None if nothing survives."""
    parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(
            ENCODING_DECL_RE.sub(r"\1", svg_string, count=1).encode("utf-8"), parser
        )
    except etree.XMLSyntaxError:
        return None
    if root is None:
        return None
    return etree.tostring(root, encoding="unicode")


_default_parser = SVGParser()


def parse_svg(svg_string: str, require_svg_root: bool = False) -> etree._Element:
    """Parse with a shared stateless SVGParser."""
    return _default_parser.parse(svg_string, require_svg_root=require_svg_root)


def serialize_svg(root: etree._Element, minify: bool = False) -> str:
    if minify:
        _default_parser.minify(root)
    return _default_parser.serialize(root)
