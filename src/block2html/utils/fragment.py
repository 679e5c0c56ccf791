#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/utils/fragment.py
"""Minimal markup tree for HTML fragments.

:class:`MarkupTree` tokenizes a fragment with :class:`html.parser.HTMLParser`
and records every element, text run and comment as a :class:`FragmentNode` in
a flat list. Nodes refer to each other by index and carry the source offsets
of their start tag, inner content and end tag, so callers can inspect
structure and then edit the original text by span. Nothing is normalized: any
part of the input can be recovered byte-for-byte.

The parser is tolerant. Elements left open run to the end of the input,
stray end tags are ignored, and an end tag closes every element opened
inside the matching one.

Examples
--------
    >>> tree = MarkupTree.parse('<p class="a">Hi</p>')
    >>> node = tree.root_elements()[0]
    >>> tree.inner_markup(node)
    'Hi'
    >>> node.attribute("class").value
    'a'

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Iterator, Literal, Optional

logger = logging.getLogger(__name__)

NodeKind = Literal["element", "text", "comment", "declaration"]

# Elements that never have content or an end tag
HTML_VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

_TAG_NAME = re.compile(r"<\s*[^\s/>]+")
_ATTRIBUTE = re.compile(
    r"""
    (?P<name>[^\s/>"'=]+)
    (?:
        \s*=\s*
        (?:
            "(?P<dq>[^"]*)"
          | '(?P<sq>[^']*)'
          | (?P<bare>[^\s>]+)
        )
    )?
    """,
    re.VERBOSE,
)
_REFERENCE = re.compile(r"&#?[0-9A-Za-z]*;?")


@dataclass
class AttributeToken:
    """One attribute as written in a start tag.

    Attributes
    ----------
    name : str
        Lower-cased attribute name
    value : str or None
        Raw value without quotes (entities are not decoded); None for a bare attribute
    start, end : int
        Source span of the whole token, from the name to the closing quote
    quote : str
        The quote character used, or "" for bare and unquoted values

    """

    name: str
    value: Optional[str]
    start: int
    end: int
    quote: str = ""


@dataclass
class FragmentNode:
    """One node of a :class:`MarkupTree`.

    For elements, ``start``/``start_tag_end`` delimit the start tag,
    ``start_tag_end``/``end_tag_start`` the inner content and
    ``end_tag_start``/``end`` the end tag. For other kinds the three spans
    collapse onto ``start``/``end``.
    """

    index: int
    kind: NodeKind
    start: int
    end: int
    tag: str = ""
    parent: int = -1
    children: list[int] = field(default_factory=list)
    start_tag_end: int = 0
    end_tag_start: int = 0
    attributes: list[AttributeToken] = field(default_factory=list)
    closed: bool = False
    self_closing: bool = False

    @property
    def is_element(self) -> bool:
        return self.kind == "element"

    def attribute(self, name: str) -> Optional[AttributeToken]:
        """Return the first attribute token called ``name``, if any."""
        name = name.lower()
        for token in self.attributes:
            if token.name == name:
                return token
        return None

    def has_attribute(self, name: str) -> bool:
        return self.attribute(name) is not None


def parse_attribute_tokens(start_tag: str, offset: int = 0) -> list[AttributeToken]:
    """Split the raw text of a start tag into attribute tokens.

    Parameters
    ----------
    start_tag : str
        Raw start tag, e.g. ``<p class="a" hidden>``
    offset : int, default 0
        Source offset of ``start_tag``; token spans are shifted by it

    Returns
    -------
    list of AttributeToken
        Tokens in source order

    """
    tokens: list[AttributeToken] = []
    name_match = _TAG_NAME.match(start_tag)
    position = name_match.end() if name_match else 0
    limit = len(start_tag) - 1 if start_tag.endswith(">") else len(start_tag)

    while position < limit:
        match = _ATTRIBUTE.search(start_tag, position, limit)
        if not match:
            break
        if match.group("dq") is not None:
            value: Optional[str] = match.group("dq")
            quote = '"'
        elif match.group("sq") is not None:
            value = match.group("sq")
            quote = "'"
        else:
            value = match.group("bare")
            quote = ""
        tokens.append(
            AttributeToken(
                name=match.group("name").lower(),
                value=value,
                start=offset + match.start(),
                end=offset + match.end(),
                quote=quote,
            )
        )
        position = match.end()
    return tokens


class _TreeBuilder(HTMLParser):
    """HTMLParser subclass that records nodes with absolute source offsets."""

    def __init__(self, source: str):
        super().__init__(convert_charrefs=False)
        self.source = source
        self.nodes: list[FragmentNode] = []
        self._open: list[int] = []
        self._line_starts = [0] + [match.end() for match in re.finditer("\n", source)]

    def _offset(self) -> int:
        line, column = self.getpos()
        return self._line_starts[line - 1] + column

    def _add(self, kind: NodeKind, start: int, end: int, tag: str = "") -> FragmentNode:
        parent = self._open[-1] if self._open else -1
        node = FragmentNode(
            index=len(self.nodes),
            kind=kind,
            start=start,
            end=end,
            tag=tag,
            parent=parent,
            start_tag_end=end,
            end_tag_start=end,
        )
        self.nodes.append(node)
        if parent >= 0:
            self.nodes[parent].children.append(node.index)
        return node

    def _add_element(self, tag: str, self_closing: bool) -> None:
        start = self._offset()
        raw = self.get_starttag_text() or ""
        start_tag_end = start + len(raw)
        node = self._add("element", start, start_tag_end, tag)
        node.attributes = parse_attribute_tokens(raw, start)
        if self_closing or tag in HTML_VOID_ELEMENTS:
            node.closed = True
            node.self_closing = self_closing
        else:
            self._open.append(node.index)

    def handle_starttag(self, tag, attrs):
        self._add_element(tag, self_closing=False)

    def handle_startendtag(self, tag, attrs):
        self._add_element(tag, self_closing=True)

    def handle_endtag(self, tag):
        start = self._offset()
        close = self.source.find(">", start)
        end = len(self.source) if close < 0 else close + 1

        for depth in range(len(self._open) - 1, -1, -1):
            if self.nodes[self._open[depth]].tag == tag:
                break
        else:
            return

        # Elements opened inside the matched one end where it ends
        for index in self._open[depth + 1 :]:
            inner = self.nodes[index]
            inner.end_tag_start = inner.end = start
        node = self.nodes[self._open[depth]]
        node.end_tag_start = start
        node.end = end
        node.closed = True
        del self._open[depth:]

    def handle_data(self, data):
        start = self._offset()
        self._add("text", start, start + len(data))

    def _handle_reference(self) -> None:
        start = self._offset()
        match = _REFERENCE.match(self.source, start)
        end = match.end() if match else start + 1
        self._add("text", start, end)

    def handle_entityref(self, name):
        self._handle_reference()

    def handle_charref(self, name):
        self._handle_reference()

    def handle_comment(self, data):
        start = self._offset()
        close = self.source.find(">", start + 4 + len(data))
        self._add("comment", start, len(self.source) if close < 0 else close + 1)

    def _handle_declaration(self) -> None:
        start = self._offset()
        close = self.source.find(">", start)
        self._add("declaration", start, len(self.source) if close < 0 else close + 1)

    def handle_decl(self, decl):
        self._handle_declaration()

    def handle_pi(self, data):
        self._handle_declaration()

    def unknown_decl(self, data):
        self._handle_declaration()

    def finish(self) -> None:
        end = len(self.source)
        for index in self._open:
            node = self.nodes[index]
            node.end_tag_start = node.end = end
        self._open = []


class MarkupTree:
    """Flat, index-linked tree of one HTML fragment.

    Parameters
    ----------
    source : str
        The markup the tree was built from
    nodes : list of FragmentNode
        Nodes in document order

    """

    def __init__(self, source: str, nodes: list[FragmentNode]):
        self.source = source
        self.nodes = nodes
        self.roots = [node.index for node in nodes if node.parent < 0]

    @classmethod
    def parse(cls, source: str) -> MarkupTree:
        """Build a tree from ``source``. Never raises on malformed markup."""
        builder = _TreeBuilder(source)
        try:
            builder.feed(source)
            builder.close()
        except (AssertionError, ValueError) as e:
            # _markupbase rejects some marked sections; keep what was parsed
            logger.debug(f"Markup tokenization stopped early: {e}")
        builder.finish()
        return cls(source, builder.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[FragmentNode]:
        return iter(self.nodes)

    def root_nodes(self) -> list[FragmentNode]:
        return [self.nodes[index] for index in self.roots]

    def root_elements(self) -> list[FragmentNode]:
        return [node for node in self.root_nodes() if node.is_element]

    def children_of(self, node: FragmentNode) -> list[FragmentNode]:
        return [self.nodes[index] for index in node.children]

    def elements(self, tag: Optional[str] = None) -> Iterator[FragmentNode]:
        """Yield element nodes in document order, optionally filtered by tag."""
        tag = tag.lower() if tag else None
        for node in self.nodes:
            if node.is_element and (tag is None or node.tag == tag):
                yield node

    def find_first(self, tag: str) -> Optional[FragmentNode]:
        return next(self.elements(tag), None)

    def outer_markup(self, node: FragmentNode) -> str:
        return self.source[node.start : node.end]

    def inner_markup(self, node: FragmentNode) -> str:
        if not node.is_element:
            return self.source[node.start : node.end]
        return self.source[node.start_tag_end : node.end_tag_start]

    def start_tag(self, node: FragmentNode) -> str:
        return self.source[node.start : node.start_tag_end]

    def is_run_of(self, tag: str) -> bool:
        """Return True if the top level is only closed ``tag`` elements and whitespace.

        Comments, declarations, other elements or any non-blank text at the
        top level make the fragment not a run.
        """
        tag = tag.lower()
        roots = self.root_nodes()
        if not roots:
            return False
        found = False
        for node in roots:
            if node.is_element:
                if node.tag != tag or not node.closed:
                    return False
                found = True
            elif node.kind == "text":
                if self.source[node.start : node.end].strip():
                    return False
            else:
                return False
        if not found:
            return False
        # Anything the tokenizer skipped between roots must be blank too
        covered = 0
        for node in roots:
            if self.source[covered : node.start].strip():
                return False
            covered = node.end
        return not self.source[covered:].strip()


__all__ = [
    "AttributeToken",
    "FragmentNode",
    "HTML_VOID_ELEMENTS",
    "MarkupTree",
    "parse_attribute_tokens",
]
