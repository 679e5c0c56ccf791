#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/ast/nodes.py
"""Block model for block-editor documents.

A document is a list of blocks. Each block carries a type name (for example
``core/paragraph``), an ordered attribute mapping, nested child blocks, and the
serialized inner markup the editor stored for it. The source system may also
supply pre-rendered HTML, either per block or for the whole document.

Blocks are built once by the caller (usually from JSON, see
:mod:`block2html.ast.serialization`) and are treated as read-only during
conversion.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional


@dataclass
class Block:
    """One node of a block-editor document.

    Parameters
    ----------
    block_type : str, default = ""
        Block type name such as ``core/paragraph``. An empty name marks a raw,
        opaque chunk of markup (freeform content between blocks).
    attributes : dict, default = empty dict
        Block attributes in source order. Values are scalars or nested
        JSON-like values.
    children : list of Block, default = empty list
        Nested blocks (``innerBlocks`` in WordPress terms).
    raw_segments : list of str or None, default = empty list
        The original serialized inner markup, split around nested blocks.
        ``None`` entries mark positions where a child block was located and
        contribute nothing to :attr:`raw_markup`.
    rendered_markup : str or None, default = None
        Pre-rendered HTML for this block, when supplied by the source system.

    Notes
    -----
    ``children`` and ``raw_segments`` are not required to agree with each
    other. A block with neither contributes no output.

    """

    block_type: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    children: list[Block] = field(default_factory=list)
    raw_segments: list[Optional[str]] = field(default_factory=list)
    rendered_markup: Optional[str] = None

    @property
    def raw_markup(self) -> str:
        """Return the raw segments joined, skipping child placeholders."""
        return "".join(segment for segment in self.raw_segments if segment)

    @property
    def content(self) -> str:
        """Return the pre-rendered markup when present, else the raw markup."""
        if self.rendered_markup:
            return self.rendered_markup
        return self.raw_markup

    @property
    def is_empty(self) -> bool:
        """Return True when the block has neither children nor markup."""
        return not self.children and not self.raw_markup and not self.rendered_markup

    def get(self, name: str, default: Any = None) -> Any:
        """Return an attribute value, or ``default`` when it is absent."""
        return self.attributes.get(name, default)

    def walk(self) -> Iterator[Block]:
        """Yield this block and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class BlockList:
    """A parsed document: top-level blocks plus optional whole-document HTML.

    Parameters
    ----------
    blocks : list of Block, default = empty list
        Top-level blocks in document order.
    rendered_markup : str or None, default = None
        Pre-rendered HTML for the entire document (``content.rendered`` from the
        WordPress REST API). Used by the whole-document shortcut of the
        converter.

    """

    blocks: list[Block] = field(default_factory=list)
    rendered_markup: Optional[str] = None

    def __iter__(self) -> Iterator[Block]:
        """Iterate over the top-level blocks."""
        return iter(self.blocks)

    def __len__(self) -> int:
        """Return the number of top-level blocks."""
        return len(self.blocks)


__all__ = ["Block", "BlockList"]
