#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/lists.py
"""Handler for ``core/list`` blocks.

Lists saved by recent editors keep their items as ``core/list-item`` child
blocks positioned by placeholders in the raw segments; older lists carry the
items directly in the markup. Both shapes are handled by
:func:`~block2html.handlers.base.render_wrapped`.
"""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.handlers.base import BOOTSTRAP_TEXT_ALIGN, TAILWIND_TEXT_ALIGN, render_wrapped
from block2html.registry import BlockHandler


def render_list(block: Block, context: ConversionContext) -> str:
    classes = context.classes_for(block)
    tag = "ol" if block.get("ordered") is True else "ul"
    return render_wrapped(block, context, tag, {"class": classes})


LIST_HANDLER = BlockHandler(
    transform=render_list,
    name="core/list",
    css_mapping={
        "tailwind": {
            "block": "",
            "ordered": {True: "list-decimal pl-5", False: "list-disc pl-5"},
            "align": TAILWIND_TEXT_ALIGN,
        },
        "bootstrap": {
            "block": "",
            "ordered": {True: "list-group list-group-numbered", False: "list-group"},
            "align": BOOTSTRAP_TEXT_ALIGN,
        },
    },
)
