#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/group.py
"""Handler for ``core/group`` blocks (generic containers)."""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.handlers.base import render_wrapped
from block2html.registry import BlockHandler

GROUP_TAGS = frozenset({"div", "section", "article", "aside", "main", "header", "footer"})


def render_group(block: Block, context: ConversionContext) -> str:
    classes = context.classes_for(block)
    tag = block.get("tagName", "div")
    if tag not in GROUP_TAGS:
        tag = "div"
    return render_wrapped(block, context, tag, {"class": classes})


GROUP_HANDLER = BlockHandler(
    transform=render_group,
    name="core/group",
    css_mapping={
        "tailwind": {
            "block": "p-4 my-4",
            "align": {
                "left": "text-left",
                "center": "text-center",
                "right": "text-right",
                "wide": "max-w-screen-xl mx-auto",
                "full": "w-full",
            },
        },
        "bootstrap": {
            "block": "p-3 my-3",
            "align": {
                "left": "text-start",
                "center": "text-center",
                "right": "text-end",
                "wide": "container-lg",
                "full": "container-fluid",
            },
        },
    },
)
