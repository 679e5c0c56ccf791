#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/heading.py
"""Handler for ``core/heading`` blocks."""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.handlers.base import BOOTSTRAP_TEXT_ALIGN, TAILWIND_TEXT_ALIGN
from block2html.registry import BlockHandler

DEFAULT_HEADING_LEVEL = 2


def heading_level(block: Block) -> int:
    """Return the block's heading level, clamped to 1-6 (default 2)."""
    try:
        level = int(block.get("level", DEFAULT_HEADING_LEVEL))
    except (TypeError, ValueError):
        return DEFAULT_HEADING_LEVEL
    return level if 1 <= level <= 6 else DEFAULT_HEADING_LEVEL


def render_heading(block: Block, context: ConversionContext) -> str:
    classes = context.classes_for(block)
    tag = f"h{heading_level(block)}"
    return context.reconcile(context.source_markup(block), tag, {"class": classes})


HEADING_HANDLER = BlockHandler(
    transform=render_heading,
    name="core/heading",
    css_mapping={
        "tailwind": {
            "block": "",
            "level": {
                "1": "text-4xl font-bold",
                "2": "text-3xl font-bold",
                "3": "text-2xl font-bold",
                "4": "text-xl font-bold",
                "5": "text-lg font-bold",
                "6": "text-base font-bold",
            },
            "align": TAILWIND_TEXT_ALIGN,
        },
        "bootstrap": {
            "block": "",
            "level": {str(level): f"h{level}" for level in range(1, 7)},
            "align": BOOTSTRAP_TEXT_ALIGN,
        },
    },
)
