#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/paragraph.py
"""Handler for ``core/paragraph`` blocks."""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.handlers.base import BOOTSTRAP_TEXT_ALIGN, TAILWIND_TEXT_ALIGN
from block2html.registry import BlockHandler


def render_paragraph(block: Block, context: ConversionContext) -> str:
    classes = context.classes_for(block)
    return context.reconcile(context.source_markup(block), "p", {"class": classes})


PARAGRAPH_HANDLER = BlockHandler(
    transform=render_paragraph,
    name="core/paragraph",
    css_mapping={
        "tailwind": {
            "block": "",
            "align": TAILWIND_TEXT_ALIGN,
            "dropCap": "first-letter:float-left first-letter:text-7xl first-letter:font-bold first-letter:mr-3",
        },
        "bootstrap": {
            "block": "",
            "align": BOOTSTRAP_TEXT_ALIGN,
            "dropCap": "first-letter:float-left first-letter:font-size-4 first-letter:font-weight-bold",
        },
    },
)
