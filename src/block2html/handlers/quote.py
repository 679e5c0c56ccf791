#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/quote.py
"""Handler for ``core/quote`` blocks."""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.handlers.base import BOOTSTRAP_TEXT_ALIGN, TAILWIND_TEXT_ALIGN, render_wrapped
from block2html.registry import BlockHandler


def render_quote(block: Block, context: ConversionContext) -> str:
    classes = context.classes_for(block)
    result = render_wrapped(block, context, "blockquote", {"class": classes})

    # Older quotes store the citation as an attribute instead of markup
    citation = block.get("citation")
    if citation and context.options.content_mode != "trust-rendered" and "<cite" not in result:
        position = result.rfind("</blockquote>")
        if position >= 0:
            result = f"{result[:position]}<cite>{citation}</cite>{result[position:]}"
    return result


QUOTE_HANDLER = BlockHandler(
    transform=render_quote,
    name="core/quote",
    css_mapping={
        "tailwind": {
            "block": "border-l-4 border-gray-300 pl-4 my-4",
            "align": TAILWIND_TEXT_ALIGN,
            "style": {"default": "italic", "plain": ""},
            "citation": "block mt-2 text-sm text-gray-600",
        },
        "bootstrap": {
            "block": "blockquote border-start border-4 ps-4 my-4",
            "align": BOOTSTRAP_TEXT_ALIGN,
            "style": {"default": "fst-italic", "plain": ""},
            "citation": "d-block mt-2 small text-muted",
        },
    },
)
