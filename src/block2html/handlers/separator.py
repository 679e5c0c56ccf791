#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/separator.py
"""Handler for ``core/separator`` blocks."""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.markup import create_element
from block2html.reconcile import is_wrapped
from block2html.registry import BlockHandler


def render_separator(block: Block, context: ConversionContext) -> str:
    classes = context.classes_for(block)
    markup = context.source_markup(block)
    if not is_wrapped(markup, "hr"):
        return create_element("hr", {"class": classes})
    return context.reconcile(markup, "hr", {"class": classes})


SEPARATOR_HANDLER = BlockHandler(
    transform=render_separator,
    name="core/separator",
    css_mapping={
        "tailwind": {
            "block": "my-8 border-t border-gray-300",
            "style": {
                "default": "border-t border-gray-300",
                "wide": "border-t-2 border-gray-300",
                "dots": "border-t border-dotted border-gray-300",
            },
            "align": {
                "left": "mr-auto ml-0 w-1/4",
                "center": "mx-auto w-1/2",
                "right": "ml-auto mr-0 w-1/4",
            },
        },
        "bootstrap": {
            "block": "my-4 border-top",
            "style": {
                "default": "border-top",
                "wide": "border-top border-2",
                "dots": "border-top border-dotted",
            },
            "align": {
                "left": "float-start w-25",
                "center": "mx-auto w-50",
                "right": "float-end w-25",
            },
        },
    },
)
