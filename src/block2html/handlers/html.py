#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/html.py
"""Handler for ``core/html`` (custom HTML) blocks.

The markup is passed through as written. A ``"custom-html"`` hook, when
configured, receives the block and may return replacement markup (for
example a sanitized copy).
"""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.markup import create_element
from block2html.registry import BlockHandler

CUSTOM_HTML_HOOK = "custom-html"


def render_custom_html(block: Block, context: ConversionContext) -> str:
    classes = context.classes_for(block)
    content = block.get("content") or context.source_markup(block)

    replacement = context.run_hook(CUSTOM_HTML_HOOK, block)
    if replacement is not None:
        content = replacement

    if not classes:
        return content
    return create_element("div", {"class": classes, "data-custom-html": "true"}, content)


HTML_HANDLER = BlockHandler(
    transform=render_custom_html,
    name="core/html",
    css_mapping={
        "tailwind": {
            "block": "my-4",
            "align": {
                "left": "mr-auto",
                "center": "mx-auto",
                "right": "ml-auto",
                "wide": "max-w-screen-xl mx-auto",
                "full": "w-full",
            },
        },
        "bootstrap": {
            "block": "my-3",
            "align": {
                "left": "float-start",
                "center": "d-block mx-auto",
                "right": "float-end",
                "wide": "container-lg",
                "full": "container-fluid",
            },
        },
    },
)
