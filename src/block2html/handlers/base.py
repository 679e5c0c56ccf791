#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/base.py
"""Helpers shared by the built-in handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from block2html.markup import create_element

if TYPE_CHECKING:
    from block2html.ast.nodes import Block
    from block2html.converter import ConversionContext

# Horizontal alignment classes shared by most text blocks
TAILWIND_TEXT_ALIGN = {"left": "text-left", "center": "text-center", "right": "text-right"}
BOOTSTRAP_TEXT_ALIGN = {"left": "text-start", "center": "text-center", "right": "text-end"}


def render_wrapped(block: Block, context: ConversionContext, tag: str, attributes: Mapping[str, Any]) -> str:
    """Render a block whose output is one ``tag`` element around its inner markup.

    Blocks whose children are not positioned by placeholders get a fresh
    wrapper around the rendered children. Otherwise the inner markup is
    reconciled with ``attributes`` under the active content mode.
    """
    inner = context.render_inner(block)
    if block.children and None not in block.raw_segments:
        return create_element(tag, attributes, inner)
    return context.reconcile(inner, tag, attributes)


def flag(value: Any) -> str:
    """Render a truthy value as ``"true"``/``"false"`` for data attributes."""
    return "true" if value else "false"
