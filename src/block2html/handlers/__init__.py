#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/__init__.py
"""Built-in block handlers.

Each module pairs a transform for one block type with its Tailwind and
Bootstrap class tables. The default ``handler_registry`` registers all of
them on first use; isolated registries can opt in with
:func:`register_builtin_handlers`.

Available handlers:
- core/paragraph, core/heading, core/list, core/quote: text blocks
- core/image: images and figures
- core/group: containers rendering their nested blocks
- core/separator: horizontal rules
- core/html: custom HTML (``"custom-html"`` hook)
- core/latest-posts: dynamic placeholder (``"latest-posts"`` hook)

Examples
--------
    >>> from block2html.registry import HandlerRegistry
    >>> from block2html.handlers import register_builtin_handlers
    >>> registry = HandlerRegistry()
    >>> register_builtin_handlers(registry)

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from block2html.handlers.group import GROUP_HANDLER
from block2html.handlers.heading import HEADING_HANDLER
from block2html.handlers.html import HTML_HANDLER
from block2html.handlers.image import IMAGE_HANDLER
from block2html.handlers.latest_posts import LATEST_POSTS_HANDLER
from block2html.handlers.lists import LIST_HANDLER
from block2html.handlers.paragraph import PARAGRAPH_HANDLER
from block2html.handlers.quote import QUOTE_HANDLER
from block2html.handlers.separator import SEPARATOR_HANDLER

if TYPE_CHECKING:
    from block2html.registry import BlockHandler, HandlerRegistry

BUILTIN_HANDLERS: dict[str, BlockHandler] = {
    "core/paragraph": PARAGRAPH_HANDLER,
    "core/heading": HEADING_HANDLER,
    "core/list": LIST_HANDLER,
    "core/image": IMAGE_HANDLER,
    "core/group": GROUP_HANDLER,
    "core/quote": QUOTE_HANDLER,
    "core/separator": SEPARATOR_HANDLER,
    "core/html": HTML_HANDLER,
    "core/latest-posts": LATEST_POSTS_HANDLER,
}


def register_builtin_handlers(registry: HandlerRegistry) -> None:
    """Register every built-in handler on ``registry``."""
    for type_key, handler in BUILTIN_HANDLERS.items():
        registry.register(type_key, handler)


__all__ = [
    "BUILTIN_HANDLERS",
    "GROUP_HANDLER",
    "HEADING_HANDLER",
    "HTML_HANDLER",
    "IMAGE_HANDLER",
    "LATEST_POSTS_HANDLER",
    "LIST_HANDLER",
    "PARAGRAPH_HANDLER",
    "QUOTE_HANDLER",
    "SEPARATOR_HANDLER",
    "register_builtin_handlers",
]
