#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for block2html.

Options are frozen dataclasses. Use ``create_updated()`` to derive a modified
copy and ``from_dict()`` to build options from configuration files.
"""

from __future__ import annotations

from block2html.options.base import CloneFrozenMixin, camel_to_snake
from block2html.options.conversion import ConversionOptions, resolve_content_mode
from block2html.options.ssr import SsrOptions

__all__ = [
    "CloneFrozenMixin",
    "ConversionOptions",
    "SsrOptions",
    "camel_to_snake",
    "resolve_content_mode",
]
