"""block2html - convert WordPress block-editor documents to HTML.

block2html walks a tree of editor blocks (as stored by the block editor or
returned by the REST API) and renders each one through a handler registered
for its type. Handlers choose CSS classes for the configured framework
(none, Tailwind, Bootstrap or a custom class map) and reconcile them with the
markup the editor already produced. An optional server-side rendering pass
then optimizes the assembled page.

Key Features
------------
- Pluggable handler registry with entry-point discovery
- Framework-aware class resolution driven by block attributes
- Three content modes for editor markup: raw, trust-rendered, blended
- Capability hooks for dynamic blocks (latest posts, custom HTML)
- SSR optimizer: lazy media, preconnect hints, critical CSS, fold splitting
- HTML string or per-block node output

Examples
--------
Basic conversion:

    >>> from block2html import convert_blocks
    >>> blocks = [{"blockType": "core/paragraph", "attributes": {"align": "center"},
    ...            "rawSegments": ["<p>Hello</p>"]}]
    >>> convert_blocks(blocks)
    '<p class="wp-block-paragraph has-text-align-center">Hello</p>'

With a framework, blended content and SSR:

    >>> html = convert_blocks(
    ...     blocks,
    ...     css_framework="tailwind",
    ...     content_mode="blended",
    ...     ssr={"level": "maximum", "minify_output": True},
    ... )

Registering a handler:

    >>> from block2html import register_block_handler
    >>> register_block_handler("acme/banner", lambda block, context: "<aside>Sale!</aside>")

"""

__version__ = "1.0.0"

from block2html.ast import Block, BlockList, dict_to_blocks, json_to_blocks
from block2html.classes import resolve_block_classes
from block2html.converter import BlockConverter, ConversionContext, RenderedBlock, convert_blocks
from block2html.exceptions import (
    Block2HtmlError,
    ConfigError,
    MalformedBlockError,
    RenderingError,
    ValidationError,
)
from block2html.markup import create_element
from block2html.options import ConversionOptions, SsrOptions
from block2html.reconcile import reconcile
from block2html.registry import (
    BlockHandler,
    HandlerRegistry,
    get_all_block_handlers,
    get_block_handler,
    handler_registry,
    register_block_handler,
    unregister_block_handler,
)
from block2html.ssr import SsrOptimizer, optimize_html

__all__ = [
    "__version__",
    # Conversion
    "convert_blocks",
    "BlockConverter",
    "ConversionContext",
    "RenderedBlock",
    # Block model
    "Block",
    "BlockList",
    "dict_to_blocks",
    "json_to_blocks",
    # Options
    "ConversionOptions",
    "SsrOptions",
    # Handlers
    "BlockHandler",
    "HandlerRegistry",
    "handler_registry",
    "register_block_handler",
    "get_block_handler",
    "unregister_block_handler",
    "get_all_block_handlers",
    # Building blocks
    "reconcile",
    "resolve_block_classes",
    "create_element",
    "SsrOptimizer",
    "optimize_html",
    # Exceptions
    "Block2HtmlError",
    "ValidationError",
    "ConfigError",
    "MalformedBlockError",
    "RenderingError",
]
