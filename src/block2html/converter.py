#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/converter.py
"""Block-to-HTML conversion.

:class:`BlockConverter` walks the top level of a block document, renders each
block with its handler and joins the results. Handlers recurse into their own
children through the :class:`ConversionContext` they receive, which also
carries the options and the handler registry for the call, so no conversion
state is global.

Handler resolution, per block:

1. a per-call override from ``ConversionOptions.block_handlers``;
2. the registry carried by the context;
3. otherwise the block's raw segments, joined unmodified.

A handler that raises is logged and the block falls back to its raw segments.
With ``ConversionOptions.strict`` the failure is raised as
:class:`~block2html.exceptions.RenderingError`.

Examples
--------
    >>> from block2html import convert_blocks
    >>> convert_blocks([{"blockType": "core/paragraph", "attributes": {"align": "center"},
    ...                  "rawSegments": ["<p>Hello</p>"]}])
    '<p class="wp-block-paragraph has-text-align-center">Hello</p>'

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence, Union

from block2html.ast.nodes import Block, BlockList
from block2html.ast.serialization import dict_to_block, dict_to_blocks
from block2html.classes import resolve_block_classes
from block2html.exceptions import RenderingError, ValidationError
from block2html.hooks import run_block_hook
from block2html.options.conversion import ConversionOptions
from block2html.reconcile import reconcile
from block2html.registry import BlockHandler, HandlerRegistry, as_block_handler, handler_registry
from block2html.ssr import optimize_html

logger = logging.getLogger(__name__)

# Deepest nesting level kept for each optimization depth
_DEPTH_LIMITS = {"shallow": 0, "medium": 1}


@dataclass(frozen=True)
class RenderedBlock:
    """Result for one top-level block in ``"nodes"`` output mode.

    Parameters
    ----------
    block_type : str
        Type of the source block (empty for raw chunks)
    attributes : dict
        Copy of the source block's attributes
    markup : str
        The rendered HTML

    """

    block_type: str
    attributes: dict[str, Any] = field(default_factory=dict)
    markup: str = ""


@dataclass(frozen=True)
class ConversionContext:
    """State shared by one conversion call, passed to every handler.

    Parameters
    ----------
    options : ConversionOptions
        Active options
    registry : HandlerRegistry
        Registry used to resolve handlers
    depth : int, default 0
        Nesting depth of the block being rendered (0 for top-level blocks)

    """

    options: ConversionOptions
    registry: HandlerRegistry
    depth: int = 0

    def with_depth(self) -> ConversionContext:
        """Return a context one nesting level deeper."""
        return replace(self, depth=self.depth + 1)

    def resolve_handler(self, block_type: str) -> Optional[BlockHandler]:
        """Return the override or registered handler for ``block_type``."""
        override = self.options.block_handlers.get(block_type)
        if override is not None:
            return as_block_handler(override, name=block_type)
        return self.registry.lookup(block_type)

    def convert_block(self, block: Block) -> str:
        """Render one block at this context's depth."""
        return render_block(block, self)

    def convert_children(self, blocks: Sequence[Block]) -> str:
        """Render nested blocks one level deeper and join the results."""
        child_context = self.with_depth()
        return "".join(render_block(child, child_context) for child in blocks)

    def source_markup(self, block: Block) -> str:
        """Return the markup a handler starts from.

        Pre-rendered markup is used unless the content mode is ``raw``, in
        which case the block is rebuilt from its raw segments.
        """
        if self.options.content_mode != "raw" and block.rendered_markup:
            return block.rendered_markup
        return block.raw_markup

    def render_inner(self, block: Block) -> str:
        """Return the block's inner markup with nested blocks rendered.

        Rendered children replace the ``None`` placeholders of
        ``raw_segments`` in order; children without a placeholder are
        appended. When the segments hold no placeholder at all, the output
        is the rendered children alone.
        """
        if not block.children:
            return self.source_markup(block)
        if self.options.content_mode != "raw" and block.rendered_markup:
            return block.rendered_markup
        if None not in block.raw_segments:
            return self.convert_children(block.children)

        child_context = self.with_depth()
        children = iter(block.children)
        parts = []
        for segment in block.raw_segments:
            if segment is None:
                child = next(children, None)
                if child is not None:
                    parts.append(render_block(child, child_context))
            else:
                parts.append(segment)
        parts.extend(render_block(child, child_context) for child in children)
        return "".join(parts)

    def classes_for(self, block: Block, handler: Optional[BlockHandler] = None) -> str:
        """Resolve the class string for ``block`` using ``handler``'s class tables.

        When ``handler`` is omitted the block's own handler is looked up.
        """
        if handler is None:
            handler = self.resolve_handler(block.block_type)
        return resolve_block_classes(block, handler.css_mapping if handler else None, self.options)

    def reconcile(self, markup: str, tag: str, attributes: Mapping[str, Any]) -> str:
        """Reconcile ``markup`` with ``attributes`` under the active content mode."""
        return reconcile(
            markup, tag, attributes, self.options.content_mode, dedupe_classes=self.options.dedupe_merged_classes
        )

    def run_hook(self, feature: str, block: Block) -> Optional[str]:
        """Run the capability hook for ``feature``; None means no opinion."""
        return run_block_hook(feature, block, self.options)


def render_block(block: Block, context: ConversionContext) -> str:
    """Render one block with its handler, falling back to its raw segments.

    Raises
    ------
    RenderingError
        If the handler fails and ``strict`` is set

    """
    options = context.options
    if not block.block_type:
        return block.raw_markup

    handler = context.resolve_handler(block.block_type)
    if handler is None:
        if options.debug:
            logger.debug(f"No handler for {block.block_type}, using raw markup")
        return block.raw_markup

    try:
        result = handler(block, context)
    except RenderingError:
        raise
    except Exception as e:
        if options.strict:
            raise RenderingError(
                f"Handler for {block.block_type} failed: {e}", block_type=block.block_type, original_error=e
            ) from e
        logger.warning(f"Handler for {block.block_type} failed, using raw markup: {e}", exc_info=True)
        return block.raw_markup

    if not isinstance(result, str):
        logger.warning(
            f"Handler for {block.block_type} returned {type(result).__name__}, expected str; using raw markup"
        )
        return block.raw_markup
    return result


def _prune(block: Block, depth: int, limit: int) -> tuple[Block, int]:
    if depth >= limit:
        dropped = sum(1 for child in block.children for _ in child.walk())
        return (replace(block, children=[]) if block.children else block), dropped
    dropped = 0
    children = []
    for child in block.children:
        pruned, count = _prune(child, depth + 1, limit)
        children.append(pruned)
        dropped += count
    return replace(block, children=children), dropped


def prune_to_depth(blocks: Sequence[Block], optimization_depth: str) -> list[Block]:
    """Drop blocks nested deeper than ``optimization_depth`` allows.

    ``"shallow"`` keeps top-level blocks only, ``"medium"`` keeps one level
    of children and ``"full"`` keeps everything. Pruned blocks are copies;
    the input is not modified. Dropping content is logged as a warning.
    """
    limit = _DEPTH_LIMITS.get(optimization_depth)
    if limit is None:
        return list(blocks)

    result = []
    dropped = 0
    for block in blocks:
        pruned, count = _prune(block, 0, limit)
        result.append(pruned)
        dropped += count
    if dropped:
        logger.warning(f"Optimization depth '{optimization_depth}' dropped {dropped} nested block(s)")
    return result


class BlockConverter:
    """Convert block documents to HTML.

    Parameters
    ----------
    options : ConversionOptions, optional
        Conversion options (defaults when omitted)
    registry : HandlerRegistry, optional
        Handler registry; the default ``handler_registry`` when omitted

    """

    def __init__(self, options: Optional[ConversionOptions] = None, registry: Optional[HandlerRegistry] = None):
        self.options = options or ConversionOptions()
        self.registry = registry if registry is not None else handler_registry

    def normalize(self, data: Any) -> tuple[list[Block], Optional[str]]:
        """Return the top-level blocks and any document-level rendered markup.

        Accepts a :class:`BlockList`, a single :class:`Block`, a list of
        blocks, or the equivalent dictionaries.

        Raises
        ------
        ValidationError
            If ``data`` is none of the accepted shapes
        MalformedBlockError
            If a dictionary does not follow the block schema

        """
        if isinstance(data, BlockList):
            return list(data.blocks), data.rendered_markup
        if isinstance(data, Block):
            return [data], None
        if isinstance(data, (list, tuple)):
            blocks = []
            for index, item in enumerate(data):
                if isinstance(item, Block):
                    blocks.append(item)
                elif isinstance(item, Mapping):
                    blocks.append(dict_to_block(item, f"blocks[{index}]"))
                else:
                    raise ValidationError(
                        f"Block list items must be blocks or mappings, got {type(item).__name__}",
                        parameter_name="data",
                        parameter_value=item,
                    )
            return blocks, None
        if isinstance(data, Mapping):
            document = dict_to_blocks(data)
            return list(document.blocks), document.rendered_markup
        raise ValidationError(
            f"Cannot convert input of type {type(data).__name__}", parameter_name="data", parameter_value=data
        )

    def convert(self, data: Any) -> Union[str, list[RenderedBlock]]:
        """Convert a block document.

        Returns
        -------
        str or list of RenderedBlock
            One HTML string in ``"html"`` mode, one result per top-level block
            in ``"nodes"`` mode

        """
        options = self.options
        blocks, document_markup = self.normalize(data)

        if options.content_mode != "raw" and document_markup:
            if options.debug:
                logger.debug("Using document-level rendered markup")
            if options.output_mode == "nodes":
                return [RenderedBlock(block_type="", markup=document_markup)]
            return self._finish(document_markup)

        if options.ssr.enabled:
            blocks = prune_to_depth(blocks, options.ssr.optimization_depth)

        context = ConversionContext(options=options, registry=self.registry)
        if options.output_mode == "nodes":
            return [
                RenderedBlock(
                    block_type=block.block_type,
                    attributes=dict(block.attributes),
                    markup=render_block(block, context),
                )
                for block in blocks
            ]

        return self._finish("".join(render_block(block, context) for block in blocks))

    def convert_block(self, block: Block, context: Optional[ConversionContext] = None) -> str:
        """Render a single block (without SSR optimization)."""
        if context is None:
            context = ConversionContext(options=self.options, registry=self.registry)
        return render_block(block, context)

    def _finish(self, html: str) -> str:
        if self.options.ssr.enabled:
            return optimize_html(html, self.options.ssr, self.options)
        return html


def convert_blocks(
    data: Any,
    options: Optional[Union[ConversionOptions, Mapping[str, Any]]] = None,
    *,
    registry: Optional[HandlerRegistry] = None,
    **kwargs: Any,
) -> Union[str, list[RenderedBlock]]:
    """Convert a block document to HTML.

    Parameters
    ----------
    data : BlockList, Block, list or Mapping
        The document (see :meth:`BlockConverter.normalize`)
    options : ConversionOptions or Mapping, optional
        Options; a mapping is read with :meth:`ConversionOptions.from_dict`
    registry : HandlerRegistry, optional
        Handler registry; the default registry when omitted
    **kwargs
        Options overriding ``options``; any key :meth:`ConversionOptions.from_dict` accepts

    Returns
    -------
    str or list of RenderedBlock
        The converted document

    Examples
    --------
    >>> convert_blocks(blocks, css_framework="tailwind", content_mode="blended")

    """
    if options is None:
        options = ConversionOptions()
    elif isinstance(options, Mapping):
        options = ConversionOptions.from_dict(options)
    if kwargs:
        options = options.create_updated(**ConversionOptions.normalize_options(kwargs))
    return BlockConverter(options=options, registry=registry).convert(data)


__all__ = [
    "BlockConverter",
    "ConversionContext",
    "RenderedBlock",
    "convert_blocks",
    "prune_to_depth",
    "render_block",
]
