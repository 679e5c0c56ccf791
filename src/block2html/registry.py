#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/registry.py
"""Handler registry mapping block types to rendering handlers.

Each block type (``core/paragraph``, ``acme/card``, ...) is rendered by one
:class:`BlockHandler`: a transform function plus optional per-framework class
tables. Registries are plain objects, so independent configurations (one per
tenant, one per test) can coexist; a conversion uses whichever registry its
:class:`~block2html.converter.ConversionContext` carries.

For convenience a module-level default instance, ``handler_registry``, is
populated with the built-in handlers and any handlers published by installed
packages under the ``block2html.handlers`` entry point group on first use.

Examples
--------
Register a handler on the default registry:

    >>> from block2html.registry import BlockHandler, handler_registry
    >>> handler_registry.register("acme/card", BlockHandler(render_card))

Build an isolated registry:

    >>> registry = HandlerRegistry()
    >>> registry.register("core/paragraph", BlockHandler(render_paragraph))

Notes
-----
Registries are not synchronized. Register handlers at startup, before
conversions run.

"""

from __future__ import annotations

import importlib.metadata
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from block2html.constants import HANDLER_ENTRY_POINT_GROUP
from block2html.exceptions import ValidationError

if TYPE_CHECKING:
    from block2html.ast.nodes import Block
    from block2html.converter import ConversionContext

logger = logging.getLogger(__name__)

# attribute name -> class string, or attribute name -> {attribute value -> class string}
ClassTable = Mapping[str, Any]
TransformFunc = Callable[["Block", "ConversionContext"], str]


@dataclass(frozen=True)
class BlockHandler:
    """Rendering capability for one block type.

    Parameters
    ----------
    transform : callable
        ``(block, context) -> str`` producing the block's markup
    css_mapping : dict, default empty
        Class tables keyed by framework name (``"tailwind"``, ``"bootstrap"``, ...)
    name : str, default ""
        Optional human-readable name used in log messages

    """

    transform: TransformFunc
    css_mapping: dict[str, ClassTable] = field(default_factory=dict)
    name: str = ""

    def __call__(self, block: Block, context: ConversionContext) -> str:
        return self.transform(block, context)

    def class_table(self, framework: str) -> Optional[ClassTable]:
        """Return this handler's class table for ``framework``, if any."""
        return self.css_mapping.get(framework)


def as_block_handler(value: Any, name: str = "") -> BlockHandler:
    """Coerce a handler-like value into a :class:`BlockHandler`.

    Accepts a :class:`BlockHandler`, a plain ``(block, context) -> str``
    callable, or a mapping with ``transform`` (or ``transformBlock``) and
    optional ``css_mapping`` (or ``cssMapping``) keys.

    Raises
    ------
    ValidationError
        If ``value`` cannot be used as a handler

    """
    if isinstance(value, BlockHandler):
        return value
    if isinstance(value, Mapping):
        transform = value.get("transform") or value.get("transformBlock")
        css_mapping = value.get("css_mapping") or value.get("cssMapping") or {}
        if callable(transform):
            return BlockHandler(transform=transform, css_mapping=dict(css_mapping), name=name)
    elif callable(value):
        return BlockHandler(transform=value, name=name)
    raise ValidationError(
        f"Handler for {name!r} must be a BlockHandler or callable, got {type(value).__name__}",
        parameter_name="handler",
        parameter_value=value,
    )


class HandlerRegistry:
    """Registry of block handlers keyed by block type.

    Lookups are exact and case-sensitive. A missing handler is not an error:
    the converter falls back to the block's raw markup.

    Parameters
    ----------
    load_defaults : bool, default False
        Register the built-in handlers and entry point plugins on first access

    """

    def __init__(self, load_defaults: bool = False):
        self._handlers: dict[str, BlockHandler] = {}
        self._initialized = not load_defaults

    def _ensure_initialized(self) -> None:
        """Register built-ins and discover plugins on first access."""
        if not self._initialized:
            self._initialized = True
            from block2html.handlers import register_builtin_handlers

            register_builtin_handlers(self)
            self.discover_plugins()

    def register(self, type_key: str, handler: BlockHandler | TransformFunc) -> None:
        """Register ``handler`` for ``type_key``, replacing any previous entry.

        Parameters
        ----------
        type_key : str
            Block type name, e.g. ``"core/paragraph"``
        handler : BlockHandler or callable
            The handler; plain callables are wrapped in a :class:`BlockHandler`

        """
        self._ensure_initialized()
        if type_key in self._handlers:
            logger.debug(f"Handler for '{type_key}' already registered, replacing")
        self._handlers[type_key] = as_block_handler(handler, name=type_key)

    def lookup(self, type_key: str) -> Optional[BlockHandler]:
        """Return the handler registered for ``type_key``, or None."""
        self._ensure_initialized()
        return self._handlers.get(type_key)

    def unregister(self, type_key: str) -> bool:
        """Remove the handler for ``type_key``.

        Returns
        -------
        bool
            True if a handler was removed, False if none was registered

        """
        self._ensure_initialized()
        if type_key in self._handlers:
            del self._handlers[type_key]
            logger.debug(f"Unregistered handler: {type_key}")
            return True
        return False

    def has_handler(self, type_key: str) -> bool:
        self._ensure_initialized()
        return type_key in self._handlers

    def list_all(self) -> dict[str, BlockHandler]:
        """Return a snapshot copy of all registered handlers."""
        self._ensure_initialized()
        return dict(self._handlers)

    def copy(self) -> HandlerRegistry:
        """Return an independent registry with the same handlers."""
        clone = HandlerRegistry()
        clone._handlers = self.list_all()
        return clone

    def clear(self) -> None:
        """Remove every handler, built-ins included.

        This is primarily useful for testing.
        """
        self._handlers.clear()
        self._initialized = True
        logger.debug("Cleared handler registry")

    def discover_plugins(self) -> int:
        """Register handlers published under the ``block2html.handlers`` entry point group.

        Each entry point may load either a :class:`BlockHandler`, registered
        under the entry point's name, or a callable that receives this
        registry and registers handlers itself.

        Returns
        -------
        int
            Number of entry points loaded successfully

        """
        discovered_count = 0
        try:
            handler_eps = importlib.metadata.entry_points().select(group=HANDLER_ENTRY_POINT_GROUP)
        except Exception as e:
            logger.warning(f"Failed to discover handler plugins: {e}")
            return 0

        for ep in handler_eps:
            try:
                loaded = ep.load()
                if isinstance(loaded, BlockHandler):
                    self.register(ep.name, loaded)
                elif callable(loaded):
                    loaded(self)
                else:
                    logger.warning(f"Entry point '{ep.name}' is neither a BlockHandler nor callable, skipping")
                    continue
                discovered_count += 1
                logger.debug(f"Discovered handler plugin from entry point: {ep.name}")
            except Exception as e:
                logger.warning(f"Failed to load handler entry point '{ep.name}': {e}")

        if discovered_count:
            logger.info(f"Discovered {discovered_count} handler plugin(s) from entry points")
        return discovered_count

    def __contains__(self, type_key: object) -> bool:
        return isinstance(type_key, str) and self.has_handler(type_key)

    def __len__(self) -> int:
        self._ensure_initialized()
        return len(self._handlers)


# Default registry with built-in handlers (loaded lazily)
handler_registry = HandlerRegistry(load_defaults=True)


def register_block_handler(type_key: str, handler: BlockHandler | TransformFunc) -> None:
    """Register a handler on the default registry."""
    handler_registry.register(type_key, handler)


def get_block_handler(type_key: str) -> Optional[BlockHandler]:
    """Look up a handler on the default registry."""
    return handler_registry.lookup(type_key)


def unregister_block_handler(type_key: str) -> bool:
    """Remove a handler from the default registry."""
    return handler_registry.unregister(type_key)


def get_all_block_handlers() -> dict[str, BlockHandler]:
    """Return a snapshot of the default registry."""
    return handler_registry.list_all()


__all__ = [
    "BlockHandler",
    "ClassTable",
    "HandlerRegistry",
    "TransformFunc",
    "as_block_handler",
    "get_all_block_handlers",
    "get_block_handler",
    "handler_registry",
    "register_block_handler",
    "unregister_block_handler",
]
