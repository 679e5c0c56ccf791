#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/classes.py
"""Class resolution for blocks.

With the ``none`` framework a block gets the editor's own class names
(``wp-block-paragraph``, ``has-text-align-center``). With any other framework
the classes come from a class table: the per-block-type override in
``ConversionOptions.custom_class_map`` when there is one, otherwise the
handler's table for the active framework.

A class table maps attribute names to either a class string, appended
whenever the attribute is present, or to a mapping from attribute value to
class string. The ``"block"`` entry holds classes applied unconditionally.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from block2html.ast.nodes import Block
from block2html.constants import (
    ALIGN_CLASS_PREFIX,
    CLASS_TABLE_BASE_KEY,
    CORE_BLOCK_NAMESPACE,
    DEFAULT_BLOCK_CLASS_PREFIX,
)
from block2html.options.conversion import ConversionOptions

logger = logging.getLogger(__name__)


def default_block_class(block_type: str) -> str:
    """Derive the editor's class name for a block type.

    Examples
    --------
    >>> default_block_class("core/paragraph")
    'wp-block-paragraph'
    >>> default_block_class("acme/card")
    'wp-block-acme-card'

    """
    name = block_type
    if name.startswith(CORE_BLOCK_NAMESPACE):
        name = name[len(CORE_BLOCK_NAMESPACE) :]
    name = name.replace("/", "-")
    return f"{DEFAULT_BLOCK_CLASS_PREFIX}{name}" if name else ""


def _value_class(entry: Mapping[Any, Any], value: Any) -> Optional[str]:
    candidates: list[Any] = []
    try:
        hash(value)
    except TypeError:
        pass
    else:
        candidates.append(value)
    if isinstance(value, bool):
        candidates.append("true" if value else "false")
    candidates.append(str(value))

    for candidate in candidates:
        found = entry.get(candidate)
        if found:
            return str(found)
    return None


def select_class_table(
    block: Block, class_tables: Optional[Mapping[str, Any]], options: ConversionOptions
) -> Optional[Mapping[str, Any]]:
    """Return the class table that applies to ``block``, or None."""
    custom = options.custom_class_map.get(block.block_type)
    if custom is not None:
        return custom
    if class_tables:
        return class_tables.get(options.css_framework)
    return None


def classes_from_table(block: Block, table: Mapping[str, Any]) -> list[str]:
    """Collect the classes a table assigns to ``block``, in order."""
    classes: list[str] = []
    base = table.get(CLASS_TABLE_BASE_KEY)
    if isinstance(base, str) and base:
        classes.append(base)

    for name, value in block.attributes.items():
        if name == CLASS_TABLE_BASE_KEY:
            continue
        entry = table.get(name)
        if entry is None:
            continue
        if isinstance(entry, str):
            if entry:
                classes.append(entry)
        elif isinstance(entry, Mapping):
            found = _value_class(entry, value)
            if found:
                classes.append(found)
    return classes


def resolve_block_classes(
    block: Block, class_tables: Optional[Mapping[str, Any]], options: ConversionOptions
) -> str:
    """Compute the class string for a block.

    Parameters
    ----------
    block : Block
        The block being rendered
    class_tables : Mapping, optional
        The handler's class tables keyed by framework name
    options : ConversionOptions
        Active options (framework and custom class map)

    Returns
    -------
    str
        Space-joined classes in order of discovery; empty when nothing applies.
        Repeated classes are kept.

    """
    if options.css_framework == "none":
        classes = []
        base = default_block_class(block.block_type)
        if base:
            classes.append(base)
        align = block.get("align")
        if align:
            classes.append(f"{ALIGN_CLASS_PREFIX}{align}")
    else:
        table = select_class_table(block, class_tables, options)
        classes = classes_from_table(block, table) if table else []

    result = " ".join(classes)
    if options.debug:
        logger.debug(f"Classes for {block.block_type or '<raw>'} ({options.css_framework}): {result!r}")
    return result


__all__ = ["classes_from_table", "default_block_class", "resolve_block_classes", "select_class_table"]
