#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/ast/serialization.py
"""Dictionary and JSON (de)serialization for blocks.

Two spellings of the block schema are accepted on input:

* the canonical one: ``blockType``, ``attributes``, ``children``,
  ``rawSegments``, ``renderedMarkup``;
* the WordPress one, as returned by ``parse_blocks()`` and the REST API:
  ``blockName``, ``attrs``, ``innerBlocks``, ``innerContent``, ``innerHTML``
  and, on the document wrapper, ``rendered``.

Output always uses the canonical keys.

Examples
--------
    >>> from block2html.ast.serialization import dict_to_block
    >>> block = dict_to_block({"blockName": "core/paragraph", "attrs": {},
    ...                        "innerBlocks": [], "innerContent": ["<p>Hi</p>"]})
    >>> block.block_type
    'core/paragraph'

"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from block2html.ast.nodes import Block, BlockList
from block2html.exceptions import MalformedBlockError

_TYPE_KEYS = ("blockType", "blockName", "block_type")
_ATTRIBUTE_KEYS = ("attributes", "attrs")
_CHILDREN_KEYS = ("children", "innerBlocks", "inner_blocks")
_SEGMENT_KEYS = ("rawSegments", "innerContent", "raw_segments")
_RENDERED_KEYS = ("renderedMarkup", "rendered", "rendered_markup")


def _first_present(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _rendered_value(value: Any, path: str) -> Optional[str]:
    # REST API payloads wrap rendered HTML as {"rendered": "...", "protected": false}
    if isinstance(value, Mapping):
        value = value.get("rendered")
    if value is None or isinstance(value, str):
        return value
    raise MalformedBlockError(f"Rendered markup must be a string, got {type(value).__name__}", path)


def dict_to_block(data: Mapping[str, Any], path: str = "block") -> Block:
    """Build a :class:`Block` from its dictionary representation.

    Parameters
    ----------
    data : Mapping
        Block dictionary in canonical or WordPress spelling
    path : str, default "block"
        Location of ``data`` in the input, used in error messages

    Returns
    -------
    Block
        The reconstructed block (children included)

    Raises
    ------
    MalformedBlockError
        If a field has the wrong shape

    """
    if not isinstance(data, Mapping):
        raise MalformedBlockError(f"Block must be a mapping, got {type(data).__name__}", path)

    block_type = _first_present(data, _TYPE_KEYS) or ""
    if not isinstance(block_type, str):
        raise MalformedBlockError(f"Block type must be a string, got {type(block_type).__name__}", path)

    attributes = _first_present(data, _ATTRIBUTE_KEYS) or {}
    # PHP serializes an empty attribute array as []
    if isinstance(attributes, list) and not attributes:
        attributes = {}
    if not isinstance(attributes, Mapping):
        raise MalformedBlockError(f"Block attributes must be a mapping, got {type(attributes).__name__}", path)

    children_data = _first_present(data, _CHILDREN_KEYS) or []
    if not isinstance(children_data, list):
        raise MalformedBlockError(f"Block children must be a list, got {type(children_data).__name__}", path)
    children = [dict_to_block(child, f"{path}.children[{index}]") for index, child in enumerate(children_data)]

    segments = _first_present(data, _SEGMENT_KEYS)
    if segments is None:
        inner_html = data.get("innerHTML")
        segments = [inner_html] if inner_html else []
    elif isinstance(segments, str):
        segments = [segments]
    if not isinstance(segments, list):
        raise MalformedBlockError(f"Raw segments must be a list, got {type(segments).__name__}", path)
    for index, segment in enumerate(segments):
        if segment is not None and not isinstance(segment, str):
            raise MalformedBlockError(
                f"Raw segment must be a string or null, got {type(segment).__name__}", f"{path}.rawSegments[{index}]"
            )

    rendered = _rendered_value(_first_present(data, _RENDERED_KEYS), path)

    return Block(
        block_type=block_type,
        attributes=dict(attributes),
        children=children,
        raw_segments=list(segments),
        rendered_markup=rendered,
    )


def dict_to_blocks(data: Any) -> BlockList:
    """Build a :class:`BlockList` from a list, a wrapper dict, or a single block dict.

    Parameters
    ----------
    data : list, Mapping
        A list of block dicts, a wrapper ``{"blocks": [...], "rendered": ...}``,
        or one block dict

    Returns
    -------
    BlockList
        Normalized document

    Raises
    ------
    MalformedBlockError
        If ``data`` has none of the accepted shapes

    """
    if isinstance(data, list):
        return BlockList(blocks=[dict_to_block(item, f"blocks[{index}]") for index, item in enumerate(data)])

    if isinstance(data, Mapping):
        if "blocks" in data:
            blocks_data = data["blocks"]
            if not isinstance(blocks_data, list):
                raise MalformedBlockError(
                    f"'blocks' must be a list, got {type(blocks_data).__name__}", "blocks"
                )
            blocks = [dict_to_block(item, f"blocks[{index}]") for index, item in enumerate(blocks_data)]
            rendered = _rendered_value(_first_present(data, _RENDERED_KEYS), "document")
            return BlockList(blocks=blocks, rendered_markup=rendered)
        return BlockList(blocks=[dict_to_block(data)])

    raise MalformedBlockError(f"Expected a list or mapping of blocks, got {type(data).__name__}", "document")


def block_to_dict(block: Block) -> dict[str, Any]:
    """Convert a block (and its children) to the canonical dictionary form."""
    result: dict[str, Any] = {
        "blockType": block.block_type,
        "attributes": dict(block.attributes),
        "children": [block_to_dict(child) for child in block.children],
        "rawSegments": list(block.raw_segments),
    }
    if block.rendered_markup is not None:
        result["renderedMarkup"] = block.rendered_markup
    return result


def blocks_to_dict(document: BlockList) -> dict[str, Any]:
    """Convert a :class:`BlockList` to the canonical wrapper dictionary."""
    result: dict[str, Any] = {"blocks": [block_to_dict(block) for block in document.blocks]}
    if document.rendered_markup is not None:
        result["renderedMarkup"] = document.rendered_markup
    return result


def json_to_blocks(json_str: str) -> BlockList:
    """Parse a JSON document into a :class:`BlockList`.

    Raises
    ------
    MalformedBlockError
        If the text is not valid JSON or does not follow the block schema

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise MalformedBlockError(f"Invalid JSON: {e}", original_error=e) from e
    return dict_to_blocks(data)


def blocks_to_json(document: BlockList, indent: int | None = None) -> str:
    """Serialize a :class:`BlockList` to JSON using the canonical keys."""
    return json.dumps(blocks_to_dict(document), indent=indent, ensure_ascii=False)


__all__ = [
    "dict_to_block",
    "dict_to_blocks",
    "block_to_dict",
    "blocks_to_dict",
    "json_to_blocks",
    "blocks_to_json",
]
