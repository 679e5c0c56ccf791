#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/ast/__init__.py
"""Block model and serialization.

- nodes: the :class:`Block` and :class:`BlockList` dataclasses
- serialization: conversion from/to dictionaries and JSON
"""

from block2html.ast.nodes import Block, BlockList
from block2html.ast.serialization import (
    block_to_dict,
    blocks_to_dict,
    blocks_to_json,
    dict_to_block,
    dict_to_blocks,
    json_to_blocks,
)

__all__ = [
    "Block",
    "BlockList",
    "block_to_dict",
    "blocks_to_dict",
    "blocks_to_json",
    "dict_to_block",
    "dict_to_blocks",
    "json_to_blocks",
]
