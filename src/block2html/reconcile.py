#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/reconcile.py
"""Reconciliation of pre-rendered markup with computed attributes.

A block may arrive with markup that the source system already rendered. Each
handler knows which element it would produce (``<p>``, ``<h2>``, ...) and
which attributes it wants on it. :func:`reconcile` combines the two under one
of three content-fidelity modes:

``trust-rendered``
    Return the prior markup unchanged.
``raw``
    Discard the wrapping element(s), keep their inner content byte-for-byte
    and synthesize fresh elements carrying the new attributes.
``blended``
    Keep the wrapping element(s) and patch their start tags: classes are
    appended to the existing ones, other attributes are added or
    overwritten. Markup without a recognizable wrapper is rebuilt as in
    ``raw``.

Wrapper detection works on a :class:`~block2html.utils.fragment.MarkupTree`:
the trimmed markup is *wrapped* when its top level holds only closed elements
of the expected tag, separated by whitespace. A run of sibling elements
(two adjacent paragraphs, for example) is recognized as well as a single one.
Malformed markup never raises; it is simply not wrapped.

Examples
--------
    >>> reconcile('<p class="a">Hi</p>', "p", {"class": "c"}, "blended")
    '<p class="a c">Hi</p>'
    >>> reconcile('<p class="a">Hi</p>', "p", {"class": "c"}, "raw")
    '<p class="c">Hi</p>'

"""

from __future__ import annotations

from typing import Any, Mapping

from block2html.markup import attribute_insertion_point, create_element, escape_attribute
from block2html.options.conversion import resolve_content_mode
from block2html.utils.fragment import FragmentNode, MarkupTree


def merge_class_values(existing: str, new: str, dedupe: bool = False) -> str:
    """Append ``new`` class tokens to ``existing``.

    Without ``dedupe`` the two values are space-joined as they are, so
    repeating a merge repeats the classes. With ``dedupe`` tokens already
    present are dropped, which makes the merge idempotent.
    """
    if not existing.strip():
        return new
    if not new.strip():
        return existing
    if not dedupe:
        return f"{existing} {new}"
    tokens: list[str] = []
    for token in existing.split() + new.split():
        if token not in tokens:
            tokens.append(token)
    return " ".join(tokens)


def is_wrapped(markup: str, tag: str) -> bool:
    """Return True if the trimmed markup consists of ``tag`` elements only."""
    return MarkupTree.parse(markup.strip()).is_run_of(tag)


def extract_inner_content(markup: str, tag: str) -> str:
    """Return the content inside the ``tag`` wrapper(s) of ``markup``.

    For a run of sibling wrappers the inner contents are concatenated. Markup
    that is not wrapped is returned unchanged.
    """
    tree = MarkupTree.parse(markup.strip())
    if not tree.is_run_of(tag):
        return markup
    return "".join(tree.inner_markup(node) for node in tree.root_elements())


def _rebuild(tree: MarkupTree, tag: str, attributes: Mapping[str, Any]) -> str:
    parts = []
    for node in tree.root_nodes():
        if node.is_element:
            parts.append(create_element(tag, attributes, tree.inner_markup(node)))
        else:
            parts.append(tree.source[node.start : node.end])
    return "".join(parts)


def _format_attribute(name: str, value: Any) -> str:
    if value is True:
        return name
    return f'{name}="{escape_attribute(value)}"'


def _insertion_point(tree: MarkupTree, node: FragmentNode) -> int:
    return node.start + attribute_insertion_point(tree.source[node.start : node.start_tag_end])


def _patch_start_tag(
    tree: MarkupTree, node: FragmentNode, attributes: Mapping[str, Any], dedupe: bool
) -> list[tuple[int, int, str]]:
    edits: list[tuple[int, int, str]] = []
    injected: list[str] = []

    for name, value in attributes.items():
        if value is None or value is False:
            continue
        token = node.attribute(name)
        if name == "class":
            new_value = str(value)
            if not new_value.strip():
                continue
            if token is not None:
                merged = merge_class_values(token.value or "", new_value, dedupe)
                edits.append((token.start, token.end, _format_attribute("class", merged)))
            else:
                injected.append(_format_attribute("class", new_value))
        elif token is not None:
            edits.append((token.start, token.end, _format_attribute(name, value)))
        else:
            injected.append(_format_attribute(name, value))

    if injected:
        position = _insertion_point(tree, node)
        edits.append((position, position, "".join(f" {item}" for item in injected)))
    return edits


def _patch(tree: MarkupTree, attributes: Mapping[str, Any], dedupe: bool) -> str:
    edits: list[tuple[int, int, str]] = []
    for node in tree.root_elements():
        edits.extend(_patch_start_tag(tree, node, attributes, dedupe))

    result = tree.source
    for start, end, replacement in sorted(edits, key=lambda edit: (edit[0], edit[1]), reverse=True):
        result = result[:start] + replacement + result[end:]
    return result


def reconcile(
    prior_markup: str,
    expected_tag: str,
    new_attributes: Mapping[str, Any] | None,
    mode: str,
    *,
    dedupe_classes: bool = False,
) -> str:
    """Combine pre-rendered markup with freshly computed attributes.

    Parameters
    ----------
    prior_markup : str
        Markup previously rendered for the block (or its raw inner markup)
    expected_tag : str
        Element the handler produces, e.g. ``"p"`` or ``"h2"``
    new_attributes : Mapping, optional
        Attributes to apply, in output order
    mode : str
        Content-fidelity mode; deprecated aliases are accepted
    dedupe_classes : bool, default False
        Drop repeated class tokens when merging in ``blended`` mode

    Returns
    -------
    str
        The reconciled markup

    Raises
    ------
    ValidationError
        If ``mode`` is not a known content mode

    """
    mode = resolve_content_mode(mode)
    if mode == "trust-rendered":
        return prior_markup

    attributes = new_attributes or {}
    trimmed = prior_markup.strip()
    tree = MarkupTree.parse(trimmed)
    wrapped = tree.is_run_of(expected_tag)

    if not wrapped:
        return create_element(expected_tag, attributes, trimmed)
    if mode == "raw":
        return _rebuild(tree, expected_tag, attributes)
    return _patch(tree, attributes, dedupe_classes)


__all__ = ["extract_inner_content", "is_wrapped", "merge_class_values", "reconcile"]
