#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/markup.py
"""Element synthesis helpers.

Attribute values are escaped for the double quote only. Callers are expected
to pass text that is already safe for HTML.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from block2html.constants import VOID_ELEMENTS
from block2html.utils.fragment import parse_attribute_tokens


def escape_attribute(value: Any) -> str:
    """Escape a value for use inside a double-quoted attribute.

    Examples
    --------
    >>> escape_attribute('say "hi"')
    'say &quot;hi&quot;'

    """
    return str(value).replace('"', "&quot;")


def render_attributes(attributes: Optional[Mapping[str, Any]]) -> str:
    """Serialize attributes in order, each preceded by a space.

    ``True`` renders the bare attribute name; ``False`` and ``None`` are
    omitted. An empty ``class`` value is omitted as well.
    """
    if not attributes:
        return ""
    parts = []
    for name, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        elif name == "class" and value == "":
            continue
        else:
            parts.append(f' {name}="{escape_attribute(value)}"')
    return "".join(parts)


def create_element(tag: str, attributes: Optional[Mapping[str, Any]] = None, content: str = "") -> str:
    """Build the markup for one element.

    Parameters
    ----------
    tag : str
        Element name
    attributes : Mapping, optional
        Attributes in output order
    content : str, default ""
        Inner markup, inserted verbatim

    Returns
    -------
    str
        ``<tag ...>content</tag>``, or ``<tag ... />`` for a void element
        without content

    Examples
    --------
    >>> create_element("p", {"class": "lead"}, "Hi")
    '<p class="lead">Hi</p>'
    >>> create_element("img", {"src": "a.png", "alt": ""})
    '<img src="a.png" alt="" />'

    """
    rendered = render_attributes(attributes)
    if tag.lower() in VOID_ELEMENTS and not content:
        return f"<{tag}{rendered} />"
    return f"<{tag}{rendered}>{content}</{tag}>"


def add_attribute(start_tag: str, name: str, value: Any = True) -> str:
    """Insert an attribute at the end of a raw start tag.

    The attribute goes before ``>`` (or ``/>``) and any whitespace preceding
    it. Existing attributes are not checked.

    Examples
    --------
    >>> add_attribute('<img src="a.png" />', "loading", "lazy")
    '<img src="a.png" loading="lazy" />'

    """
    position = attribute_insertion_point(start_tag)
    return start_tag[:position] + render_attributes({name: value}) + start_tag[position:]


def attribute_insertion_point(start_tag: str) -> int:
    """Return the offset in a raw start tag where a new attribute belongs.

    That is before ``>``, a self-closing ``/`` and any whitespace preceding
    them. A ``/`` that ends an unquoted value (``<img src=a/>``) is part of
    the value and stays in place.
    """
    position = len(start_tag) - 1 if start_tag.endswith(">") else len(start_tag)
    if start_tag[:position].endswith("/"):
        tokens = parse_attribute_tokens(start_tag[:position])
        last = tokens[-1] if tokens else None
        if last is None or last.quote or last.value is None or last.end < position:
            position -= 1
    while position > 1 and start_tag[position - 1].isspace():
        position -= 1
    return position


__all__ = ["add_attribute", "attribute_insertion_point", "create_element", "escape_attribute", "render_attributes"]
