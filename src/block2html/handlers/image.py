#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/image.py
"""Handler for ``core/image`` blocks.

Saved image markup is a ``<figure>`` around an ``<img>`` (optionally inside a
link, followed by a ``<figcaption>``). Classes apply to the ``<img>``:

- ``trust-rendered`` returns the figure unchanged;
- ``blended`` patches the ``<img>`` start tag inside the figure;
- ``raw`` rebuilds the image from the block attributes (``url``/``src``,
  ``alt``, ``width``, ``height``, ``href``, ``caption``), falling back to the
  saved markup when the block has no source URL.
"""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.markup import create_element
from block2html.registry import BlockHandler
from block2html.utils.fragment import MarkupTree


def _patch_figure_image(markup: str, context: ConversionContext, classes: str) -> str:
    tree = MarkupTree.parse(markup)
    image = tree.find_first("img")
    if image is None:
        return markup
    patched = context.reconcile(tree.outer_markup(image), "img", {"class": classes})
    return markup[: image.start] + patched + markup[image.end :]


def render_image(block: Block, context: ConversionContext) -> str:
    classes = context.classes_for(block)
    markup = context.source_markup(block)
    mode = context.options.content_mode

    stripped = markup.strip()
    if stripped.startswith("<figure") and "<img" in stripped and mode != "raw":
        if mode == "trust-rendered":
            return markup
        return _patch_figure_image(markup, context, classes)

    src = block.get("url") or block.get("src")
    if not src:
        return markup

    image_attributes = {"class": classes, "src": src, "alt": block.get("alt") or ""}
    if block.get("width"):
        image_attributes["width"] = block.get("width")
    if block.get("height"):
        image_attributes["height"] = block.get("height")
    image = create_element("img", image_attributes)

    href = block.get("href")
    if href:
        image = create_element("a", {"href": href}, image)

    caption = block.get("caption")
    if caption:
        return create_element("figure", {}, f"{image}<figcaption>{caption}</figcaption>")
    return image


IMAGE_HANDLER = BlockHandler(
    transform=render_image,
    name="core/image",
    css_mapping={
        "tailwind": {
            "block": "max-w-full h-auto",
            "align": {
                "left": "float-left mr-4 mb-4",
                "center": "mx-auto",
                "right": "float-right ml-4 mb-4",
            },
            "sizeSlug": {
                "thumbnail": "max-w-xs",
                "medium": "max-w-md",
                "large": "max-w-lg",
                "full": "w-full",
            },
        },
        "bootstrap": {
            "block": "img-fluid",
            "align": {
                "left": "float-start me-3 mb-3",
                "center": "mx-auto d-block",
                "right": "float-end ms-3 mb-3",
            },
            "sizeSlug": {
                "thumbnail": "w-25",
                "medium": "w-50",
                "large": "w-75",
                "full": "w-100",
            },
        },
    },
)
