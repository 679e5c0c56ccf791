#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/handlers/latest_posts.py
"""Handler for ``core/latest-posts`` blocks.

The post list is dynamic content that the converter cannot fetch. A
``"latest-posts"`` hook may supply the markup; without one (or when the hook
fails or returns nothing) a placeholder list is rendered, with the block's
display settings exposed as ``data-*`` attributes for client-side hydration.
"""

from __future__ import annotations

from block2html.ast.nodes import Block
from block2html.converter import ConversionContext
from block2html.handlers.base import flag
from block2html.markup import create_element
from block2html.registry import BlockHandler

LATEST_POSTS_HOOK = "latest-posts"

DEFAULT_POSTS_TO_SHOW = 5
MAX_POSTS_TO_SHOW = 100

# Classes of the placeholder parts, per framework and layout
_PART_CLASSES = {
    "tailwind": {
        "list": "space-y-4",
        "grid": "grid grid-cols-1 md:grid-cols-2 lg:grid-cols-3 gap-6",
        "list-item": "flex flex-col mb-4",
        "grid-item": "flex flex-col h-full",
        "image": "mb-2",
        "content": "flex-1",
        "title": "text-lg font-bold mb-1",
        "date": "text-sm text-gray-500 mb-2",
        "excerpt": "text-sm text-gray-700",
    },
    "bootstrap": {
        "list": "list-unstyled",
        "grid": "row row-cols-1 row-cols-md-3 g-4",
        "list-item": "mb-3",
        "grid-item": "col",
        "image": "mb-2",
        "content": "",
        "title": "h5 mb-1",
        "date": "small text-muted mb-2",
        "excerpt": "small",
    },
}
_DEFAULT_PART_CLASSES = {
    "list": "wp-block-latest-posts__list",
    "grid": "wp-block-latest-posts__grid-container",
    "list-item": "wp-block-latest-posts__list-item",
    "grid-item": "wp-block-latest-posts__grid-item",
    "image": "wp-block-latest-posts__featured-image",
    "content": "wp-block-latest-posts__content",
    "title": "wp-block-latest-posts__title",
    "date": "wp-block-latest-posts__date",
    "excerpt": "wp-block-latest-posts__excerpt",
}


def posts_to_show(block: Block) -> int:
    """Return the number of posts to show, clamped to the editor's range."""
    count = block.get("postsToShow") or DEFAULT_POSTS_TO_SHOW
    try:
        count = int(count)
    except (TypeError, ValueError):
        return DEFAULT_POSTS_TO_SHOW
    return min(max(0, count), MAX_POSTS_TO_SHOW)


def _placeholder_posts(block: Block, framework: str) -> str:
    part_classes = _PART_CLASSES.get(framework, _DEFAULT_PART_CLASSES)
    layout = "grid" if block.get("postLayout") == "grid" else "list"
    count = posts_to_show(block)
    excerpt_kind = "excerpt" if block.get("displayPostContentRadio", "excerpt") == "excerpt" else "full content"

    items = []
    for number in range(1, count + 1):
        parts = []
        if block.get("displayFeaturedImage"):
            image = create_element(
                "img", {"src": "https://via.placeholder.com/300x200", "alt": f"Placeholder image {number}"}
            )
            parts.append(create_element("div", {"class": part_classes["image"]}, image))

        content = [create_element("h3", {"class": part_classes["title"]}, f"Latest Post {number}")]
        if block.get("displayPostDate"):
            content.append(create_element("div", {"class": part_classes["date"]}, "Publication date"))
        if block.get("displayPostContent"):
            content.append(
                create_element(
                    "div",
                    {"class": part_classes["excerpt"]},
                    f"This is a placeholder for the {excerpt_kind} of the latest post {number}.",
                )
            )
        parts.append(create_element("div", {"class": part_classes["content"]}, "".join(content)))
        items.append(create_element("div", {"class": part_classes[f"{layout}-item"]}, "".join(parts)))

    return create_element("div", {"class": part_classes[layout]}, "".join(items))


def render_latest_posts(block: Block, context: ConversionContext) -> str:
    supplied = context.run_hook(LATEST_POSTS_HOOK, block)
    if supplied is not None:
        return supplied

    classes = context.classes_for(block)
    categories = block.get("categories") or []
    if isinstance(categories, list):
        categories = ",".join(
            str(item.get("id", item)) if isinstance(item, dict) else str(item) for item in categories
        )

    attributes = {
        "class": classes,
        "data-posts-to-show": posts_to_show(block),
        "data-display-post-date": flag(block.get("displayPostDate")),
        "data-display-featured-image": flag(block.get("displayFeaturedImage")),
        "data-display-post-content": flag(block.get("displayPostContent")),
        "data-post-layout": block.get("postLayout") or "list",
        "data-columns": block.get("columns") or 3,
        "data-order": block.get("order") or "desc",
        "data-order-by": block.get("orderBy") or "date",
        "data-categories": categories,
    }
    return create_element("div", attributes, _placeholder_posts(block, context.options.css_framework))


LATEST_POSTS_HANDLER = BlockHandler(
    transform=render_latest_posts,
    name="core/latest-posts",
    css_mapping={
        "tailwind": {
            "block": "my-6",
            "postLayout": {"list": "", "grid": "grid gap-6"},
            "columns": {
                "2": "grid-cols-1 md:grid-cols-2",
                "3": "grid-cols-1 md:grid-cols-2 lg:grid-cols-3",
                "4": "grid-cols-1 md:grid-cols-2 lg:grid-cols-4",
                "5": "grid-cols-1 md:grid-cols-2 lg:grid-cols-5",
                "6": "grid-cols-1 md:grid-cols-2 lg:grid-cols-6",
            },
            "align": {
                "left": "mr-auto",
                "center": "mx-auto",
                "right": "ml-auto",
                "wide": "max-w-screen-xl mx-auto",
                "full": "w-full",
            },
        },
        "bootstrap": {
            "block": "my-4",
            "postLayout": {"list": "", "grid": "row g-4"},
            "columns": {str(columns): f"row-cols-1 row-cols-md-{columns}" for columns in range(2, 7)},
            "align": {
                "left": "float-start",
                "center": "d-block mx-auto",
                "right": "float-end",
                "wide": "container-lg",
                "full": "container-fluid",
            },
        },
    },
)
