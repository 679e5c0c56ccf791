#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/hooks.py
"""Capability hooks.

Callers customize specific block categories through one map of hooks keyed
by feature name, ``ConversionOptions.hooks``. A block hook receives the block
and the active options and returns replacement markup, or ``None`` (or an
empty string) to express no opinion, in which case the handler's default
rendering is used.

    >>> def latest_posts(block, options):
    ...     return "<ul><li>Hello world</li></ul>"
    >>> options = ConversionOptions(hooks={"latest-posts": latest_posts})

HTML hooks (``SsrOptions.pre_process_html`` / ``post_process_html``) receive
serialized HTML and return HTML.

A failing hook never aborts a conversion: the exception is logged with its
traceback and the hook is treated as having produced nothing. With
``ConversionOptions.strict`` the failure is raised as
:class:`~block2html.exceptions.RenderingError` instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from block2html.exceptions import RenderingError

if TYPE_CHECKING:
    from block2html.ast.nodes import Block
    from block2html.options.conversion import ConversionOptions

logger = logging.getLogger(__name__)

BlockHook = Callable[["Block", "ConversionOptions"], Optional[str]]
HtmlHook = Callable[[str, "ConversionOptions"], str]


def run_block_hook(feature: str, block: Block, options: ConversionOptions) -> Optional[str]:
    """Run the hook registered for ``feature``, if any.

    Parameters
    ----------
    feature : str
        Feature name, e.g. ``"latest-posts"``
    block : Block
        The block being rendered
    options : ConversionOptions
        Active options; ``options.hooks`` holds the hooks

    Returns
    -------
    str or None
        The hook's markup, or None when there is no hook, it returned nothing
        usable, or it failed

    Raises
    ------
    RenderingError
        If the hook fails and ``options.strict`` is set

    """
    hook = options.hooks.get(feature)
    if hook is None:
        return None

    try:
        result = hook(block, options)
    except Exception as e:
        logger.error(f"Hook '{feature}' failed for {block.block_type or '<raw>'}: {e}", exc_info=True)
        if options.strict:
            raise RenderingError(f"Hook '{feature}' failed: {e}", block_type=block.block_type, original_error=e) from e
        return None

    if result is None or result == "":
        return None
    if not isinstance(result, str):
        logger.warning(f"Hook '{feature}' returned {type(result).__name__}, expected str; ignoring")
        return None
    return result


def run_html_hook(name: str, hook: Optional[HtmlHook], html: str, options: ConversionOptions) -> str:
    """Run an HTML-to-HTML hook, returning ``html`` unchanged if it fails.

    Parameters
    ----------
    name : str
        Hook name for log messages
    hook : callable, optional
        ``(html, options) -> html``
    html : str
        Input HTML
    options : ConversionOptions
        Active options

    Returns
    -------
    str
        The hook's result, or ``html`` when there is no hook, it failed or it
        returned something other than a string

    """
    if hook is None:
        return html

    try:
        result = hook(html, options)
    except Exception as e:
        logger.error(f"HTML hook '{name}' failed: {e}", exc_info=True)
        if options.strict:
            raise RenderingError(f"HTML hook '{name}' failed: {e}", original_error=e) from e
        return html

    if not isinstance(result, str):
        logger.warning(f"HTML hook '{name}' returned {type(result).__name__}, expected str; ignoring")
        return html
    return result


__all__ = ["BlockHook", "HtmlHook", "run_block_hook", "run_html_hook"]
