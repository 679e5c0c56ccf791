#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/ssr.py
"""SSR optimization of finished HTML.

The optimizer rewrites serialized HTML through an ordered list of passes.
Levels are cumulative: ``balanced`` runs every ``minimal`` pass and
``maximum`` runs every ``balanced`` pass. Within a level, the flags of
:class:`~block2html.options.ssr.SsrOptions` switch individual passes on or
off. Pipeline order:

1. ``pre_process_html`` hook
2. minimal: comment stripping, inter-tag whitespace collapsing
3. balanced: client-only script and inline handler stripping, media lazy
   loading, image dimension markers, style deduplication, above-the-fold
   priority tagging, critical-path truncation or deferral, preconnect hints
4. maximum: critical CSS, image preloads, first-image fetch priority,
   priority script
5. minification (``minify_output``, any level)
6. ``post_process_html`` hook

Passes work on the text. The content of ``<pre>``, ``<textarea>``,
``<script>`` and ``<style>`` elements is never touched by the whitespace,
comment or tag-rewriting passes. A pass that finds nothing to do returns its
input unchanged; a pass that fails is logged and skipped.

Examples
--------
    >>> from block2html.options import SsrOptions
    >>> optimize_html("<div>  <!-- note -->  <p>Hi</p></div>", SsrOptions(enabled=True, level="minimal"))
    '<div> <p>Hi</p></div>'

"""

from __future__ import annotations

import bisect
import hashlib
import logging
import re
from typing import Callable, Optional
from urllib.parse import urlparse

from block2html.constants import (
    SSR_COMBINED_STYLES_ID,
    SSR_CRITICAL_CSS_ID,
    SSR_DEFER_SCRIPT,
    SSR_DEFERRED_CONTAINER_ID,
    SSR_LOCAL_HOSTS,
    SSR_NEEDS_DIMENSIONS_ATTRIBUTE,
    SSR_PRESERVED_ELEMENTS,
    SSR_PRIORITY_ATTRIBUTE,
    SSR_PRIORITY_ELEMENTS,
    SSR_PRIORITY_SCRIPT,
    SSR_RESOURCE_ATTRIBUTES,
)
from block2html.exceptions import RenderingError
from block2html.hooks import run_html_hook
from block2html.markup import add_attribute, escape_attribute
from block2html.options.conversion import ConversionOptions
from block2html.options.ssr import SsrOptions
from block2html.utils.fragment import AttributeToken, MarkupTree, parse_attribute_tokens

logger = logging.getLogger(__name__)

# Start tag body that tolerates ">" inside quoted attribute values
_TAG_BODY = r"""(?:[^>"']|"[^"]*"|'[^']*')*"""

_COMMENT = re.compile(r"<!--(?!\[if\b)(?!<!\[endif\])[\s\S]*?-->", re.IGNORECASE)
_INTER_TAG_WHITESPACE = re.compile(r"(?<=>)\s{2,}(?=<)")
_MINIFY_INTER_TAG = re.compile(r"(?<=>)\s+(?=<)")
_WHITESPACE_RUN = re.compile(r"\s{2,}")
_PROTECTED_SCAN = re.compile(
    r"<!--[\s\S]*?-->|<(" + "|".join(SSR_PRESERVED_ELEMENTS) + r")\b" + _TAG_BODY + ">", re.IGNORECASE
)
# Tag name ends at a delimiter
_ANY_START_TAG = re.compile(r"<[a-zA-Z][^\s/>]*(?=[\s/>])" + _TAG_BODY + ">")
_SCRIPT_ELEMENT = re.compile(r"<script\b(" + _TAG_BODY + r")>[\s\S]*?</script\s*>", re.IGNORECASE)
_STYLE_ELEMENT = re.compile(r"<style\b(" + _TAG_BODY + r")>([\s\S]*?)</style\s*>", re.IGNORECASE)
_HEAD_START = re.compile(r"<head\b" + _TAG_BODY + ">", re.IGNORECASE)
_HEAD_END = re.compile(r"</head\s*>", re.IGNORECASE)
_BODY_END = re.compile(r"</body\s*>", re.IGNORECASE)
_EVENT_HANDLER_NAME = re.compile(r"on[a-z0-9_-]+$")

_close_tag_patterns: dict[str, re.Pattern[str]] = {}


def _tag_pattern(*names: str) -> re.Pattern[str]:
    return re.compile(r"<(" + "|".join(names) + r")\b" + _TAG_BODY + ">", re.IGNORECASE)


_MEDIA_TAG = _tag_pattern("img", "iframe")
_IMG_TAG = _tag_pattern("img")
_LINK_TAG = _tag_pattern("link")
_PRIORITY_TAG = _tag_pattern(*SSR_PRIORITY_ELEMENTS)
_RESOURCE_TAG = _tag_pattern(*sorted({tag for tag, _ in SSR_RESOURCE_ATTRIBUTES}))


def _close_tag_pattern(name: str) -> re.Pattern[str]:
    name = name.lower()
    if name not in _close_tag_patterns:
        _close_tag_patterns[name] = re.compile(rf"</{name}\s*>", re.IGNORECASE)
    return _close_tag_patterns[name]


def protected_spans(html: str) -> list[tuple[int, int]]:
    """Return the spans of ``pre``/``textarea``/``script``/``style`` elements.

    Comments are skipped as a whole, so a tag mentioned inside a comment does
    not open a protected region. An unclosed element is protected to the end
    of the input.
    """
    spans: list[tuple[int, int]] = []
    position = 0
    while True:
        match = _PROTECTED_SCAN.search(html, position)
        if not match:
            break
        if match.group(1) is None:
            position = match.end()
            continue
        close = _close_tag_pattern(match.group(1)).search(html, match.end())
        end = close.end() if close else len(html)
        spans.append((match.start(), end))
        position = end
    return spans


def _sub_unprotected(pattern: re.Pattern[str], replacement: Callable[[re.Match[str]], str] | str, html: str) -> str:
    """``pattern.sub`` that leaves matches starting inside protected elements alone."""
    spans = protected_spans(html)
    starts = [start for start, _ in spans]

    def replace(match: re.Match[str]) -> str:
        index = bisect.bisect_right(starts, match.start()) - 1
        if index >= 0 and match.start() < spans[index][1]:
            return match.group(0)
        if callable(replacement):
            return replacement(match)
        return match.expand(replacement)

    return pattern.sub(replace, html)


def _attributes(start_tag: str) -> dict[str, AttributeToken]:
    result: dict[str, AttributeToken] = {}
    for token in parse_attribute_tokens(start_tag):
        result.setdefault(token.name, token)
    return result


def _attribute_value(start_tag: str, name: str) -> Optional[str]:
    token = _attributes(start_tag).get(name)
    return token.value if token is not None else None


def _has_class(start_tag: str, class_name: str) -> bool:
    value = _attribute_value(start_tag, "class")
    return bool(value) and class_name in value.split()


def _insert_in_head(html: str, snippet: str, at_start: bool = False) -> str:
    """Insert ``snippet`` at the start or end of ``<head>``, or prepend it."""
    if at_start:
        match = _HEAD_START.search(html)
        if match:
            return html[: match.end()] + snippet + html[match.end() :]
    else:
        match = _HEAD_END.search(html)
        if match:
            return html[: match.start()] + snippet + html[match.start() :]
    return snippet + html


def _origin(url: str) -> Optional[str]:
    url = url.strip()
    if not url or url.startswith(("data:", "blob:", "#")):
        return None
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return None
    if parsed.scheme and parsed.scheme not in ("http", "https"):
        return None
    if not parsed.netloc or not hostname:
        return None
    if hostname.lower() in SSR_LOCAL_HOSTS:
        return None
    scheme = parsed.scheme or "https"
    return f"{scheme}://{parsed.netloc.lower()}"


class SsrOptimizer:
    """Multi-pass SSR optimizer.

    Parameters
    ----------
    options : SsrOptions
        Level and feature flags
    conversion_options : ConversionOptions, optional
        Options passed to the pre/post hooks; also controls strict mode

    """

    def __init__(self, options: SsrOptions, conversion_options: Optional[ConversionOptions] = None):
        self.options = options
        self.conversion_options = conversion_options or ConversionOptions(ssr=options)

    def passes(self) -> list[tuple[str, Callable[[str], str]]]:
        """Return the level passes to run, in order, for the current options."""
        options = self.options
        passes: list[tuple[str, Callable[[str], str]]] = []

        if options.strip_comments:
            passes.append(("strip_comments", self.strip_comments))
        passes.append(("collapse_whitespace", self.collapse_whitespace))

        if options.level in ("balanced", "maximum"):
            if options.strip_client_scripts:
                passes.append(("strip_client_scripts", self.strip_client_scripts))
                passes.append(("strip_event_handlers", self.strip_event_handlers))
            if options.lazy_load_media:
                passes.append(("lazy_load_media", self.lazy_load_media))
            if options.optimize_images:
                passes.append(("mark_image_dimensions", self.mark_image_dimensions))
            if options.remove_duplicate_styles:
                passes.append(("remove_duplicate_styles", self.remove_duplicate_styles))
            if options.prioritize_above_the_fold:
                passes.append(("prioritize_above_the_fold", self.prioritize_above_the_fold))
            if options.critical_path_only:
                passes.append(("truncate_to_critical_path", self.truncate_to_critical_path))
            elif options.defer_non_critical:
                passes.append(("defer_non_critical", self.defer_non_critical))
            if options.preconnect:
                passes.append(("add_preconnect_hints", self.add_preconnect_hints))

        if options.level == "maximum":
            if options.inline_critical_css:
                passes.append(("inline_critical_css", self.inline_critical_css))
            if options.preload_image_count:
                passes.append(("preload_images", self.preload_images))
            passes.append(("prioritize_first_image", self.prioritize_first_image))
            if options.prioritize_above_the_fold:
                passes.append(("add_priority_script", self.add_priority_script))

        if options.minify_output:
            passes.append(("minify", self.minify))
        return passes

    def optimize(self, html: str) -> str:
        """Run the hooks and every enabled pass over ``html``.

        Raises
        ------
        RenderingError
            If a pass or hook fails and strict mode is enabled

        """
        html = run_html_hook("pre_process_html", self.options.pre_process_html, html, self.conversion_options)

        for name, optimization_pass in self.passes():
            try:
                html = optimization_pass(html)
            except Exception as e:
                logger.error(f"SSR pass '{name}' failed, skipping: {e}", exc_info=True)
                if self.conversion_options.strict:
                    raise RenderingError(f"SSR pass '{name}' failed: {e}", original_error=e) from e

        return run_html_hook("post_process_html", self.options.post_process_html, html, self.conversion_options)

    # --- minimal ---------------------------------------------------------

    def strip_comments(self, html: str) -> str:
        """Remove comments, keeping conditional comments."""
        return _sub_unprotected(_COMMENT, "", html)

    def collapse_whitespace(self, html: str) -> str:
        """Collapse whitespace runs between tags to a single space."""
        return _sub_unprotected(_INTER_TAG_WHITESPACE, " ", html)

    # --- balanced --------------------------------------------------------

    def strip_client_scripts(self, html: str) -> str:
        """Remove scripts marked ``class="client-only"`` or ``data-ssr-exclude``."""

        def replace(match: re.Match[str]) -> str:
            start_tag = f"<script{match.group(1)}>"
            if _has_class(start_tag, "client-only") or "data-ssr-exclude" in _attributes(start_tag):
                return ""
            return match.group(0)

        return _SCRIPT_ELEMENT.sub(replace, html)

    def strip_event_handlers(self, html: str) -> str:
        """Remove inline ``on*`` event handler attributes from start tags."""

        def replace(match: re.Match[str]) -> str:
            start_tag = match.group(0)
            handlers = [token for token in parse_attribute_tokens(start_tag) if _EVENT_HANDLER_NAME.match(token.name)]
            if not handlers:
                return start_tag
            for token in reversed(handlers):
                start = token.start
                while start > 0 and start_tag[start - 1].isspace():
                    start -= 1
                start_tag = start_tag[:start] + start_tag[token.end :]
            return start_tag

        return _sub_unprotected(_ANY_START_TAG, replace, html)

    def lazy_load_media(self, html: str) -> str:
        """Add ``loading="lazy"`` to images and iframes in document order.

        With ``preserve_first_image`` the first image is exempt and gets
        ``fetchpriority="high"`` instead.
        """
        first_image_pending = self.options.preserve_first_image

        def replace(match: re.Match[str]) -> str:
            nonlocal first_image_pending
            start_tag = match.group(0)
            attributes = _attributes(start_tag)
            if match.group(1).lower() == "img" and first_image_pending:
                first_image_pending = False
                if "loading" not in attributes and "fetchpriority" not in attributes:
                    return add_attribute(start_tag, "fetchpriority", "high")
                return start_tag
            if "loading" in attributes:
                return start_tag
            return add_attribute(start_tag, "loading", "lazy")

        return _sub_unprotected(_MEDIA_TAG, replace, html)

    def mark_image_dimensions(self, html: str) -> str:
        """Flag images without explicit ``width`` or ``height``."""

        def replace(match: re.Match[str]) -> str:
            start_tag = match.group(0)
            attributes = _attributes(start_tag)
            if SSR_NEEDS_DIMENSIONS_ATTRIBUTE in attributes:
                return start_tag
            if "width" in attributes and "height" in attributes:
                return start_tag
            return add_attribute(start_tag, SSR_NEEDS_DIMENSIONS_ATTRIBUTE, "true")

        return _sub_unprotected(_IMG_TAG, replace, html)

    def remove_duplicate_styles(self, html: str) -> str:
        """Merge ``<style>`` blocks into one, dropping duplicate contents.

        Styles with a ``media`` attribute are left in place. The combined
        block takes the position of the first merged style.
        """
        matches = [match for match in _STYLE_ELEMENT.finditer(html) if "media" not in _attributes(match.group(1))]
        if len(matches) < 2:
            return html

        seen: set[str] = set()
        contents: list[str] = []
        for match in matches:
            css = match.group(2).strip()
            if not css:
                continue
            fingerprint = hashlib.sha1(css.encode("utf-8")).hexdigest()
            if fingerprint in seen:
                continue
            seen.add(fingerprint)
            contents.append(css)

        combined = f'<style id="{SSR_COMBINED_STYLES_ID}">' + "\n".join(contents) + "</style>"
        parts = [html[: matches[0].start()], combined]
        for current, following in zip(matches, matches[1:] + [None]):
            end = following.start() if following is not None else len(html)
            parts.append(html[current.end() : end])
        return "".join(parts)

    def prioritize_above_the_fold(self, html: str) -> str:
        """Tag the first leading structural elements with ``data-priority="high"``."""
        remaining = self.options.above_the_fold_limit

        def replace(match: re.Match[str]) -> str:
            nonlocal remaining
            start_tag = match.group(0)
            if remaining <= 0:
                return start_tag
            remaining -= 1
            if SSR_PRIORITY_ATTRIBUTE in _attributes(start_tag):
                return start_tag
            return add_attribute(start_tag, SSR_PRIORITY_ATTRIBUTE, "high")

        return _sub_unprotected(_PRIORITY_TAG, replace, html)

    def _fold_split(self, html: str) -> Optional[tuple[int, int]]:
        """Return ``(cut, content_end)`` for the fold, or None when everything fits.

        The fold is the end of the first ``<header>`` element, or
        ``fold_estimate_chars``. It is moved forward to the end of the
        top-level element it falls into, so no element is split. Top level
        means the children of ``<body>`` when there is one.
        """
        tree = MarkupTree.parse(html)
        body = tree.find_first("body")
        if body is not None:
            top_level = tree.children_of(body)
            content_end = body.end_tag_start
        else:
            top_level = tree.root_nodes()
            content_end = len(html)

        header = tree.find_first("header")
        if header is not None and header.closed:
            fold = header.end
        else:
            fold = min(len(html), self.options.fold_estimate_chars)

        cut = None
        for node in top_level:
            if node.end >= fold:
                cut = node.end if node.start < fold else node.start
                break
        if cut is None or cut >= content_end:
            return None
        return cut, content_end

    def truncate_to_critical_path(self, html: str) -> str:
        """Drop top-level content after the estimated fold."""
        split = self._fold_split(html)
        if split is None:
            return html
        cut, content_end = split
        dropped = content_end - cut
        logger.debug(f"Critical path truncation dropped {dropped} characters")
        return html[:cut] + html[content_end:]

    def defer_non_critical(self, html: str) -> str:
        """Move top-level content after the fold into a container revealed on load."""
        split = self._fold_split(html)
        if split is None:
            return html
        cut, content_end = split
        return (
            html[:cut]
            + f'<div id="{SSR_DEFERRED_CONTAINER_ID}" style="display:none">'
            + html[cut:content_end]
            + "</div>"
            + SSR_DEFER_SCRIPT
            + html[content_end:]
        )

    def _resource_urls(self, html: str) -> list[str]:
        urls: list[str] = []
        resource_attributes: dict[str, set[str]] = {}
        for tag, attribute in SSR_RESOURCE_ATTRIBUTES:
            resource_attributes.setdefault(tag, set()).add(attribute)

        for match in _RESOURCE_TAG.finditer(html):
            tag = match.group(1).lower()
            attributes = _attributes(match.group(0))
            if tag == "link":
                rel = (attributes["rel"].value or "") if "rel" in attributes else ""
                if {"preconnect", "dns-prefetch"} & set(rel.lower().split()):
                    continue
            for name in resource_attributes.get(tag, ()):
                token = attributes.get(name)
                if token is None or not token.value:
                    continue
                if name == "srcset":
                    candidates = [candidate.strip() for candidate in token.value.split(",")]
                    urls.extend(candidate.split()[0] for candidate in candidates if candidate)
                else:
                    urls.append(token.value)
        return urls

    def add_preconnect_hints(self, html: str) -> str:
        """Insert ``<link rel="preconnect">`` for each distinct external origin."""
        existing: set[str] = set()
        for match in _LINK_TAG.finditer(html):
            attributes = _attributes(match.group(0))
            rel = attributes.get("rel")
            href = attributes.get("href")
            if rel is None or href is None:
                continue
            if {"preconnect", "dns-prefetch"} & set((rel.value or "").lower().split()):
                origin = _origin(href.value or "")
                if origin:
                    existing.add(origin)

        origins: list[str] = []
        for url in self._resource_urls(html):
            origin = _origin(url)
            if origin and origin not in existing and origin not in origins:
                origins.append(origin)
        if not origins:
            return html

        hints = "".join(f'<link rel="preconnect" href="{escape_attribute(origin)}" crossorigin>' for origin in origins)
        return _insert_in_head(html, hints, at_start=True)

    # --- maximum ---------------------------------------------------------

    def inline_critical_css(self, html: str) -> str:
        """Inline ``critical_css`` in a ``<style id="critical-css">`` block."""
        if not self.options.critical_css or f'id="{SSR_CRITICAL_CSS_ID}"' in html:
            return html
        return _insert_in_head(html, f'<style id="{SSR_CRITICAL_CSS_ID}">{self.options.critical_css}</style>')

    def preload_images(self, html: str) -> str:
        """Add ``<link rel="preload" as="image">`` for the first few images."""
        preloaded: set[str] = set()
        for match in _LINK_TAG.finditer(html):
            attributes = _attributes(match.group(0))
            rel = attributes.get("rel")
            href = attributes.get("href")
            if rel is not None and href is not None and "preload" in (rel.value or "").lower().split():
                preloaded.add(href.value or "")

        sources: list[str] = []
        spans = protected_spans(html)
        starts = [start for start, _ in spans]
        for match in _IMG_TAG.finditer(html):
            index = bisect.bisect_right(starts, match.start()) - 1
            if index >= 0 and match.start() < spans[index][1]:
                continue
            src = _attribute_value(match.group(0), "src")
            if not src or src.startswith("data:") or src in preloaded or src in sources:
                continue
            sources.append(src)
            if len(sources) >= self.options.preload_image_count:
                break
        if not sources:
            return html

        links = "".join(f'<link rel="preload" href="{escape_attribute(src)}" as="image">' for src in sources)
        return _insert_in_head(html, links)

    def prioritize_first_image(self, html: str) -> str:
        """Give the first image ``fetchpriority="high"`` unless it is lazy-loaded."""
        done = False

        def replace(match: re.Match[str]) -> str:
            nonlocal done
            start_tag = match.group(0)
            if done:
                return start_tag
            done = True
            attributes = _attributes(start_tag)
            loading = attributes.get("loading")
            if "fetchpriority" in attributes or (loading is not None and (loading.value or "").lower() == "lazy"):
                return start_tag
            return add_attribute(start_tag, "fetchpriority", "high")

        return _sub_unprotected(_IMG_TAG, replace, html)

    def add_priority_script(self, html: str) -> str:
        """Append the script that relaxes rendering of high-priority elements."""
        if SSR_PRIORITY_SCRIPT in html:
            return html
        match = _BODY_END.search(html)
        if match:
            return html[: match.start()] + SSR_PRIORITY_SCRIPT + html[match.start() :]
        return html + SSR_PRIORITY_SCRIPT

    # --- minification ----------------------------------------------------

    def minify(self, html: str) -> str:
        """Strip comments and redundant whitespace; never grows the input."""
        result = _sub_unprotected(_COMMENT, "", html)
        result = _sub_unprotected(_MINIFY_INTER_TAG, "", result)
        result = _sub_unprotected(_WHITESPACE_RUN, " ", result)
        if len(result) > len(html):
            return html
        return result


def optimize_html(html: str, ssr_options: SsrOptions, conversion_options: Optional[ConversionOptions] = None) -> str:
    """Optimize finished HTML for server-side rendering.

    Parameters
    ----------
    html : str
        Serialized HTML
    ssr_options : SsrOptions
        Level and feature flags. ``enabled`` is not consulted here; callers
        decide whether to optimize.
    conversion_options : ConversionOptions, optional
        Options passed to the pre/post hooks

    Returns
    -------
    str
        The optimized HTML

    """
    return SsrOptimizer(ssr_options, conversion_options).optimize(html)


__all__ = ["SsrOptimizer", "optimize_html", "protected_spans"]
