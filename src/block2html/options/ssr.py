#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/options/ssr.py
"""Configuration options for the SSR optimizer.

Levels are cumulative (``minimal`` < ``balanced`` < ``maximum``); the boolean
flags switch individual passes on or off within the selected level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from block2html.constants import (
    DEFAULT_CRITICAL_CSS,
    DEFAULT_SSR_ABOVE_THE_FOLD_LIMIT,
    DEFAULT_SSR_CRITICAL_PATH_ONLY,
    DEFAULT_SSR_DEFER_NON_CRITICAL,
    DEFAULT_SSR_ENABLED,
    DEFAULT_SSR_FOLD_ESTIMATE_CHARS,
    DEFAULT_SSR_INLINE_CRITICAL_CSS,
    DEFAULT_SSR_LAZY_LOAD_MEDIA,
    DEFAULT_SSR_LEVEL,
    DEFAULT_SSR_MINIFY_OUTPUT,
    DEFAULT_SSR_OPTIMIZATION_DEPTH,
    DEFAULT_SSR_OPTIMIZE_IMAGES,
    DEFAULT_SSR_PRECONNECT,
    DEFAULT_SSR_PRELOAD_IMAGE_COUNT,
    DEFAULT_SSR_PRESERVE_FIRST_IMAGE,
    DEFAULT_SSR_PRIORITIZE_ABOVE_THE_FOLD,
    DEFAULT_SSR_REMOVE_DUPLICATE_STYLES,
    DEFAULT_SSR_STRIP_CLIENT_SCRIPTS,
    DEFAULT_SSR_STRIP_COMMENTS,
    OPTIMIZATION_DEPTHS,
    SSR_LEVELS,
    OptimizationDepth,
    SsrLevel,
)
from block2html.exceptions import ValidationError
from block2html.options.base import CloneFrozenMixin, validate_choice

# Accepted snake_cased spellings from older configurations
_SSR_KEY_ALIASES = {
    "optimization_level": "level",
    "remove_duplicate_style": "remove_duplicate_styles",
}


@dataclass(frozen=True)
class SsrOptions(CloneFrozenMixin):
    """Configuration options for SSR optimization of finished HTML.

    Parameters
    ----------
    enabled : bool, default False
        Run the optimizer after HTML conversion.
    level : {"minimal", "balanced", "maximum"}, default "balanced"
        Cumulative optimization tier.
    strip_comments : bool, default True
        Remove HTML comments (conditional comments are kept).
    strip_client_scripts : bool, default True
        Remove client-only scripts and inline ``on*`` event handlers.
    optimize_images : bool, default True
        Mark images lacking explicit dimensions.
    lazy_load_media : bool, default True
        Add ``loading="lazy"`` to images and iframes.
    preserve_first_image : bool, default True
        Exempt the first image from lazy loading and give it a high fetch priority.
    remove_duplicate_styles : bool, default False
        Merge ``<style>`` blocks, dropping duplicates by content fingerprint.
    prioritize_above_the_fold : bool, default False
        Tag leading structural elements with ``data-priority="high"``.
    above_the_fold_limit : int, default 5
        Maximum number of elements tagged as high priority.
    critical_path_only : bool, default False
        Truncate the document after the estimated fold.
    defer_non_critical : bool, default False
        Move content after the estimated fold into a script-deferred container.
    fold_estimate_chars : int, default 10000
        Character offset used as the fold estimate when no ``</header>`` is found.
    preconnect : bool, default False
        Insert ``<link rel="preconnect">`` hints for external hosts.
    inline_critical_css : bool, default False
        Inline ``critical_css`` into the document (maximum level).
    critical_css : str
        Stylesheet inlined by ``inline_critical_css``.
    preload_image_count : int, default 3
        Number of early images to preload (maximum level).
    optimization_depth : {"shallow", "medium", "full"}, default "full"
        Nesting depth kept before conversion. Anything other than ``"full"``
        drops nested blocks from the output.
    minify_output : bool, default False
        Run the minification pass after the level passes.
    pre_process_html : callable, optional
        ``(html, options) -> html`` hook run before all passes.
    post_process_html : callable, optional
        ``(html, options) -> html`` hook run after all passes.

    """

    enabled: bool = field(
        default=DEFAULT_SSR_ENABLED,
        metadata={"help": "Run the SSR optimizer on converted HTML", "importance": "core"},
    )
    level: SsrLevel = field(
        default=DEFAULT_SSR_LEVEL,
        metadata={"help": "Optimization level", "choices": list(SSR_LEVELS), "importance": "core"},
    )
    strip_comments: bool = field(
        default=DEFAULT_SSR_STRIP_COMMENTS,
        metadata={"help": "Strip HTML comments (conditional comments are kept)", "importance": "advanced"},
    )
    strip_client_scripts: bool = field(
        default=DEFAULT_SSR_STRIP_CLIENT_SCRIPTS,
        metadata={"help": "Strip client-only scripts and inline event handlers", "importance": "advanced"},
    )
    optimize_images: bool = field(
        default=DEFAULT_SSR_OPTIMIZE_IMAGES,
        metadata={"help": "Flag images without explicit width/height", "importance": "advanced"},
    )
    lazy_load_media: bool = field(
        default=DEFAULT_SSR_LAZY_LOAD_MEDIA,
        metadata={"help": "Add loading=lazy to images and iframes", "importance": "core"},
    )
    preserve_first_image: bool = field(
        default=DEFAULT_SSR_PRESERVE_FIRST_IMAGE,
        metadata={"help": "Never lazy-load the first image", "importance": "advanced"},
    )
    remove_duplicate_styles: bool = field(
        default=DEFAULT_SSR_REMOVE_DUPLICATE_STYLES,
        metadata={"help": "Merge style blocks and drop duplicates", "importance": "advanced"},
    )
    prioritize_above_the_fold: bool = field(
        default=DEFAULT_SSR_PRIORITIZE_ABOVE_THE_FOLD,
        metadata={"help": "Tag leading elements with data-priority=high", "importance": "advanced"},
    )
    above_the_fold_limit: int = field(
        default=DEFAULT_SSR_ABOVE_THE_FOLD_LIMIT,
        metadata={"help": "Maximum number of elements tagged as high priority", "type": int, "importance": "advanced"},
    )
    critical_path_only: bool = field(
        default=DEFAULT_SSR_CRITICAL_PATH_ONLY,
        metadata={"help": "Drop content after the estimated fold", "importance": "advanced"},
    )
    defer_non_critical: bool = field(
        default=DEFAULT_SSR_DEFER_NON_CRITICAL,
        metadata={"help": "Defer content after the estimated fold until page load", "importance": "advanced"},
    )
    fold_estimate_chars: int = field(
        default=DEFAULT_SSR_FOLD_ESTIMATE_CHARS,
        metadata={"help": "Fold estimate in characters when no header is found", "type": int, "importance": "advanced"},
    )
    preconnect: bool = field(
        default=DEFAULT_SSR_PRECONNECT,
        metadata={"help": "Add preconnect hints for external hosts", "importance": "advanced"},
    )
    inline_critical_css: bool = field(
        default=DEFAULT_SSR_INLINE_CRITICAL_CSS,
        metadata={"help": "Inline critical CSS (maximum level)", "importance": "advanced"},
    )
    critical_css: str = field(
        default=DEFAULT_CRITICAL_CSS,
        metadata={"help": "Stylesheet inlined as critical CSS", "importance": "advanced"},
    )
    preload_image_count: int = field(
        default=DEFAULT_SSR_PRELOAD_IMAGE_COUNT,
        metadata={"help": "Number of early images to preload (maximum level)", "type": int, "importance": "advanced"},
    )
    optimization_depth: OptimizationDepth = field(
        default=DEFAULT_SSR_OPTIMIZATION_DEPTH,
        metadata={
            "help": "Block nesting depth kept before conversion (shallow/medium drop nested blocks)",
            "choices": list(OPTIMIZATION_DEPTHS),
            "importance": "advanced",
        },
    )
    minify_output: bool = field(
        default=DEFAULT_SSR_MINIFY_OUTPUT,
        metadata={"help": "Minify the optimized HTML", "importance": "core"},
    )
    pre_process_html: Optional[Callable[..., str]] = field(
        default=None,
        metadata={"help": "Hook run on the HTML before all passes", "exclude_from_cli": True},
    )
    post_process_html: Optional[Callable[..., str]] = field(
        default=None,
        metadata={"help": "Hook run on the HTML after all passes", "exclude_from_cli": True},
    )

    def __post_init__(self) -> None:
        """Validate choices and numeric ranges.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range.

        """
        validate_choice("level", self.level, SSR_LEVELS)
        validate_choice("optimization_depth", self.optimization_depth, OPTIMIZATION_DEPTHS)
        for name in ("above_the_fold_limit", "fold_estimate_chars", "preload_image_count"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValidationError(
                    f"{name} must be a non-negative integer, got {value!r}", parameter_name=name, parameter_value=value
                )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | bool | None) -> SsrOptions:
        """Create options from a configuration mapping.

        Parameters
        ----------
        data : Mapping, bool or None
            Mapping with snake_case or camelCase keys. ``True``/``False`` is
            shorthand for ``{"enabled": ...}``; ``None`` yields the defaults.

        Returns
        -------
        SsrOptions
            The validated options. A mapping without an ``enabled`` key is
            taken to enable the optimizer.

        """
        if data is None:
            return cls()
        if isinstance(data, bool):
            return cls(enabled=data)
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"SSR options must be a mapping or boolean, got {type(data).__name__}",
                parameter_name="ssr",
                parameter_value=data,
            )
        values = cls.normalize_keys(data, _SSR_KEY_ALIASES)
        values.setdefault("enabled", True)
        return cls(**values)


__all__ = ["SsrOptions"]
