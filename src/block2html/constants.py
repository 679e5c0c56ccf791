#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for block2html.

This module centralizes the literal types, default option values and fixed
tables used across the block2html library.

Constants are organized by category:
1. Type Definitions - All Literal types and type aliases
2. Conversion Behavior - Defaults for ConversionOptions
3. Markup - Element synthesis and class derivation
4. SSR Optimization - Defaults and fixed tables for the SSR optimizer
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

OutputMode = Literal["html", "nodes"]
CssFramework = Literal["none", "tailwind", "bootstrap", "custom"]
ContentMode = Literal["raw", "trust-rendered", "blended"]
SsrLevel = Literal["minimal", "balanced", "maximum"]
OptimizationDepth = Literal["shallow", "medium", "full"]

OUTPUT_MODES: tuple[str, ...] = ("html", "nodes")
CSS_FRAMEWORKS: tuple[str, ...] = ("none", "tailwind", "bootstrap", "custom")
CONTENT_MODES: tuple[str, ...] = ("raw", "trust-rendered", "blended")
SSR_LEVELS: tuple[str, ...] = ("minimal", "balanced", "maximum")
OPTIMIZATION_DEPTHS: tuple[str, ...] = ("shallow", "medium", "full")

# Accepted spellings of the content-fidelity mode. Older configurations used
# two option names ("renderedContentHandling" and "contentHandling") with
# different vocabularies for the same three behaviors.
CONTENT_MODE_ALIASES: dict[str, ContentMode] = {
    "raw": "raw",
    "rebuild": "raw",
    "trust-rendered": "trust-rendered",
    "rendered": "trust-rendered",
    "respect": "trust-rendered",
    "blended": "blended",
    "hybrid": "blended",
    "preserve-attrs": "blended",
}

# =============================================================================
# Conversion Behavior
# =============================================================================

DEFAULT_OUTPUT_MODE: OutputMode = "html"
DEFAULT_CSS_FRAMEWORK: CssFramework = "none"
DEFAULT_CONTENT_MODE: ContentMode = "raw"
DEFAULT_DEDUPE_MERGED_CLASSES = False
DEFAULT_STRICT = False
DEFAULT_DEBUG = False

# Entry point group scanned for third-party block handlers
HANDLER_ENTRY_POINT_GROUP = "block2html.handlers"

# Environment variable naming a configuration file for the CLI
CONFIG_ENV_VAR = "BLOCK2HTML_CONFIG"

# =============================================================================
# Markup
# =============================================================================

VOID_ELEMENTS: frozenset[str] = frozenset({"img", "br", "hr", "input", "meta", "link"})

# Namespace dropped when deriving the default "wp-block-*" class
CORE_BLOCK_NAMESPACE = "core/"
DEFAULT_BLOCK_CLASS_PREFIX = "wp-block-"
ALIGN_CLASS_PREFIX = "has-text-align-"

# Key of the unconditional entry in a class table
CLASS_TABLE_BASE_KEY = "block"

# =============================================================================
# SSR Optimization
# =============================================================================

DEFAULT_SSR_ENABLED = False
DEFAULT_SSR_LEVEL: SsrLevel = "balanced"
DEFAULT_SSR_STRIP_COMMENTS = True
DEFAULT_SSR_STRIP_CLIENT_SCRIPTS = True
DEFAULT_SSR_OPTIMIZE_IMAGES = True
DEFAULT_SSR_LAZY_LOAD_MEDIA = True
DEFAULT_SSR_PRESERVE_FIRST_IMAGE = True
DEFAULT_SSR_REMOVE_DUPLICATE_STYLES = False
DEFAULT_SSR_PRIORITIZE_ABOVE_THE_FOLD = False
DEFAULT_SSR_ABOVE_THE_FOLD_LIMIT = 5
DEFAULT_SSR_CRITICAL_PATH_ONLY = False
DEFAULT_SSR_DEFER_NON_CRITICAL = False
DEFAULT_SSR_FOLD_ESTIMATE_CHARS = 10000
DEFAULT_SSR_PRECONNECT = False
DEFAULT_SSR_INLINE_CRITICAL_CSS = False
DEFAULT_SSR_PRELOAD_IMAGE_COUNT = 3
DEFAULT_SSR_OPTIMIZATION_DEPTH: OptimizationDepth = "full"
DEFAULT_SSR_MINIFY_OUTPUT = False

DEFAULT_CRITICAL_CSS = (
    "img{max-width:100%;height:auto}"
    "h1,h2,h3,h4,h5,h6{margin-top:1em;margin-bottom:.5em}"
    "p{margin-bottom:1em}"
)

# Elements whose content is never touched by whitespace or comment passes
SSR_PRESERVED_ELEMENTS: tuple[str, ...] = ("pre", "textarea", "script", "style")

# Leading elements eligible for above-the-fold priority tagging
SSR_PRIORITY_ELEMENTS: tuple[str, ...] = ("h1", "h2", "p", "img", "header", "nav")

# (tag, attribute) pairs that reference external resources
SSR_RESOURCE_ATTRIBUTES: tuple[tuple[str, str], ...] = (
    ("img", "src"),
    ("img", "srcset"),
    ("source", "src"),
    ("source", "srcset"),
    ("script", "src"),
    ("link", "href"),
    ("iframe", "src"),
    ("video", "src"),
    ("video", "poster"),
    ("audio", "src"),
)

SSR_LOCAL_HOSTS: frozenset[str] = frozenset({"localhost", "127.0.0.1", "::1"})

SSR_NEEDS_DIMENSIONS_ATTRIBUTE = "data-ssr-needs-dimensions"
SSR_PRIORITY_ATTRIBUTE = "data-priority"
SSR_COMBINED_STYLES_ID = "combined-styles"
SSR_CRITICAL_CSS_ID = "critical-css"
SSR_DEFERRED_CONTAINER_ID = "deferred-content"

SSR_DEFER_SCRIPT = (
    "<script>window.addEventListener('load',function(){"
    "var d=document.getElementById('deferred-content');"
    "if(!d){return;}var p=d.parentNode;"
    "while(d.firstChild){p.insertBefore(d.firstChild,d);}"
    "p.removeChild(d);});</script>"
)

SSR_PRIORITY_SCRIPT = (
    "<script>(function(){"
    "var els=document.querySelectorAll('[data-priority=\"high\"]');"
    "for(var i=0;i<els.length;i++){els[i].style.contentVisibility='auto';}"
    "})();</script>"
)
