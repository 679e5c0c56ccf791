#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/block2html/options/conversion.py
"""Configuration options for block conversion.

:class:`ConversionOptions` is built once per call and passed down the block
recursion unchanged. Loosely typed input (configuration files, camelCase
keys, the deprecated content-mode spellings) is collapsed into canonical
values here, at the boundary, so the rest of the engine only ever sees one
representation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from block2html.constants import (
    CONTENT_MODE_ALIASES,
    CONTENT_MODES,
    CSS_FRAMEWORKS,
    DEFAULT_CONTENT_MODE,
    DEFAULT_CSS_FRAMEWORK,
    DEFAULT_DEBUG,
    DEFAULT_DEDUPE_MERGED_CLASSES,
    DEFAULT_OUTPUT_MODE,
    DEFAULT_STRICT,
    OUTPUT_MODES,
    ContentMode,
    CssFramework,
    OutputMode,
)
from block2html.exceptions import ValidationError
from block2html.options.base import CloneFrozenMixin, camel_to_snake, validate_choice
from block2html.options.ssr import SsrOptions

_OUTPUT_MODE_ALIASES = {"text": "html", "component": "nodes", "components": "nodes", "node-list": "nodes"}

_CONVERSION_KEY_ALIASES = {
    "output_format": "output_mode",
    "framework": "css_framework",
    "block_transformers": "block_handlers",
    "ssr_options": "ssr",
}

# Keys that all select the content-fidelity mode, highest precedence first
_CONTENT_MODE_KEYS = ("content_mode", "content_handling", "rendered_content_handling")


def resolve_content_mode(value: str) -> ContentMode:
    """Map any accepted content-mode spelling onto the canonical mode.

    Parameters
    ----------
    value : str
        One of ``raw``, ``trust-rendered``, ``blended`` or a deprecated alias
        (``rebuild``, ``rendered``, ``respect``, ``hybrid``, ``preserve-attrs``)

    Returns
    -------
    ContentMode
        The canonical mode

    Raises
    ------
    ValidationError
        If ``value`` is not an accepted spelling

    Examples
    --------
    >>> resolve_content_mode("hybrid")
    'blended'

    """
    try:
        return CONTENT_MODE_ALIASES[value]
    except (KeyError, TypeError):
        raise ValidationError(
            f"Invalid content mode {value!r}; expected one of: {', '.join(CONTENT_MODE_ALIASES)}",
            parameter_name="content_mode",
            parameter_value=value,
        ) from None


@dataclass(frozen=True)
class ConversionOptions(CloneFrozenMixin):
    """Configuration options for converting blocks to HTML.

    Parameters
    ----------
    output_mode : {"html", "nodes"}, default "html"
        ``"html"`` returns one string; ``"nodes"`` returns a list of
        :class:`~block2html.converter.RenderedBlock`, one per top-level block.
    css_framework : {"none", "tailwind", "bootstrap", "custom"}, default "none"
        Class vocabulary used by the class resolver.
    custom_class_map : dict, default empty
        Per-block-type class tables that take precedence over handler tables.
    content_mode : {"raw", "trust-rendered", "blended"}, default "raw"
        How pre-rendered markup is reconciled with computed attributes.
        Deprecated aliases are accepted and normalized.
    block_handlers : dict, default empty
        Per-call handler overrides keyed by block type. Values are
        :class:`~block2html.registry.BlockHandler` instances or plain
        ``(block, context) -> str`` callables.
    hooks : dict, default empty
        Capability hooks keyed by feature name, each ``(block, options) -> str | None``.
    ssr : SsrOptions
        SSR optimizer configuration (disabled by default). A mapping or a
        boolean is converted with :meth:`SsrOptions.from_dict`.
    dedupe_merged_classes : bool, default False
        Drop repeated class tokens when blending class attributes.
    strict : bool, default False
        Re-raise handler and hook failures instead of degrading.
    debug : bool, default False
        Emit diagnostic logging from the per-block hot paths.

    """

    output_mode: OutputMode = field(
        default=DEFAULT_OUTPUT_MODE,
        metadata={"help": "Output shape", "choices": list(OUTPUT_MODES), "importance": "core"},
    )
    css_framework: CssFramework = field(
        default=DEFAULT_CSS_FRAMEWORK,
        metadata={"help": "CSS framework for class mapping", "choices": list(CSS_FRAMEWORKS), "importance": "core"},
    )
    custom_class_map: dict[str, dict[str, Any]] = field(
        default_factory=dict,
        metadata={"help": "Per-block-type class tables overriding handler tables", "importance": "advanced"},
    )
    content_mode: ContentMode = field(
        default=DEFAULT_CONTENT_MODE,
        metadata={
            "help": "How pre-rendered markup is reconciled with computed attributes",
            "choices": list(CONTENT_MODES),
            "importance": "core",
        },
    )
    block_handlers: dict[str, Any] = field(
        default_factory=dict,
        metadata={"help": "Per-call handler overrides keyed by block type", "exclude_from_cli": True},
    )
    hooks: dict[str, Any] = field(
        default_factory=dict,
        metadata={"help": "Capability hooks keyed by feature name", "exclude_from_cli": True},
    )
    ssr: SsrOptions = field(
        default_factory=SsrOptions,
        metadata={"help": "SSR optimizer configuration", "importance": "core"},
    )
    dedupe_merged_classes: bool = field(
        default=DEFAULT_DEDUPE_MERGED_CLASSES,
        metadata={"help": "Drop repeated class tokens when blending class attributes", "importance": "advanced"},
    )
    strict: bool = field(
        default=DEFAULT_STRICT,
        metadata={"help": "Raise on handler or hook failures instead of degrading", "importance": "advanced"},
    )
    debug: bool = field(
        default=DEFAULT_DEBUG,
        metadata={"help": "Enable diagnostic logging in per-block code paths", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Normalize aliases and validate choices.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range.

        """
        object.__setattr__(self, "content_mode", resolve_content_mode(self.content_mode))
        output_mode = _OUTPUT_MODE_ALIASES.get(self.output_mode, self.output_mode)
        validate_choice("output_mode", output_mode, OUTPUT_MODES)
        object.__setattr__(self, "output_mode", output_mode)
        validate_choice("css_framework", self.css_framework, CSS_FRAMEWORKS)

        if not isinstance(self.ssr, SsrOptions):
            object.__setattr__(self, "ssr", SsrOptions.from_dict(self.ssr))

        for name in ("custom_class_map", "block_handlers", "hooks"):
            value = getattr(self, name)
            if value is None:
                object.__setattr__(self, name, {})
            elif not isinstance(value, Mapping):
                raise ValidationError(
                    f"{name} must be a mapping, got {type(value).__name__}", parameter_name=name, parameter_value=value
                )
            else:
                object.__setattr__(self, name, dict(value))

        for feature, hook in self.hooks.items():
            if not callable(hook):
                raise ValidationError(
                    f"Hook {feature!r} is not callable", parameter_name="hooks", parameter_value=hook
                )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConversionOptions:
        """Create options from a configuration mapping.

        Keys may use snake_case or camelCase. The content mode may be given
        as ``contentMode``, ``contentHandling`` or the deprecated
        ``renderedContentHandling``; when several are present the first of
        that list wins.

        Parameters
        ----------
        data : Mapping
            Configuration values

        Returns
        -------
        ConversionOptions
            The validated options

        Raises
        ------
        ValidationError
            If a key is unknown or a value is invalid

        """
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Options must be a mapping, got {type(data).__name__}", parameter_name="options", parameter_value=data
            )
        return cls(**cls.normalize_options(data))

    @classmethod
    def normalize_options(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        """Map loosely spelled option keys onto field names.

        Accepts everything :meth:`from_dict` accepts and returns keyword
        arguments suitable for the constructor or :meth:`create_updated`.

        Raises
        ------
        ValidationError
            If a key is unknown or a content mode is invalid

        """
        remaining: dict[str, Any] = {}
        mode_values: dict[str, Any] = {}
        for key, value in data.items():
            snake = camel_to_snake(str(key))
            if snake in _CONTENT_MODE_KEYS:
                mode_values[snake] = value
            else:
                remaining[key] = value

        values = cls.normalize_keys(remaining, _CONVERSION_KEY_ALIASES)
        for key in _CONTENT_MODE_KEYS:
            if key in mode_values:
                values["content_mode"] = resolve_content_mode(mode_values[key])
                break

        if "ssr" in values and not isinstance(values["ssr"], SsrOptions):
            values["ssr"] = SsrOptions.from_dict(values["ssr"])

        return values


__all__ = ["ConversionOptions", "resolve_content_mode"]
