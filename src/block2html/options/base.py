#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Base classes for conversion and SSR options.

This module defines the foundation shared by the option dataclasses: the
frozen-clone mixin and the boundary helpers that turn loosely typed mappings
(JSON/TOML/YAML configuration, camelCase keys) into option instances.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from block2html.exceptions import ValidationError

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def camel_to_snake(name: str) -> str:
    """Convert ``camelCase`` or ``kebab-case`` names to ``snake_case``.

    Examples
    --------
    >>> camel_to_snake("stripClientScripts")
    'strip_client_scripts'
    >>> camel_to_snake("above-the-fold-limit")
    'above_the_fold_limit'

    """
    return _CAMEL_BOUNDARY.sub(r"_\1", name).replace("-", "_").lower()


def validate_choice(name: str, value: Any, choices: Iterable[str]) -> None:
    """Raise :class:`ValidationError` unless ``value`` is one of ``choices``."""
    choices = tuple(choices)
    if value not in choices:
        raise ValidationError(
            f"Invalid {name} {value!r}; expected one of: {', '.join(choices)}",
            parameter_name=name,
            parameter_value=value,
        )


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Return the names of all dataclass fields."""
        return frozenset(f.name for f in fields(cls))  # type: ignore[arg-type]

    @classmethod
    def normalize_keys(cls, data: Mapping[str, Any], aliases: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Map configuration keys onto dataclass field names.

        Keys may be spelled in snake_case, camelCase or kebab-case. ``aliases``
        maps additional (already snake_cased) spellings to field names.

        Raises
        ------
        ValidationError
            If a key does not correspond to any field

        """
        known = cls.field_names()
        aliases = aliases or {}
        result: dict[str, Any] = {}
        for key, value in data.items():
            name = camel_to_snake(str(key))
            name = aliases.get(name, name)
            if name not in known:
                raise ValidationError(
                    f"Unknown option {key!r} for {cls.__name__}", parameter_name=str(key), parameter_value=value
                )
            result[name] = value
        return result


__all__ = ["CloneFrozenMixin", "camel_to_snake", "validate_choice"]
