"""Decoding of Pact's JSON value representation into plain scalars.

The indexer reports event parameters the way Pact serializes them: plain JSON
scalars, single-key wrappers such as ``{"int": 5}`` or
``{"decimal": "1.000000000001"}``, or multi-field objects (guards, objects).
Values are decoded once into :class:`Tagged` / :class:`Composite` and then
normalized:

- ``int`` / ``decimal``: numbers become decimal strings; strings pass through
- ``time`` / ``timep``: inner value passes through
- composites pass through unchanged
- any other tag raises :class:`UnsupportedValueTagError`
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

NUMERIC_TAGS = frozenset({"int", "decimal"})
TIME_TAGS = frozenset({"time", "timep"})


class UnsupportedValueTagError(ValueError):
    """Raised when a tagged value's tag is not a known Pact base type."""

    def __init__(self, value: Any):
        super().__init__(f"Unsupported Pact value tag: {value!r}")
        self.value = value


@dataclass(frozen=True)
class Tagged:
    """A single-key wrapper such as ``{"decimal": "0.1"}``."""

    tag: str
    value: Any

    def to_json(self) -> dict[str, Any]:
        return {self.tag: self.value}


@dataclass(frozen=True)
class Composite:
    """A multi-field object that is passed through as-is."""

    fields: dict[str, Any]


PactValue = Union[Tagged, Composite, str, int, float, bool, None, list]


def decode_pact_value(raw: Any) -> PactValue:
    """Decode one JSON value from the indexer."""
    if isinstance(raw, dict):
        if len(raw) > 1:
            return Composite(dict(raw))
        if len(raw) == 1:
            ((tag, value),) = raw.items()
            return Tagged(tag, value)
        raise UnsupportedValueTagError(raw)
    return raw


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def normalize_value(value: Any) -> Any:
    """Convert a raw or decoded Pact value to a plain scalar.

    Already-normalized scalars are returned unchanged, so normalizing twice
    is the same as normalizing once.
    """
    if isinstance(value, dict):
        value = decode_pact_value(value)

    if isinstance(value, Composite):
        return value.fields
    if not isinstance(value, Tagged):
        return value

    if value.tag in NUMERIC_TAGS:
        if _is_number(value.value):
            return str(value.value)
        return value.value
    if value.tag in TIME_TAGS:
        return value.value
    raise UnsupportedValueTagError(value.to_json())
