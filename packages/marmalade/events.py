"""Event kinds and normalization of raw indexer events."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from .pact_values import normalize_value


class EventKind(str, Enum):
    """Closed set of events the marketplace state is rebuilt from."""

    UPDATE_OWNER = "user.policy1.UPDATE_OWNER"
    QUOTE = "user.policy1.QUOTE"
    TOKEN_WEIGHT = "user.policy1.TOKEN_WEIGHT"
    SALE = "marmalade.ledger.SALE"


# Positional parameter names per kind, in emission order.
EVENT_FIELDS: dict[EventKind, tuple[str, ...]] = {
    EventKind.UPDATE_OWNER: ("id", "account", "guard", "weight"),
    EventKind.QUOTE: ("saleId", "tokenId", "recipient", "amount", "price", "salePrice"),
    EventKind.TOKEN_WEIGHT: ("tokenId", "weight"),
    EventKind.SALE: ("tokenId", "seller", "amount", "timeout", "saleId"),
}


class UnknownEventKindError(ValueError):
    """Raised when an event name is not one of :class:`EventKind`."""

    def __init__(self, name: str, params: list[Any]):
        super().__init__(
            f"Unknown event kind: {name} -- {json.dumps(params, default=str)}"
        )
        self.name = name
        self.params = params


class MalformedEventError(ValueError):
    """Raised when a known event arrives with too few parameters."""

    def __init__(self, name: str, params: list[Any], missing: tuple[str, ...]):
        super().__init__(
            f"Event {name} is missing {', '.join(missing)} -- "
            f"{json.dumps(params, default=str)}"
        )
        self.name = name
        self.params = params
        self.missing = missing


def event_kind(name: str, params: Optional[list[Any]] = None) -> EventKind:
    try:
        return EventKind(name)
    except ValueError:
        raise UnknownEventKindError(name, list(params or [])) from None


def normalize_params(name: str, raw_params: Iterable[Any]) -> dict[str, Any]:
    """Normalize positional parameters and name them by event kind.

    Extra trailing parameters are dropped.

    Raises:
        UnknownEventKindError: If ``name`` is not a known kind
        MalformedEventError: If fewer parameters arrive than the kind names
    """
    values = [normalize_value(p) for p in raw_params]
    kind = event_kind(name, values)
    field_names = EVENT_FIELDS[kind]
    if len(values) < len(field_names):
        raise MalformedEventError(name, values, field_names[len(values):])
    return dict(zip(field_names, values))


@dataclass(frozen=True)
class NormalizedEvent:
    """An indexer event with named, normalized parameters."""

    name: str
    params: dict[str, Any]
    height: int
    module_hash: Optional[str] = None
    block_time: Optional[str] = None
    block_hash: Optional[str] = None
    request_key: Optional[str] = None
    idx: Optional[int] = None
    chain: Optional[int] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> EventKind:
        return EventKind(self.name)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "NormalizedEvent":
        """Build from an indexer event dict (``name``, ``params``, metadata)."""
        known = {
            "name", "params", "height", "moduleHash", "blockTime",
            "blockHash", "requestKey", "idx", "chain",
        }
        name = raw["name"]
        return cls(
            name=name,
            params=normalize_params(name, raw.get("params") or []),
            height=int(raw.get("height") or 0),
            module_hash=raw.get("moduleHash"),
            block_time=raw.get("blockTime"),
            block_hash=raw.get("blockHash"),
            request_key=raw.get("requestKey"),
            idx=raw.get("idx"),
            chain=raw.get("chain"),
            extra={k: v for k, v in raw.items() if k not in known},
        )


def normalize_events(raw_events: Iterable[dict[str, Any]]) -> list[NormalizedEvent]:
    """Normalize a sequence of raw events, preserving order."""
    return [NormalizedEvent.from_raw(raw) for raw in raw_events]
