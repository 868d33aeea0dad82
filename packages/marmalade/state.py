"""Projections of normalized events into owner, quote, and sale views.

Views are rebuilt from scratch on every call. The reducers never compare
heights: input order is processing order, so callers that want the newest
event to win must pass events sorted oldest first.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from .events import EventKind, NormalizedEvent


class QuoteNotFoundError(LookupError):
    def __init__(self, sale_id: str):
        super().__init__(f"No quote found for sale id {sale_id!r}")
        self.sale_id = sale_id


class SaleNotFoundError(LookupError):
    def __init__(self, sale_id: str):
        super().__init__(f"No sale found for sale id {sale_id!r}")
        self.sale_id = sale_id


@dataclass(frozen=True)
class Owner:
    """Latest royalty weight of ``account`` on token ``id``."""

    id: str
    account: str
    weight: int

    @property
    def key(self) -> tuple[str, str]:
        return (self.id, self.account)


def parse_weight(value: Any) -> int:
    """Integer part of a weight, truncated toward zero (``"5.0"`` -> 5)."""
    return int(Decimal(str(value)))


def reduce_owners(events: Iterable[NormalizedEvent]) -> dict[tuple[str, str], Owner]:
    """Map ``(token_id, account)`` to the last owner update seen for it.

    Each update overwrites the previous entry for its key entirely.
    """
    owners: dict[tuple[str, str], Owner] = {}
    for event in events:
        if event.name != EventKind.UPDATE_OWNER.value:
            continue
        owner = Owner(
            id=event.params["id"],
            account=event.params["account"],
            weight=parse_weight(event.params["weight"]),
        )
        owners[owner.key] = owner
    return owners


def reduce_quotes(events: Iterable[NormalizedEvent]) -> list[NormalizedEvent]:
    return [event for event in events if event.name == EventKind.QUOTE.value]


def reduce_sales(events: Iterable[NormalizedEvent]) -> list[NormalizedEvent]:
    return [event for event in events if event.name == EventKind.SALE.value]


def _last_with_sale_id(events: Iterable[NormalizedEvent], sale_id: str) -> Optional[NormalizedEvent]:
    found = None
    for event in events:
        if event.params.get("saleId") == sale_id:
            found = event
    return found


def find_quote(events: Iterable[NormalizedEvent], sale_id: str) -> NormalizedEvent:
    """Return the quote for ``sale_id``; later duplicates win."""
    quote = _last_with_sale_id(reduce_quotes(events), sale_id)
    if quote is None:
        raise QuoteNotFoundError(sale_id)
    return quote


def find_sale(events: Iterable[NormalizedEvent], sale_id: str) -> NormalizedEvent:
    """Return the sale for ``sale_id``; later duplicates win."""
    sale = _last_with_sale_id(reduce_sales(events), sale_id)
    if sale is None:
        raise SaleNotFoundError(sale_id)
    return sale
