"""Royalty split for a marketplace sale (Decimal arithmetic).

10% of the sale price forms the royalty pool, which is divided among the
token owners in proportion to their weights:

  share = truncate(pool * effective_weight / total_weight, 12)

``total_weight`` sums every owner row, including rows with non-positive
weight; only rows with positive weight receive a share. When the seller is an
owner of the token being sold, their effective weight is reduced by the
amount sold and may go negative. Each share is truncated toward zero before
it is added to the account's running payout, so accounts holding several
rows can lose up to ``1e-12`` per row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from typing import Any, Mapping

from .state import Owner

logger = logging.getLogger(__name__)

ROYALTY_RATE = Decimal("0.1")
SELLER_RATE = Decimal("0.9")
PAYOUT_PRECISION = 12

_ZERO = Decimal("0")


class ZeroTotalWeightError(ZeroDivisionError):
    """Raised when the owners' weights sum to zero."""

    def __init__(self, token_id: str, owners_count: int):
        super().__init__(
            f"Cannot split royalties for {token_id!r}: total owner weight is 0 "
            f"across {owners_count} owner(s)"
        )
        self.token_id = token_id
        self.owners_count = owners_count


@dataclass
class Payout:
    account: str
    payout: Decimal


def to_decimal(value: Any) -> Decimal:
    """Convert an int, float, str, or Decimal into a Decimal."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def truncate(value: Any, places: int = PAYOUT_PRECISION) -> Decimal:
    """Truncate toward zero to ``places`` decimal places.

    >>> truncate(Decimal("0.1234567891239"))
    Decimal('0.123456789123')
    """
    return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN)


def royalty_pool(sale_price: Any) -> Decimal:
    return to_decimal(sale_price) * ROYALTY_RATE


def seller_proceeds(sale_price: Any) -> Decimal:
    """Truncated non-royalty share of the sale price."""
    return truncate(to_decimal(sale_price) * SELLER_RATE)


def calculate_royalty_payouts(
    token_id: str,
    seller: str,
    amount_sold: Any,
    sale_price: Any,
    owners: Mapping[Any, Owner],
) -> dict[str, Payout]:
    """
    Compute each owner account's royalty payout.

    Args:
        token_id: Token being sold
        seller: Selling account
        amount_sold: Quantity sold; deducted from the seller's weight on ``token_id``
        sale_price: Total sale price
        owners: Owner rows, usually from :func:`reduce_owners`

    Returns:
        Payouts keyed by account, in first-encountered owner order

    Raises:
        ZeroTotalWeightError: If the owner weights sum to zero
    """
    pool = royalty_pool(sale_price)
    amount = to_decimal(amount_sold)
    total_weight = sum((owner.weight for owner in owners.values()), 0)
    if total_weight == 0:
        raise ZeroTotalWeightError(token_id, len(owners))

    logger.debug(
        "Splitting royalty pool %s for %s across %d owner row(s), total weight %s",
        pool,
        token_id,
        len(owners),
        total_weight,
    )

    payouts: dict[str, Payout] = {}
    for owner in owners.values():
        if owner.weight <= 0:
            continue
        weight = Decimal(owner.weight)
        if owner.id == token_id and owner.account == seller:
            weight -= amount
        share = truncate(pool * weight / Decimal(total_weight))
        if owner.account in payouts:
            payouts[owner.account].payout += share
        else:
            payouts[owner.account] = Payout(owner.account, share)
    return payouts
