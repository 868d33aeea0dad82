"""Capabilities a buyer signs for a marketplace buy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional

from .events import NormalizedEvent
from .royalties import Payout, seller_proceeds

logger = logging.getLogger(__name__)

BUY_CAPABILITY = "marmalade.ledger.BUY"
TRANSFER_CAPABILITY = "coin.TRANSFER"
GAS_CAPABILITY = "coin.GAS"


@dataclass(frozen=True)
class Capability:
    name: str
    args: list[Any] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "args": list(self.args)}


def build_buy_capabilities(
    quote: NormalizedEvent,
    sale: NormalizedEvent,
    buyer: str,
    payouts: Mapping[str, Payout],
    recipient_bonus: Optional[Decimal] = None,
) -> list[Capability]:
    """
    Build the ``BUY`` capability followed by one ``coin.TRANSFER`` per payout.

    The quote's recipient gets ``recipient_bonus`` on top of its payout
    (default: the truncated 90% of the sale price). Transfers follow the
    iteration order of ``payouts``.

    Args:
        quote: QUOTE event for the sale
        sale: SALE event for the sale
        buyer: Buying account
        payouts: Royalty payouts keyed by account
        recipient_bonus: Amount added to the recipient's transfer

    Returns:
        Capability list, ``BUY`` first
    """
    q = quote.params
    s = sale.params
    if recipient_bonus is None:
        recipient_bonus = seller_proceeds(q["salePrice"])

    caps = [
        Capability(
            BUY_CAPABILITY,
            [q["tokenId"], s["seller"], buyer, q["amount"], {"int": s["timeout"]}, q["saleId"]],
        )
    ]

    recipient = q["recipient"]
    if recipient not in payouts:
        logger.warning(
            "Quote recipient %s has no royalty payout entry; no proceeds transfer is added",
            recipient,
        )

    for account, entry in payouts.items():
        amount = entry.payout
        if account == recipient:
            amount = amount + recipient_bonus
        caps.append(Capability(TRANSFER_CAPABILITY, [buyer, account, amount]))
    return caps
