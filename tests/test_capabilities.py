"""Offline tests for buy capability assembly."""

from __future__ import annotations

import logging
from decimal import Decimal

from packages.marmalade.capabilities import Capability, build_buy_capabilities
from packages.marmalade.events import NormalizedEvent
from packages.marmalade.royalties import Payout, calculate_royalty_payouts
from packages.marmalade.state import Owner
from tests._event_factory import BUYER, quote_event, sale_event

_D = Decimal


def _quote_and_sale(recipient: str = "B"):
    quote = NormalizedEvent.from_raw(quote_event("sale-1", "T", recipient, 3, "33.3", "100", height=1))
    sale = NormalizedEvent.from_raw(sale_event("T", "A", 3, 2619077, "sale-1", height=1))
    return quote, sale


def test_buy_capability_comes_first_with_tagged_timeout():
    quote, sale = _quote_and_sale()
    caps = build_buy_capabilities(quote, sale, BUYER, {})

    assert caps == [
        Capability(
            "marmalade.ledger.BUY",
            ["T", "A", BUYER, "3", {"int": "2619077"}, "sale-1"],
        )
    ]


def test_recipient_transfer_includes_sale_proceeds():
    quote, sale = _quote_and_sale(recipient="B")
    owners = {
        ("T", "A"): Owner("T", "A", 10),
        ("T", "B"): Owner("T", "B", 5),
    }
    payouts = calculate_royalty_payouts("T", "A", "3", "100", owners)
    caps = build_buy_capabilities(quote, sale, BUYER, payouts)

    transfers = caps[1:]
    assert [c.name for c in transfers] == ["coin.TRANSFER", "coin.TRANSFER"]
    assert transfers[0].args == [BUYER, "A", _D("4.666666666666")]
    assert transfers[1].args == [BUYER, "B", _D("93.333333333333")]


def test_explicit_recipient_bonus_overrides_default():
    quote, sale = _quote_and_sale(recipient="B")
    payouts = {"B": Payout("B", _D("1"))}
    caps = build_buy_capabilities(quote, sale, BUYER, payouts, recipient_bonus=_D("2.5"))
    assert caps[1].args == [BUYER, "B", _D("3.5")]


def test_transfers_follow_payout_order():
    quote, sale = _quote_and_sale(recipient="Z")
    payouts = {
        "C": Payout("C", _D("1")),
        "A": Payout("A", _D("2")),
        "Z": Payout("Z", _D("0")),
    }
    caps = build_buy_capabilities(quote, sale, BUYER, payouts)
    assert [c.args[1] for c in caps[1:]] == ["C", "A", "Z"]


def test_missing_recipient_logs_warning(caplog):
    quote, sale = _quote_and_sale(recipient="nobody")
    payouts = {"A": Payout("A", _D("1"))}
    with caplog.at_level(logging.WARNING, logger="packages.marmalade.capabilities"):
        caps = build_buy_capabilities(quote, sale, BUYER, payouts)
    assert len(caps) == 2
    assert caps[1].args == [BUYER, "A", _D("1")]
    assert "nobody" in caplog.text


def test_capability_to_json():
    cap = Capability("coin.GAS")
    assert cap.to_json() == {"name": "coin.GAS", "args": []}
