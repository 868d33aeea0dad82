"""End-to-end assembly of an unsigned buy command from indexer events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .capabilities import Capability, build_buy_capabilities
from .config import MarmConfig
from .event_sync import sync_events
from .events import NormalizedEvent, normalize_events
from .indexer import IndexerClient
from .royalties import Payout, calculate_royalty_payouts
from .sigdata import (
    add_gas_cap,
    auto_creation_time,
    make_cont_payload,
    make_meta,
    make_sig_data,
    make_signer,
)
from .state import Owner, find_quote, find_sale, reduce_owners

logger = logging.getLogger(__name__)

BUY_STEP = 1


@dataclass
class BuyRequest:
    """Who is buying which sale, and who pays gas."""

    sale_id: str
    buyer: str
    buyer_public_key: str
    gas_payer: str
    gas_payer_public_key: str
    buyer_guard: Optional[dict[str, Any]] = None

    def guard(self) -> dict[str, Any]:
        if self.buyer_guard is not None:
            return self.buyer_guard
        return {"keys": [self.buyer_public_key], "pred": "keys-all"}


@dataclass
class BuyPlan:
    quote: NormalizedEvent
    sale: NormalizedEvent
    owners: dict[tuple[str, str], Owner]
    payouts: dict[str, Payout]
    capabilities: list[Capability] = field(default_factory=list)


async def sync_marketplace_events(client: IndexerClient, config: MarmConfig) -> list[NormalizedEvent]:
    """Sync and normalize every configured event name, merged by height."""
    raw_events: list[dict[str, Any]] = []
    for name in config.event_names:
        raw_events.extend(
            await sync_events(
                client.afetch_events_page,
                name,
                page_size=config.page_size,
                concurrency=config.concurrency,
                newest_first=config.newest_first,
                module_hash_blacklist=config.module_hash_blacklist,
            )
        )
    raw_events.sort(key=lambda event: event.get("height", 0), reverse=config.newest_first)
    return normalize_events(raw_events)


def prepare_buy(events: Iterable[NormalizedEvent], sale_id: str, buyer: str) -> BuyPlan:
    """Reduce events and compute payouts and capabilities for ``sale_id``.

    Raises:
        QuoteNotFoundError: No QUOTE event carries ``sale_id``
        SaleNotFoundError: No SALE event carries ``sale_id``
        ZeroTotalWeightError: Owner weights sum to zero
    """
    events = list(events)
    quote = find_quote(events, sale_id)
    sale = find_sale(events, sale_id)
    owners = reduce_owners(events)

    q = quote.params
    payouts = calculate_royalty_payouts(
        q["tokenId"], sale.params["seller"], q["amount"], q["salePrice"], owners
    )
    capabilities = build_buy_capabilities(quote, sale, buyer, payouts)
    logger.info(
        "Prepared buy of %s (token %s): %d payout(s), %d capabilities",
        sale_id,
        q["tokenId"],
        len(payouts),
        len(capabilities),
    )
    return BuyPlan(quote, sale, owners, payouts, capabilities)


def build_buy_sig_data(
    plan: BuyPlan,
    request: BuyRequest,
    config: MarmConfig,
    creation_time: Optional[int] = None,
    nonce: Optional[str] = None,
) -> dict[str, Any]:
    """Continuation command for the sale's buy step, wrapped as SigData."""
    if creation_time is None:
        creation_time = auto_creation_time()
    meta = make_meta(
        request.gas_payer,
        config.chain_id,
        float(config.gas_price),
        int(config.gas_limit),
        creation_time,
        config.ttl,
    )
    signers = [
        make_signer(request.gas_payer_public_key, add_gas_cap([])),
        make_signer(request.buyer_public_key, plan.capabilities),
    ]
    command = make_cont_payload(
        plan.quote.params["saleId"],
        BUY_STEP,
        signers,
        config.network_id,
        meta,
        data={"buyer": request.buyer, "buyer-guard": request.guard()},
        rollback=False,
        nonce=nonce,
    )
    return make_sig_data(command)


async def compute_buy_sig_data(
    client: IndexerClient,
    config: MarmConfig,
    request: BuyRequest,
) -> dict[str, Any]:
    """Sync, reduce, and build the SigData for ``request``."""
    events = await sync_marketplace_events(client, config)
    plan = prepare_buy(events, request.sale_id, request.buyer)
    return build_buy_sig_data(plan, request, config)
