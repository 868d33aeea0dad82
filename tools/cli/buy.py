#!/usr/bin/env python3
"""Build unsigned buy SigData for a marmalade sale from indexer events."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

import requests

from packages.marmalade.buy import BuyRequest, compute_buy_sig_data
from packages.marmalade.config import ConfigLoadError, load_config
from packages.marmalade.events import MalformedEventError, UnknownEventKindError
from packages.marmalade.indexer import IndexerClient, IndexerRequestError
from packages.marmalade.pact_values import UnsupportedValueTagError
from packages.marmalade.royalties import ZeroTotalWeightError
from packages.marmalade.sigdata import dump_json
from packages.marmalade.state import QuoteNotFoundError, SaleNotFoundError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marmtool buy",
        description="Sync marketplace events and print unsigned buy SigData as JSON.",
    )
    parser.add_argument("--sale-id", required=True, help="Sale id (the sale's pact id).")
    parser.add_argument("--buyer", required=True, help="Buyer account name.")
    parser.add_argument("--buyer-key", required=True, help="Buyer public key (hex).")
    parser.add_argument("--gas-payer", required=True, help="Gas payer account name.")
    parser.add_argument("--gas-payer-key", required=True, help="Gas payer public key (hex).")
    parser.add_argument(
        "--buyer-guard",
        help='Buyer guard as JSON (default: {"keys": [buyer-key], "pred": "keys-all"}).',
    )
    parser.add_argument("--config", help="Path to a JSON config file.")
    parser.add_argument(
        "--newest-first",
        action="store_true",
        help="Process events newest to oldest (default: oldest to newest).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config)
    except ConfigLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args.newest_first:
        config.newest_first = True

    buyer_guard = None
    if args.buyer_guard:
        try:
            buyer_guard = json.loads(args.buyer_guard)
        except json.JSONDecodeError as exc:
            print(f"Error: --buyer-guard is not valid JSON: {exc}", file=sys.stderr)
            return 1

    request = BuyRequest(
        sale_id=args.sale_id,
        buyer=args.buyer,
        buyer_public_key=args.buyer_key,
        gas_payer=args.gas_payer,
        gas_payer_public_key=args.gas_payer_key,
        buyer_guard=buyer_guard,
    )
    client = IndexerClient(host=config.event_host, timeout=config.timeout_seconds)

    try:
        sig_data = asyncio.run(compute_buy_sig_data(client, config, request))
    except IndexerRequestError as exc:
        print(f"Error: indexer request failed: {exc}", file=sys.stderr)
        return 1
    except requests.RequestException as exc:
        print(f"Error: could not reach {config.event_host}: {exc}", file=sys.stderr)
        return 1
    except (
        UnsupportedValueTagError,
        UnknownEventKindError,
        MalformedEventError,
        QuoteNotFoundError,
        SaleNotFoundError,
        ZeroTotalWeightError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(dump_json(sig_data))
    return 0


if __name__ == "__main__":
    sys.exit(main())
