"""Marmalade marketplace state reconstruction and buy command assembly."""

from .http_client import HttpClient
from .indexer import IndexerClient, IndexerRequestError
from .pact_values import Composite, Tagged, UnsupportedValueTagError, decode_pact_value, normalize_value
from .events import (
    EVENT_FIELDS,
    EventKind,
    MalformedEventError,
    NormalizedEvent,
    UnknownEventKindError,
    normalize_events,
    normalize_params,
)
from .event_sync import SyncCursor, sync_events
from .state import (
    Owner,
    QuoteNotFoundError,
    SaleNotFoundError,
    find_quote,
    find_sale,
    reduce_owners,
    reduce_quotes,
    reduce_sales,
)
from .royalties import Payout, ZeroTotalWeightError, calculate_royalty_payouts, truncate
from .capabilities import Capability, build_buy_capabilities
from .config import ConfigLoadError, MarmConfig, load_config
from .buy import BuyPlan, BuyRequest, build_buy_sig_data, compute_buy_sig_data, prepare_buy

__all__ = [
    "HttpClient",
    "IndexerClient",
    "IndexerRequestError",
    "Composite",
    "Tagged",
    "UnsupportedValueTagError",
    "decode_pact_value",
    "normalize_value",
    "EVENT_FIELDS",
    "EventKind",
    "MalformedEventError",
    "NormalizedEvent",
    "UnknownEventKindError",
    "normalize_events",
    "normalize_params",
    "SyncCursor",
    "sync_events",
    "Owner",
    "QuoteNotFoundError",
    "SaleNotFoundError",
    "find_quote",
    "find_sale",
    "reduce_owners",
    "reduce_quotes",
    "reduce_sales",
    "Payout",
    "ZeroTotalWeightError",
    "calculate_royalty_payouts",
    "truncate",
    "Capability",
    "build_buy_capabilities",
    "MarmConfig",
    "load_config",
    "ConfigLoadError",
    "BuyPlan",
    "BuyRequest",
    "build_buy_sig_data",
    "compute_buy_sig_data",
    "prepare_buy",
]
