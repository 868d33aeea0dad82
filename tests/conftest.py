from __future__ import annotations

import pytest

from tests._event_factory import SALE_ID, SELLER, TOKEN, owner_event, quote_event, sale_event


_ISOLATED_ENV_VARS = (
    "MARMTOOL_EVENT_HOST",
    "MARMTOOL_PAGE_SIZE",
    "MARMTOOL_CONCURRENCY",
    "MARMTOOL_NETWORK_ID",
    "MARMTOOL_CHAIN_ID",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's MARMTOOL_* settings out of tests."""
    for key in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def marketplace_raw_events() -> list[dict]:
    """Seller owns 10, k:alice owns 5; the seller sells 3 for 100."""
    return [
        owner_event(TOKEN, SELLER, 10, height=100),
        owner_event(TOKEN, "k:alice", 5, height=101),
        quote_event(SALE_ID, TOKEN, "k:alice", 3, "33.333333333333", "100.0", height=200),
        sale_event(TOKEN, SELLER, 3, 2619077, SALE_ID, height=200),
    ]
