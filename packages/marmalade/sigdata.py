"""Unsigned Pact command assembly in the SigData format wallets accept.

Only structure is produced here: metadata, signer capability lists, the
continuation payload, and its hash. Keys never enter this module.
"""

from __future__ import annotations

import base64
import hashlib
import json
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from .capabilities import GAS_CAPABILITY, Capability

CREATION_TIME_SKEW_SECONDS = 15
DEFAULT_TTL = 15000


def decimal_text(value: Decimal) -> str:
    """Exact fixed-point text for a finite Decimal; ``-0`` is written as ``0``."""
    if not value.is_finite():
        raise ValueError(f"Cannot encode non-finite amount {value!r}")
    if value.is_zero():
        value = abs(value)
    return format(value, "f")


def dump_json(payload: Any) -> str:
    """Compact JSON with Decimals written digit for digit as JSON numbers.

    ``float(Decimal)`` would round payouts past 17 significant digits, so
    amounts never pass through float on the way out.
    """
    if isinstance(payload, Decimal):
        return decimal_text(payload)
    if isinstance(payload, Capability):
        return dump_json(payload.to_json())
    if isinstance(payload, dict):
        items = (f"{json.dumps(str(key))}:{dump_json(value)}" for key, value in payload.items())
        return "{" + ",".join(items) + "}"
    if isinstance(payload, (list, tuple)):
        return "[" + ",".join(dump_json(value) for value in payload) + "]"
    if payload is None or isinstance(payload, (str, int, float, bool)):
        return json.dumps(payload)
    raise TypeError(f"Object of type {type(payload).__name__} is not JSON serializable")


def auto_creation_time() -> int:
    return int(time.time()) - CREATION_TIME_SKEW_SECONDS


def make_meta(
    sender: str,
    chain_id: str,
    gas_price: float,
    gas_limit: int,
    creation_time: int,
    ttl: int = DEFAULT_TTL,
) -> dict[str, Any]:
    return {
        "creationTime": creation_time,
        "ttl": ttl,
        "gasLimit": gas_limit,
        "chainId": chain_id,
        "gasPrice": gas_price,
        "sender": sender,
    }


def add_gas_cap(caps: Iterable[Capability]) -> list[Capability]:
    return list(caps) + [Capability(GAS_CAPABILITY, [])]


def make_signer(public_key: str, caps: Iterable[Capability]) -> dict[str, Any]:
    return {"pubKey": public_key, "clist": [cap.to_json() for cap in caps]}


def make_cont_payload(
    pact_id: str,
    step: int,
    signers: list[dict[str, Any]],
    network_id: str,
    meta: dict[str, Any],
    data: Optional[dict[str, Any]] = None,
    rollback: bool = False,
    nonce: Optional[str] = None,
) -> dict[str, Any]:
    """Continuation command for step ``step`` of the pact ``pact_id``."""
    if nonce is None:
        nonce = datetime.now(timezone.utc).isoformat()
    return {
        "networkId": network_id,
        "payload": {
            "cont": {
                "pactId": pact_id,
                "step": step,
                "rollback": rollback,
                "data": data or {},
                "proof": None,
            }
        },
        "signers": signers,
        "meta": meta,
        "nonce": nonce,
    }


def hash_command(cmd: str) -> str:
    """Unpadded base64url Blake2b-256 digest of a command string."""
    digest = hashlib.blake2b(cmd.encode("utf-8"), digest_size=32).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def make_sig_data(command: dict[str, Any]) -> dict[str, Any]:
    """Wrap a command as SigData with an empty signature slot per signer."""
    cmd = dump_json(command)
    return {
        "hash": hash_command(cmd),
        "sigs": [{"pubKey": signer["pubKey"], "sig": None} for signer in command["signers"]],
        "cmd": cmd,
    }
