"""Runtime configuration: defaults, then a JSON file, then env overrides."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .event_sync import DEFAULT_CONCURRENCY, DEFAULT_PAGE_SIZE
from .events import EventKind
from .indexer import DEFAULT_EVENT_HOST
from .sigdata import DEFAULT_TTL

ENV_PREFIX = "MARMTOOL_"

# env var suffix -> (field name, parser)
_ENV_OVERRIDES = {
    "EVENT_HOST": ("event_host", str),
    "PAGE_SIZE": ("page_size", int),
    "CONCURRENCY": ("concurrency", int),
    "NETWORK_ID": ("network_id", str),
    "CHAIN_ID": ("chain_id", str),
}


class ConfigLoadError(ValueError):
    """Raised when a config file or override cannot be used."""


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Read a JSON object from ``path``.

    A leading UTF-8 BOM (as written by PowerShell 5.1) is accepted.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise ConfigLoadError(f"config file not found: {p}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"config file is not valid JSON ({p}): {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigLoadError(
            f"config file must contain a JSON object, got {type(payload).__name__}: {p}"
        )
    return payload


@dataclass
class MarmConfig:
    event_host: str = DEFAULT_EVENT_HOST
    event_names: list[str] = field(
        default_factory=lambda: ["user.policy1", EventKind.SALE.value]
    )
    page_size: int = DEFAULT_PAGE_SIZE
    concurrency: int = DEFAULT_CONCURRENCY
    newest_first: bool = False
    module_hash_blacklist: list[str] = field(default_factory=list)
    network_id: str = "testnet04"
    chain_id: str = "1"
    gas_price: float = 0.00000001
    gas_limit: int = 80000
    ttl: int = DEFAULT_TTL
    timeout_seconds: float = 20.0

    def validate(self) -> None:
        for name in ("page_size", "concurrency", "gas_limit", "ttl"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigLoadError(f"{name} must be a positive integer, got {value!r}")
        if not self.event_names:
            raise ConfigLoadError("event_names must not be empty")
        if not isinstance(self.module_hash_blacklist, list):
            raise ConfigLoadError("module_hash_blacklist must be a list of module hashes")


def config_from_dict(payload: Mapping[str, Any], base: Optional[MarmConfig] = None) -> MarmConfig:
    known = {f.name for f in fields(MarmConfig)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ConfigLoadError(f"unknown config key(s): {', '.join(unknown)}")
    current = {f.name: getattr(base or MarmConfig(), f.name) for f in fields(MarmConfig)}
    current.update(payload)
    return MarmConfig(**current)


def load_config(
    path: Union[str, Path, None] = None,
    env: Optional[Mapping[str, str]] = None,
) -> MarmConfig:
    """Build the effective config.

    Raises:
        ConfigLoadError: On unreadable files, unknown keys, or invalid values.
    """
    if env is None:
        env = os.environ

    config = MarmConfig()
    if path is not None:
        config = config_from_dict(read_config_file(path), config)

    overrides: dict[str, Any] = {}
    for suffix, (name, parse) in _ENV_OVERRIDES.items():
        raw = env.get(ENV_PREFIX + suffix)
        if raw is None or raw == "":
            continue
        try:
            overrides[name] = parse(raw)
        except ValueError as exc:
            raise ConfigLoadError(f"invalid {ENV_PREFIX + suffix}={raw!r}: {exc}") from exc
    if overrides:
        config = config_from_dict(overrides, config)

    config.validate()
    return config
