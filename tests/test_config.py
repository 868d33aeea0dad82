"""Tests for config defaults, file loading, and env overrides."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from packages.marmalade.config import ConfigLoadError, MarmConfig, load_config, read_config_file


def test_defaults():
    config = load_config(env={})
    assert config == MarmConfig()
    assert config.event_host == "testnetqueries.kadena.network"
    assert config.event_names == ["user.policy1", "marmalade.ledger.SALE"]
    assert config.page_size == 50
    assert config.concurrency == 4
    assert config.newest_first is False


def test_file_values_override_defaults(tmp_path: Path):
    path = tmp_path / "marmtool.json"
    path.write_text(
        json.dumps({"page_size": 100, "module_hash_blacklist": ["old-hash"], "chain_id": "8"}),
        encoding="utf-8",
    )
    config = load_config(path, env={})
    assert config.page_size == 100
    assert config.module_hash_blacklist == ["old-hash"]
    assert config.chain_id == "8"
    assert config.concurrency == 4


def test_bom_prefixed_file_is_accepted(tmp_path: Path):
    path = tmp_path / "bom.json"
    path.write_bytes(b"\xef\xbb\xbf" + json.dumps({"network_id": "mainnet01"}).encode("utf-8"))
    assert read_config_file(path) == {"network_id": "mainnet01"}


def test_env_overrides_file(tmp_path: Path):
    path = tmp_path / "marmtool.json"
    path.write_text(json.dumps({"event_host": "file.example"}), encoding="utf-8")
    config = load_config(
        path,
        env={"MARMTOOL_EVENT_HOST": "env.example", "MARMTOOL_CONCURRENCY": "8"},
    )
    assert config.event_host == "env.example"
    assert config.concurrency == 8


def test_env_defaults_to_os_environ(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MARMTOOL_NETWORK_ID", "mainnet01")
    assert load_config().network_id == "mainnet01"


def test_invalid_env_value():
    with pytest.raises(ConfigLoadError, match="MARMTOOL_PAGE_SIZE"):
        load_config(env={"MARMTOOL_PAGE_SIZE": "many"})


@pytest.mark.parametrize("payload", [{"page_size": 0}, {"concurrency": -1}, {"page_size": "50"}])
def test_non_positive_sizes_rejected(tmp_path: Path, payload):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ConfigLoadError):
        load_config(path, env={})


def test_unknown_key_rejected(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"pagesize": 10}), encoding="utf-8")
    with pytest.raises(ConfigLoadError, match="pagesize"):
        load_config(path, env={})


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigLoadError, match="not found"):
        load_config(tmp_path / "missing.json", env={})


def test_non_object_file(tmp_path: Path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigLoadError, match="JSON object"):
        load_config(path, env={})
