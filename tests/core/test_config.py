"""Tests for configuration loading."""

import json

import pytest

from tube_relay.core.config import Config


@pytest.fixture(autouse=True)
def no_port_override(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)


def test_missing_file_writes_defaults(tmp_path):
    path = tmp_path / "config.json"

    config = Config(str(path))

    assert config.system.api_port == 3000
    assert config.stream.chunk_size_bytes == 65536
    assert config.client.storage_key == "tube-relay-playlist"
    assert config.client.controls_hide_delay_seconds == 2.0
    saved = json.loads(path.read_text())
    assert set(saved) == {"resolver", "stream", "system", "client"}


def test_loads_sections_and_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "stream": {"chunk_size_bytes": 1024, "enable_cache": False, "legacy_option": True},
        "system": {"api_port": 8080, "log_level": "DEBUG"},
    }))

    config = Config(str(path))

    assert config.stream.chunk_size_bytes == 1024
    assert config.stream.enable_cache is False
    assert config.system.api_port == 8080
    assert config.system.log_level == "DEBUG"
    assert config.resolver.player_clients == ["web", "android"]


def test_broken_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    config = Config(str(path))

    assert config.system.api_port == 3000
    assert config.stream.enable_cache is True


def test_port_environment_override(tmp_path, monkeypatch):
    monkeypatch.setenv("PORT", "4321")

    config = Config(str(tmp_path / "config.json"))

    assert config.system.api_port == 4321


def test_non_numeric_port_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("PORT", "http")

    config = Config(str(tmp_path / "config.json"))

    assert config.system.api_port == 3000


def test_save_round_trip(tmp_path):
    path = tmp_path / "config.json"
    config = Config(str(path))
    config.client.api_base_url = "http://relay.test:9000"
    config.save_config()

    assert Config(str(path)).client.api_base_url == "http://relay.test:9000"
