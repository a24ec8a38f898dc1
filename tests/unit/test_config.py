"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from signal_hub.config.defaults import CatalogParams, get_default_config
from signal_hub.config.loader import ConfigLoader
from signal_hub.config.validation import ConfigValidator


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Config directory with no settings file."""
    return tmp_path


def write_settings(config_dir: Path, text: str) -> None:
    (config_dir / "settings.yaml").write_text(text)


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config.server.port == 8080
        assert config.server.path == "/"
        assert config.generator.interval_seconds == 30.0
        assert config.generator.emit_probability == 0.2
        assert config.generator.price_jitter_pct == 0.005
        assert config.client.keepalive_interval_seconds == 30.0
        assert config.client.reconnect_delay_seconds == 5.0

    def test_catalog_instances_do_not_share_mappings(self) -> None:
        """Test that mutable catalog defaults are per instance."""
        first, second = CatalogParams(), CatalogParams()
        assert first.base_prices == second.base_prices
        assert first.base_prices is not second.base_prices


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created."""
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)
        assert loader.config_dir.name == "config"

    def test_missing_settings_file(self, config_dir: Path) -> None:
        """Test that a missing settings file contributes nothing."""
        loader = ConfigLoader.create(config_dir)
        assert loader.load_settings() == {}
        assert loader.load() == get_default_config()

    def test_empty_settings_file(self, config_dir: Path) -> None:
        """Test that an empty settings file contributes nothing."""
        write_settings(config_dir, "")
        assert ConfigLoader.create(config_dir).load_settings() == {}

    def test_settings_override_defaults(self, config_dir: Path) -> None:
        """Test that settings.yaml overrides defaults per key."""
        write_settings(config_dir, "server:\n  port: 9000\ngenerator:\n  emit_probability: 0.5\n")

        config = ConfigLoader.create(config_dir).load()

        assert config.server.port == 9000
        assert config.server.host == "0.0.0.0"
        assert config.generator.emit_probability == 0.5
        assert config.generator.interval_seconds == 30.0

    def test_overrides_take_precedence(self, config_dir: Path) -> None:
        """Test that explicit overrides win over settings.yaml."""
        write_settings(config_dir, "generator:\n  emit_probability: 0.5\n  interval_seconds: 10\n")

        config = ConfigLoader.create(config_dir).load({"generator": {"emit_probability": 0.9}})

        assert config.generator.emit_probability == 0.9
        assert config.generator.interval_seconds == 10

    def test_catalog_lists_become_tuples(self, config_dir: Path) -> None:
        """Test that YAML lists are normalized for the frozen catalog."""
        write_settings(config_dir, "catalog:\n  crypto: [BTC/USD, SOL/USD]\n")

        config = ConfigLoader.create(config_dir).load()

        assert config.catalog.crypto == ("BTC/USD", "SOL/USD")
        assert config.catalog.forex == CatalogParams().forex

    def test_unknown_keys_are_ignored(self, config_dir: Path) -> None:
        """Test that unknown settings keys do not break loading."""
        write_settings(config_dir, "server:\n  port: 9001\n  tls: true\nmetrics:\n  enabled: true\n")

        config = ConfigLoader.create(config_dir).load()

        assert config.server.port == 9001

    def test_merge_config_keeps_defaults(self, config_dir: Path) -> None:
        """Test that merged dictionaries carry every default section."""
        merged = ConfigLoader.create(config_dir).merge_config({"client": {"client_name": "desk-1"}})

        assert set(merged) == {"server", "generator", "client", "catalog", "logging"}
        assert merged["client"]["client_name"] == "desk-1"
        assert merged["client"]["url"] == "ws://localhost:8080"


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_defaults_are_valid(self, config_dir: Path) -> None:
        """Test that the default configuration passes validation."""
        merged = ConfigLoader.create(config_dir).merge_config()
        assert ConfigValidator.validate_config(merged) == []

    def test_repository_settings_are_valid(self) -> None:
        """Test that the shipped settings.yaml passes validation."""
        merged = ConfigLoader.create().merge_config()
        assert ConfigValidator.validate_config(merged) == []

    @pytest.mark.parametrize("port", [-1, 70000, "8080", True])
    def test_invalid_port(self, port) -> None:
        errors = ConfigValidator.validate_server_params({"port": port})
        assert [e.field for e in errors] == ["server.port"]

    def test_invalid_path(self) -> None:
        errors = ConfigValidator.validate_server_params({"path": "signals"})
        assert [e.field for e in errors] == ["server.path"]

    @pytest.mark.parametrize("key,value", [
        ("interval_seconds", 0),
        ("emit_probability", 1.5),
        ("emit_probability", -0.1),
        ("price_jitter_pct", 1.0),
        ("timeframe", "Y1"),
        ("enabled", "yes"),
    ])
    def test_invalid_generator_params(self, key, value) -> None:
        errors = ConfigValidator.validate_generator_params({key: value})
        assert [e.field for e in errors] == [f"generator.{key}"]
        assert errors[0].value == value

    def test_probability_bounds_are_inclusive(self) -> None:
        assert ConfigValidator.validate_generator_params({"emit_probability": 0}) == []
        assert ConfigValidator.validate_generator_params({"emit_probability": 1}) == []

    def test_invalid_client_params(self) -> None:
        errors = ConfigValidator.validate_client_params({
            "url": "http://localhost:8080",
            "reconnect_delay_seconds": 0,
            "keepalive_interval_seconds": -5,
        })
        assert {e.field for e in errors} == {
            "client.url",
            "client.reconnect_delay_seconds",
            "client.keepalive_interval_seconds",
        }

    def test_empty_catalog(self) -> None:
        errors = ConfigValidator.validate_catalog_params({"forex": [], "crypto": [], "commodities": []})
        assert [e.field for e in errors] == ["catalog"]

    def test_invalid_base_price(self) -> None:
        errors = ConfigValidator.validate_catalog_params({
            "forex": ["EUR/USD"],
            "base_prices": {"EUR/USD": 0},
        })
        assert [e.field for e in errors] == ["catalog.base_prices.EUR/USD"]
