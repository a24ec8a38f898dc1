"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..signals.models import Timeframe


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_server_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate server parameters."""
        errors = []

        # Validate port
        if "port" in params:
            value = params["port"]
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 65535:
                errors.append(ValidationError(
                    field="server.port",
                    message="Must be an integer between 0 and 65535",
                    value=value
                ))

        # Validate path
        if "path" in params:
            value = params["path"]
            if not isinstance(value, str) or not value.startswith("/"):
                errors.append(ValidationError(
                    field="server.path",
                    message="Must be a string starting with '/'",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_generator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate periodic generator parameters."""
        errors = []

        # Validate interval_seconds
        if "interval_seconds" in params:
            value = params["interval_seconds"]
            if not isinstance(value, (int, float)) or value <= 0:
                errors.append(ValidationError(
                    field="generator.interval_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        # Validate emit_probability
        if "emit_probability" in params:
            value = params["emit_probability"]
            if not isinstance(value, (int, float)) or value < 0 or value > 1:
                errors.append(ValidationError(
                    field="generator.emit_probability",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        # Validate price_jitter_pct
        if "price_jitter_pct" in params:
            value = params["price_jitter_pct"]
            if not isinstance(value, (int, float)) or value < 0 or value >= 1:
                errors.append(ValidationError(
                    field="generator.price_jitter_pct",
                    message="Must be a non-negative number below 1",
                    value=value
                ))

        # Validate timeframe
        if "timeframe" in params:
            value = params["timeframe"]
            if value not in {tf.value for tf in Timeframe}:
                errors.append(ValidationError(
                    field="generator.timeframe",
                    message=f"Must be one of {', '.join(tf.value for tf in Timeframe)}",
                    value=value
                ))

        # Validate enabled
        if "enabled" in params:
            value = params["enabled"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="generator.enabled",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_client_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate listener client parameters."""
        errors = []

        # Validate url
        if "url" in params:
            value = params["url"]
            if not isinstance(value, str) or not value.startswith(("ws://", "wss://")):
                errors.append(ValidationError(
                    field="client.url",
                    message="Must be a ws:// or wss:// URL",
                    value=value
                ))

        for name in ("keepalive_interval_seconds", "reconnect_delay_seconds"):
            if name in params:
                value = params[name]
                if not isinstance(value, (int, float)) or value <= 0:
                    errors.append(ValidationError(
                        field=f"client.{name}",
                        message="Must be a positive number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_catalog_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate instrument catalog parameters."""
        errors = []

        symbols = []
        for kind in ("forex", "crypto", "commodities"):
            value = params.get(kind, [])
            if not isinstance(value, (list, tuple)) or not all(isinstance(s, str) and s for s in value):
                errors.append(ValidationError(
                    field=f"catalog.{kind}",
                    message="Must be a list of non-empty symbol strings",
                    value=value
                ))
            else:
                symbols.extend(value)

        if not errors and not symbols:
            errors.append(ValidationError(
                field="catalog",
                message="At least one instrument must be configured",
                value=symbols
            ))

        base_prices = params.get("base_prices", {})
        if isinstance(base_prices, dict):
            for symbol, price in base_prices.items():
                if not isinstance(price, (int, float)) or price <= 0:
                    errors.append(ValidationError(
                        field=f"catalog.base_prices.{symbol}",
                        message="Must be a positive number",
                        value=price
                    ))
        else:
            errors.append(ValidationError(
                field="catalog.base_prices",
                message="Must be a mapping of symbol to price",
                value=base_prices
            ))

        # Validate default_base_price
        if "default_base_price" in params:
            value = params["default_base_price"]
            if not isinstance(value, (int, float)) or value <= 0:
                errors.append(ValidationError(
                    field="catalog.default_base_price",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "server" in config:
            errors.extend(ConfigValidator.validate_server_params(config["server"]))

        if "generator" in config:
            errors.extend(ConfigValidator.validate_generator_params(config["generator"]))

        if "client" in config:
            errors.extend(ConfigValidator.validate_client_params(config["client"]))

        if "catalog" in config:
            errors.extend(ConfigValidator.validate_catalog_params(config["catalog"]))

        return errors
