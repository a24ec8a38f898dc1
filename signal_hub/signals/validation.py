"""JSON schema validation for the broadcast signal wire format."""

import math
from typing import Any

import structlog

from ..utils.time import parse_timestamp
from .models import SignalType, Timeframe

logger = structlog.get_logger(__name__)


# Broadcast message shape
SIGNAL_SCHEMA = {
    "type": "object",
    "required": ["id", "symbol", "type", "entryPrice", "timestamp"],
    "properties": {
        "id": {
            "type": "string",
            "minLength": 1,
            "description": "Unique signal identifier"
        },
        "market": {
            "type": "string",
            "description": "Display name of the instrument"
        },
        "symbol": {
            "type": "string",
            "minLength": 1,
            "description": "Instrument identifier, e.g. BTC/USD"
        },
        "type": {
            "type": "string",
            "enum": [t.value for t in SignalType],
            "description": "Signal direction"
        },
        "entryPrice": {
            "type": "number",
            "exclusiveMinimum": 0,
            "description": "Entry price"
        },
        "timestamp": {
            "type": "string",
            "format": "date-time",
            "description": "Signal creation timestamp"
        },
        "profitLoss": {
            "type": ["number", "null"],
            "description": "Realized profit or loss, null while active"
        },
        "status": {
            "type": "string",
            "description": "Lifecycle status, e.g. active"
        },
        "timeframe": {
            "type": "string",
            "enum": [tf.value for tf in Timeframe],
            "description": "Chart timeframe"
        }
    },
    "additionalProperties": True
}


class SignalValidationError(Exception):
    """Signal validation error."""
    pass


class SignalValidator:
    """Validates received signal payloads against the wire schema."""

    def __init__(self):
        self.logger = logger
        self.schema = SIGNAL_SCHEMA

    def validate_signal(self, signal: dict[str, Any]) -> bool:
        """
        Validate a signal payload against the schema.

        Args:
            signal: Decoded signal dictionary

        Returns:
            True if valid

        Raises:
            SignalValidationError: If validation fails
        """
        try:
            self._validate_required_fields(signal)
            self._validate_field_types(signal)
            self._validate_field_values(signal)
            self._validate_timestamp(signal)

            return True

        except (TypeError, ValueError) as e:
            error_msg = f"Signal validation failed: {str(e)}"
            self.logger.debug(error_msg, signal_id=signal.get("id"))
            raise SignalValidationError(error_msg) from e

    def _validate_required_fields(self, signal: dict[str, Any]) -> None:
        """Validate required fields are present."""
        required_fields = self.schema["required"]
        missing_fields = [field for field in required_fields if field not in signal]

        if missing_fields:
            raise ValueError(f"Missing required fields: {missing_fields}")

    def _validate_field_types(self, signal: dict[str, Any]) -> None:
        """Validate field types match schema."""
        for field in ("id", "symbol"):
            value = signal.get(field)
            if not isinstance(value, str) or len(value) == 0:
                raise ValueError(f"{field} must be a non-empty string")

        price = signal.get("entryPrice")
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise ValueError(f"entryPrice must be a number, got: {price!r}")

        profit_loss = signal.get("profitLoss")
        if profit_loss is not None and (isinstance(profit_loss, bool) or not isinstance(profit_loss, (int, float))):
            raise ValueError(f"profitLoss must be a number or null, got: {profit_loss!r}")

        for field in ("market", "status"):
            if field in signal and not isinstance(signal[field], str):
                raise ValueError(f"{field} must be a string")

    def _validate_field_values(self, signal: dict[str, Any]) -> None:
        """Validate field values are within acceptable ranges."""
        if signal.get("type") not in self.schema["properties"]["type"]["enum"]:
            raise ValueError(f"Invalid type: {signal.get('type')}")

        price = signal["entryPrice"]
        if not math.isfinite(price) or price <= 0:
            raise ValueError(f"entryPrice must be a finite positive number, got: {price}")

        timeframe = signal.get("timeframe")
        if timeframe is not None and timeframe not in self.schema["properties"]["timeframe"]["enum"]:
            raise ValueError(f"Invalid timeframe: {timeframe}")

    def _validate_timestamp(self, signal: dict[str, Any]) -> None:
        """Validate timestamp format."""
        timestamp = signal.get("timestamp")
        if not isinstance(timestamp, str):
            raise ValueError(f"Invalid timestamp format: {timestamp!r}")
        try:
            parse_timestamp(timestamp)
        except ValueError:
            raise ValueError(f"Invalid timestamp format: {timestamp}")

    def is_valid(self, signal: dict[str, Any]) -> bool:
        """Non-raising variant of validate_signal."""
        try:
            return self.validate_signal(signal)
        except SignalValidationError:
            return False

    def get_schema(self) -> dict[str, Any]:
        """Get the JSON schema for signals."""
        return self.schema.copy()


validator = SignalValidator()


def validate_signal(signal: dict[str, Any]) -> bool:
    """Convenience function to validate a signal."""
    return validator.validate_signal(signal)
