"""Tests for the signal data model."""

import json

import pytest

from signal_hub.signals.models import Signal, SignalType, Timeframe


class TestSignal:
    """Test Signal construction and wire format."""

    def test_defaults(self):
        signal = Signal(
            id="1",
            symbol="EUR/USD",
            type=SignalType.SELL,
            entry_price=1.09,
            timestamp="2024-01-01T12:00:00.000Z",
        )

        assert signal.timeframe == Timeframe.D1
        assert signal.profit_loss is None
        assert signal.market is None
        assert signal.status is None

    @pytest.mark.parametrize("price", [0, -1.5])
    def test_rejects_non_positive_price(self, price):
        with pytest.raises(ValueError):
            Signal(id="1", symbol="EUR/USD", type=SignalType.BUY,
                   entry_price=price, timestamp="2024-01-01T12:00:00.000Z")

    def test_is_immutable(self):
        signal = Signal(id="1", symbol="EUR/USD", type=SignalType.BUY,
                        entry_price=1.09, timestamp="2024-01-01T12:00:00.000Z")

        with pytest.raises(AttributeError):
            signal.timestamp = "2025-01-01T00:00:00.000Z"  # type: ignore[misc]

    def test_optional_fields_omitted_from_payload(self):
        signal = Signal(id="1", symbol="EUR/USD", type=SignalType.BUY,
                        entry_price=1.09, timestamp="2024-01-01T12:00:00.000Z")
        payload = signal.to_payload()

        assert "market" not in payload
        assert "status" not in payload
        assert payload["profitLoss"] is None
        assert payload["timeframe"] == "D1"

    def test_payload_key_order(self, sample_payload):
        signal = Signal.from_payload(sample_payload)

        assert list(signal.to_payload()) == [
            "id", "market", "symbol", "type", "entryPrice",
            "timestamp", "profitLoss", "status", "timeframe",
        ]

    def test_to_json_is_compact(self, sample_payload):
        text = Signal.from_payload(sample_payload).to_json()

        assert " " not in text.replace("Bitcoin / US Dollar", "")
        assert json.loads(text) == sample_payload

    def test_from_payload(self, sample_payload):
        signal = Signal.from_payload(sample_payload)

        assert signal.id == "1704110400000"
        assert signal.type is SignalType.BUY
        assert signal.entry_price == 60000.5
        assert signal.timeframe is Timeframe.D1
        assert signal.market == "Bitcoin / US Dollar"

    def test_from_payload_defaults_timeframe(self, sample_payload):
        del sample_payload["timeframe"]

        assert Signal.from_payload(sample_payload).timeframe is Timeframe.D1

    def test_from_payload_missing_field(self, sample_payload):
        del sample_payload["symbol"]

        with pytest.raises(KeyError):
            Signal.from_payload(sample_payload)
