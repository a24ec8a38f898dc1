"""Tests for signal fan-out delivery."""

import json

import pytest

from signal_hub.signals.models import Signal, SignalType


@pytest.fixture
def signal() -> Signal:
    return Signal(
        id="1704110400000",
        symbol="BTC/USD",
        type=SignalType.BUY,
        entry_price=60000.5,
        timestamp="2024-01-01T12:00:00.000Z",
        market="Bitcoin / US Dollar",
        status="active",
    )


class TestBroadcast:
    """Test broadcasting to registered connections."""

    def test_delivers_identical_text_to_every_open_connection(self, registry, broadcaster, make_connection, signal):
        conns = [make_connection(f"c{i}") for i in range(3)]
        for conn in conns:
            registry.register(conn)

        delivered = broadcaster.broadcast(signal)

        assert delivered == 3
        texts = [conn.sent for conn in conns]
        assert all(len(sent) == 1 for sent in texts)
        assert texts[0][0] == texts[1][0] == texts[2][0] == signal.to_json()

    def test_skips_connections_not_open(self, registry, broadcaster, make_connection, signal):
        ready = make_connection("ready")
        closing = make_connection("closing", open=False)
        registry.register(ready)
        registry.register(closing)

        delivered = broadcaster.broadcast(signal)

        assert delivered == 1
        assert ready.sent == [signal.to_json()]
        assert closing.sent == []
        # Skipping is not removal; the transport close handler owns that.
        assert closing in registry

    def test_unregistered_connection_receives_nothing(self, registry, broadcaster, make_connection, signal):
        a, b = make_connection("a"), make_connection("b")
        registry.register(a)
        registry.register(b)
        registry.unregister(a)

        assert broadcaster.broadcast(signal) == 1
        assert a.sent == []
        assert len(b.sent) == 1

    def test_empty_registry_delivers_nothing(self, broadcaster, signal):
        assert broadcaster.broadcast(signal) == 0

    def test_serializes_once(self, registry, broadcaster, make_connection, signal, monkeypatch):
        calls = []
        original = Signal.to_json

        def counting_to_json(self):
            calls.append(self.id)
            return original(self)

        monkeypatch.setattr(Signal, "to_json", counting_to_json)
        for i in range(4):
            registry.register(make_connection(f"c{i}"))

        broadcaster.broadcast(signal)

        assert calls == [signal.id]

    def test_payload_shape(self, registry, broadcaster, make_connection, signal):
        conn = make_connection("c1")
        registry.register(conn)

        broadcaster.broadcast(signal)
        payload = json.loads(conn.sent[0])

        assert payload == {
            "id": "1704110400000",
            "market": "Bitcoin / US Dollar",
            "symbol": "BTC/USD",
            "type": "buy",
            "entryPrice": 60000.5,
            "timestamp": "2024-01-01T12:00:00.000Z",
            "profitLoss": None,
            "status": "active",
            "timeframe": "D1",
        }


class TestDeliveryFailure:
    """Test isolation of per-connection write failures."""

    def test_failed_write_does_not_abort_delivery(self, registry, broadcaster, make_connection, signal):
        healthy_a = make_connection("a")
        broken = make_connection("broken", fail=ConnectionResetError("peer reset"))
        healthy_b = make_connection("b")
        for conn in (healthy_a, broken, healthy_b):
            registry.register(conn)

        delivered = broadcaster.broadcast(signal)

        assert delivered == 2
        assert healthy_a.sent == [signal.to_json()]
        assert healthy_b.sent == [signal.to_json()]

    def test_failed_connection_is_removed(self, registry, broadcaster, make_connection, signal):
        broken = make_connection("broken", fail=RuntimeError("write failed"))
        healthy = make_connection("healthy")
        registry.register(broken)
        registry.register(healthy)

        broadcaster.broadcast(signal)

        assert broken not in registry
        assert registry.size() == 1

        # Subsequent broadcasts no longer touch it.
        broken.fail = None
        broadcaster.broadcast(signal)
        assert broken.sent == []
        assert len(healthy.sent) == 2

    def test_stats_track_deliveries_and_errors(self, registry, broadcaster, make_connection, signal):
        registry.register(make_connection("ok"))
        registry.register(make_connection("bad", fail=OSError("boom")))

        broadcaster.broadcast(signal)
        stats = broadcaster.get_stats()

        assert stats["broadcast_count"] == 1
        assert stats["delivery_count"] == 1
        assert stats["error_count"] == 1
        assert stats["success_rate"] == 0.5

        broadcaster.reset_stats()
        assert broadcaster.get_stats()["delivery_count"] == 0


class TestSendTo:
    """Test single-connection writes."""

    def test_send_to_open_connection(self, registry, broadcaster, make_connection):
        conn = make_connection("c1")
        registry.register(conn)

        assert broadcaster.send_to(conn, {"type": "connection", "status": "connected"}) is True
        assert json.loads(conn.sent[0]) == {"type": "connection", "status": "connected"}

    def test_send_to_closed_connection_is_skipped(self, broadcaster, make_connection):
        conn = make_connection("c1", open=False)

        assert broadcaster.send_to(conn, {"type": "connection"}) is False
        assert conn.sent == []

    def test_send_to_failure_unregisters(self, registry, broadcaster, make_connection):
        conn = make_connection("c1", fail=OSError("broken pipe"))
        registry.register(conn)

        assert broadcaster.send_to(conn, {"type": "connection"}) is False
        assert conn not in registry
