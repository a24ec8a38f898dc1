"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Sequence

import pytest

from signal_hub.channel.broadcaster import Broadcaster
from signal_hub.channel.connection import BaseConnection
from signal_hub.channel.registry import ConnectionRegistry


class FakeConnection(BaseConnection):
    """In-memory connection recording every frame written to it."""

    def __init__(self, conn_id: str, open: bool = True, fail: Optional[Exception] = None):
        self._id = conn_id
        self.open = open
        self.fail = fail
        self.sent: list[str] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def is_open(self) -> bool:
        return self.open

    def send(self, text: str) -> None:
        if self.fail is not None:
            raise self.fail
        self.sent.append(text)


class ScriptedRandom:
    """Deterministic random source replaying scripted draws."""

    def __init__(
        self,
        randoms: Sequence[float] = (),
        choices: Sequence[int] = (),
        uniforms: Sequence[float] = ()
    ):
        self.randoms = list(randoms)
        self.choices = list(choices)
        self.uniforms = list(uniforms)    # fraction of the [a, b] interval

    def random(self) -> float:
        return self.randoms.pop(0)

    def choice(self, seq):
        return seq[self.choices.pop(0)]

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.uniforms.pop(0)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def make_connection() -> Callable[..., FakeConnection]:
    """Factory for fake listener connections."""
    def factory(conn_id: str, **kwargs: Any) -> FakeConnection:
        return FakeConnection(conn_id, **kwargs)
    return factory


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def broadcaster(registry: ConnectionRegistry) -> Broadcaster:
    return Broadcaster(registry)


@pytest.fixture
def scripted_random() -> Callable[..., ScriptedRandom]:
    """Factory for deterministic random sources."""
    return ScriptedRandom


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Sample broadcast payload as it appears on the wire."""
    return {
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
