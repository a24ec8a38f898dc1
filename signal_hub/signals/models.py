"""
Signal data model for the broadcast channel.

A signal is created once, serialized once and handed to the broadcaster.
The server keeps no history, so the model is immutable and carries its own
wire representation.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SignalType(str, Enum):
    """Direction of a trading signal."""
    BUY = "buy"
    SELL = "sell"


class Timeframe(str, Enum):
    """Chart timeframes a signal can refer to."""
    M1 = "M1"
    M5 = "M5"
    M15 = "M15"
    M30 = "M30"
    H1 = "H1"
    H4 = "H4"
    D1 = "D1"
    W1 = "W1"


DEFAULT_TIMEFRAME = Timeframe.D1


@dataclass(frozen=True)
class Signal:
    """A single buy/sell event broadcast to all listeners."""

    id: str
    symbol: str
    type: SignalType
    entry_price: float
    timestamp: str                                   # ISO8601, set at creation
    timeframe: Timeframe = DEFAULT_TIMEFRAME
    market: Optional[str] = None                     # Display name for symbol
    profit_loss: Optional[float] = None
    status: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.entry_price > 0:
            raise ValueError(f"entry_price must be positive, got {self.entry_price}")

    def to_payload(self) -> dict[str, Any]:
        """Wire representation in broadcast field order."""
        payload: dict[str, Any] = {"id": self.id}
        if self.market is not None:
            payload["market"] = self.market
        payload["symbol"] = self.symbol
        payload["type"] = self.type.value
        payload["entryPrice"] = self.entry_price
        payload["timestamp"] = self.timestamp
        payload["profitLoss"] = self.profit_loss
        if self.status is not None:
            payload["status"] = self.status
        payload["timeframe"] = self.timeframe.value
        return payload

    def to_json(self) -> str:
        """Canonical JSON text sent over the wire."""
        return json.dumps(self.to_payload(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Signal":
        """
        Rebuild a signal from a received wire payload.

        Args:
            payload: Decoded JSON object with camelCase wire names

        Returns:
            Signal instance

        Raises:
            KeyError: If a required field is missing
            ValueError: If an enum value or the price is invalid
        """
        profit_loss = payload.get("profitLoss")
        return cls(
            id=str(payload["id"]),
            symbol=payload["symbol"],
            type=SignalType(payload["type"]),
            entry_price=float(payload["entryPrice"]),
            timestamp=payload["timestamp"],
            timeframe=Timeframe(payload.get("timeframe") or DEFAULT_TIMEFRAME.value),
            market=payload.get("market"),
            profit_loss=float(profit_loss) if profit_loss is not None else None,
            status=payload.get("status"),
        )
