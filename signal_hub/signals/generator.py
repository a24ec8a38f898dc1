"""
Signal generation for on-demand requests and the periodic demo timer.

The periodic path is a traffic stub: a probability gate and randomized
field values produce sparse, non-deterministic demo signals. It carries no
market semantics. Randomness and the clock are injected so tests can
script exact outputs.
"""

import math
import random
from typing import Any, Optional, Protocol, Sequence, TypeVar

import structlog

from ..channel.broadcaster import Broadcaster
from ..channel.registry import ConnectionRegistry
from ..config.defaults import GeneratorParams
from ..errors import InvalidSignalRequest
from ..markets.catalog import MarketCatalog
from ..utils.time import Clock, TimeDerivedIdSource, format_timestamp, utc_now
from .models import DEFAULT_TIMEFRAME, Signal, SignalType, Timeframe

logger = structlog.get_logger(__name__)

T = TypeVar("T")

ACTIVE_STATUS = "active"


class RandomSource(Protocol):
    """Subset of random.Random used by the generator."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


class SignalGenerator:
    """Creates signals from caller-supplied fields or from the demo timer."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        broadcaster: Broadcaster,
        params: Optional[GeneratorParams] = None,
        catalog: Optional[MarketCatalog] = None,
        rng: Optional[RandomSource] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.registry = registry
        self.broadcaster = broadcaster
        self.params = params or GeneratorParams()
        self.catalog = catalog or MarketCatalog()
        self.rng: RandomSource = rng or random.Random()
        self.clock = clock
        self.ids = TimeDerivedIdSource(clock)
        self.logger = logger

    def from_request(
        self,
        symbol: Any,
        type: Any,
        price: Any,
        timeframe: Any = None
    ) -> Signal:
        """
        Build a signal from an external on-demand request.

        Args:
            symbol: Instrument identifier, e.g. "BTC/USD"
            type: "buy" or "sell"
            price: Entry price, number or numeric string
            timeframe: Optional timeframe, defaults to D1

        Returns:
            New active signal; the caller decides whether to broadcast it

        Raises:
            InvalidSignalRequest: If a field is missing, unparseable or out of range
        """
        symbol = self._parse_symbol(symbol)
        signal_type = self._parse_type(type)
        entry_price = self._parse_price(price)
        signal_timeframe = self._parse_timeframe(timeframe)

        return self._build(symbol, signal_type, entry_price, signal_timeframe)

    def tick(self) -> Optional[Signal]:
        """
        Run one period of the demo generator.

        Emits only when at least one listener is registered and the
        probability gate passes; the signal is broadcast before returning.

        Returns:
            The broadcast signal, or None if nothing was emitted
        """
        if self.registry.size() == 0:
            self.logger.debug("Tick skipped, no listeners connected")
            return None

        if self.rng.random() >= self.params.emit_probability:
            return None

        symbols = self.catalog.all_symbols()
        if not symbols:
            self.logger.warning("Tick skipped, instrument catalog is empty")
            return None

        symbol = self.rng.choice(symbols)
        signal_type = self.rng.choice((SignalType.BUY, SignalType.SELL))
        jitter = self.params.price_jitter_pct
        entry_price = self.catalog.base_price(symbol) * (1 + self.rng.uniform(-jitter, jitter))

        signal = self._build(symbol, signal_type, entry_price, Timeframe(self.params.timeframe))

        self.logger.info(
            "Generated periodic signal",
            signal_id=signal.id,
            symbol=symbol,
            signal_type=signal_type.value,
            entry_price=entry_price,
        )
        self.broadcaster.broadcast(signal)
        return signal

    def _build(
        self,
        symbol: str,
        signal_type: SignalType,
        entry_price: float,
        timeframe: Timeframe
    ) -> Signal:
        now = self.clock()
        return Signal(
            id=self.ids.next_id(),
            symbol=symbol,
            type=signal_type,
            entry_price=entry_price,
            timestamp=format_timestamp(now),
            timeframe=timeframe,
            market=self.catalog.market_name(symbol),
            profit_loss=None,
            status=ACTIVE_STATUS,
        )

    @staticmethod
    def _parse_symbol(value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidSignalRequest("Missing required field: symbol", field="symbol", value=value)
        return value.strip()

    @staticmethod
    def _parse_type(value: Any) -> SignalType:
        if not isinstance(value, str) or not value.strip():
            raise InvalidSignalRequest("Missing required field: type", field="type", value=value)
        try:
            return SignalType(value.strip().lower())
        except ValueError:
            raise InvalidSignalRequest(
                f"Signal type must be 'buy' or 'sell', got {value!r}",
                field="type",
                value=value
            )

    @staticmethod
    def _parse_price(value: Any) -> float:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidSignalRequest("Missing required field: price", field="price", value=value)
        if isinstance(value, bool):
            raise InvalidSignalRequest("Price must be a number", field="price", value=value)

        try:
            price = float(value)
        except (TypeError, ValueError):
            raise InvalidSignalRequest(f"Price is not a number: {value!r}", field="price", value=value)

        if not math.isfinite(price) or price <= 0:
            raise InvalidSignalRequest(
                f"Price must be a finite positive number, got {value!r}",
                field="price",
                value=value
            )
        return price

    @staticmethod
    def _parse_timeframe(value: Any) -> Timeframe:
        if value is None or value == "":
            return DEFAULT_TIMEFRAME
        if isinstance(value, Timeframe):
            return value
        try:
            return Timeframe(str(value).strip().upper())
        except ValueError:
            raise InvalidSignalRequest(
                f"Unknown timeframe: {value!r}",
                field="timeframe",
                value=value
            )
