"""Fan-out delivery of signals to registered listener connections."""

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from ..errors import DeliveryFailure
from ..logging.config import get_channel_logger, log_delivery_failure
from ..signals.models import Signal
from .connection import BaseConnection
from .registry import ConnectionRegistry

logger = get_channel_logger(__name__)


@dataclass
class BroadcastReport:
    """Outcome of one delivery pass."""
    delivered: int = 0
    skipped: int = 0
    failures: list[DeliveryFailure] = field(default_factory=list)


class Broadcaster:
    """
    Delivers one serialized payload to every OPEN connection in the registry.

    Writes are isolated: a failing connection is logged, does not stop the
    pass, and is unregistered once the pass is over. There is no retry and
    no waiting on slow receivers.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry
        self.logger = logger
        self._broadcast_count = 0
        self._delivery_count = 0
        self._error_count = 0

    def broadcast(self, signal: Signal) -> int:
        """
        Broadcast a signal to all ready listeners.

        Args:
            signal: Signal to deliver; serialized exactly once

        Returns:
            Number of connections the payload was written to
        """
        report = self._fan_out(signal.to_json(), signal_id=signal.id)

        self.logger.info(
            "Signal broadcast",
            signal_id=signal.id,
            symbol=signal.symbol,
            signal_type=signal.type.value,
            entry_price=signal.entry_price,
            delivered=report.delivered,
            skipped=report.skipped,
            failed=len(report.failures),
        )
        return report.delivered

    def send_to(self, connection: BaseConnection, payload: dict[str, Any]) -> bool:
        """
        Write a single JSON message to one connection.

        Returns:
            True if the write succeeded
        """
        if not connection.is_open:
            return False

        try:
            connection.send(json.dumps(payload, separators=(",", ":"), ensure_ascii=False))
        except Exception as e:
            self._record_failure(connection, None, e)
            self.registry.unregister(connection)
            return False

        return True

    def _fan_out(self, text: str, signal_id: Optional[str] = None) -> BroadcastReport:
        report = BroadcastReport()
        failed: list[BaseConnection] = []

        for connection in self.registry.snapshot():
            if not connection.is_open:
                report.skipped += 1
                continue

            try:
                connection.send(text)
            except Exception as e:
                report.failures.append(self._record_failure(connection, signal_id, e))
                failed.append(connection)
                continue

            report.delivered += 1

        for connection in failed:
            self.registry.unregister(connection)

        self._broadcast_count += 1
        self._delivery_count += report.delivered
        return report

    def _record_failure(
        self,
        connection: BaseConnection,
        signal_id: Optional[str],
        error: Exception
    ) -> DeliveryFailure:
        self._error_count += 1
        log_delivery_failure(self.logger, connection.id, signal_id, error)
        failure = DeliveryFailure(
            f"Write to connection {connection.id} failed: {error}",
            connection_id=connection.id,
            signal_id=signal_id,
        )
        failure.__cause__ = error
        return failure

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        attempts = self._delivery_count + self._error_count
        return {
            "broadcast_count": self._broadcast_count,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / attempts if attempts > 0 else 0.0
            )
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._broadcast_count = 0
        self._delivery_count = 0
        self._error_count = 0
