"""
Reconnecting listener client.

Owns at most one connection attempt at a time. Every close or transport
error moves the client back to DISCONNECTED and schedules exactly one
reconnect after a fixed delay; there is no backoff growth and no retry cap.
The keep-alive task and the reconnect timer are cancelled whenever the
connection they belong to goes away, so timers never pile up across
reconnect cycles.
"""

import asyncio
import json
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Protocol, Union

from websockets.asyncio.client import connect as websocket_connect
from websockets.exceptions import ConnectionClosed

from ..config.defaults import ClientParams
from ..errors import StateTransitionError, TransportClosed, TransportError
from ..logging.config import get_client_logger, log_state_transition
from ..signals.models import Signal, SignalType
from ..signals.validation import SignalValidator
from ..utils.time import Clock, format_timestamp, utc_now
from .alerts import print_signal_alert
from .models import ALLOWED_TRANSITIONS, ClientState, ClientStats

logger = get_client_logger(__name__)

SIGNAL_TYPES = frozenset(t.value for t in SignalType)


class Transport(Protocol):
    """Duplex message channel returned by a connector."""

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...

    def __aiter__(self) -> AsyncIterator[Union[str, bytes]]: ...


Connector = Callable[[str], Awaitable[Transport]]
SignalHandler = Callable[[Signal], Any]


class ReconnectingClient:
    """WebSocket listener that survives transient disconnects."""

    def __init__(
        self,
        params: Optional[ClientParams] = None,
        connector: Optional[Connector] = None,
        on_signal: Optional[SignalHandler] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.params = params or ClientParams()
        self.connector: Connector = connector or websocket_connect
        self.on_signal: SignalHandler = on_signal or print_signal_alert
        self.clock = clock
        self.validator = SignalValidator()
        self.stats = ClientStats()
        self.logger = logger

        self._state = ClientState.DISCONNECTED
        self._transport: Optional[Transport] = None
        self._connection_task: Optional[asyncio.Task] = None
        self._keepalive_task: Optional[asyncio.Task] = None
        self._reconnect_handle: Optional[asyncio.TimerHandle] = None
        self._stopped = asyncio.Event()

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def keepalive_task(self) -> Optional[asyncio.Task]:
        return self._keepalive_task

    @property
    def reconnect_handle(self) -> Optional[asyncio.TimerHandle]:
        return self._reconnect_handle

    def connect(self) -> None:
        """
        Start a connection attempt.

        Must be called from a running event loop while DISCONNECTED.

        Raises:
            StateTransitionError: If the client is not DISCONNECTED
        """
        loop = asyncio.get_running_loop()
        self._transition(ClientState.CONNECTING, trigger="connect")
        self._cancel_reconnect()
        self.stats.connection_attempts += 1

        self._connection_task = loop.create_task(self._run_connection())

    async def _run_connection(self) -> None:
        url = self.params.url
        try:
            transport = await self.connector(url)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.handle_error(TransportError(f"Failed to connect: {e}", endpoint=url))
            return

        if self._state is not ClientState.CONNECTING:
            # Shut down while the handshake was in flight.
            await transport.close()
            return

        await self._handle_open(transport)

        try:
            async for message in transport:
                self.handle_message(message)
        except ConnectionClosed as e:
            self.handle_close(TransportClosed(
                "Connection closed abnormally",
                endpoint=url,
                code=e.rcvd.code if e.rcvd else None,
                reason=e.rcvd.reason if e.rcvd else None,
            ))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.handle_error(TransportError(f"Transport failure: {e}", endpoint=url))
        else:
            self.handle_close(TransportClosed(
                "Connection closed",
                endpoint=url,
                code=getattr(transport, "close_code", None),
                reason=getattr(transport, "close_reason", None),
            ))

    async def _handle_open(self, transport: Transport) -> None:
        self._transport = transport
        self._transition(ClientState.CONNECTED, trigger="open")
        self.stats.connections_opened += 1

        try:
            await self._send({
                "type": "client_connect",
                "client": self.params.client_name,
                "timestamp": format_timestamp(self.clock()),
            })
        except Exception as e:
            self.logger.warning("Failed to send identification", error=str(e))

        self._cancel_keepalive()
        self._keepalive_task = asyncio.get_running_loop().create_task(self._keepalive())

    async def _keepalive(self) -> None:
        interval = self.params.keepalive_interval_seconds
        while self._state is ClientState.CONNECTED:
            await asyncio.sleep(interval)
            if self._state is not ClientState.CONNECTED:
                return
            try:
                await self._send({"type": "ping", "timestamp": format_timestamp(self.clock())})
            except Exception as e:
                # The reader side observes the close and drives the transition.
                self.logger.warning("Keep-alive ping failed", error=str(e))
                return
            self.stats.pings_sent += 1
            self.logger.debug("Sent keep-alive ping")

    async def _send(self, payload: dict[str, Any]) -> None:
        if self._transport is None:
            raise TransportError("No open transport", endpoint=self.params.url)
        await self._transport.send(json.dumps(payload))

    def handle_message(self, raw: Union[str, bytes]) -> Optional[Signal]:
        """
        Process one inbound message.

        Buy/sell payloads that pass schema validation are surfaced through
        on_signal. Anything unparseable is logged and dropped.

        Returns:
            The surfaced signal, or None
        """
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            self._record_malformed("Message is not valid JSON", raw, e)
            return None

        if not isinstance(payload, dict):
            self._record_malformed("Message is not a JSON object", raw)
            return None

        message_type = payload.get("type")
        if message_type not in SIGNAL_TYPES:
            self.logger.debug("Received message", message_type=message_type)
            return None

        if not self.validator.is_valid(payload):
            self._record_malformed("Signal payload failed validation", raw)
            return None

        signal = Signal.from_payload(payload)
        self.stats.signals_received += 1
        self.logger.info(
            "Received signal",
            signal_id=signal.id,
            symbol=signal.symbol,
            signal_type=signal.type.value,
            entry_price=signal.entry_price,
        )

        try:
            self.on_signal(signal)
        except Exception:
            self.logger.exception("Signal handler failed", signal_id=signal.id)

        return signal

    def handle_error(self, error: TransportError) -> None:
        """Log a transport error and treat it as a close."""
        self.stats.last_error = str(error)
        self.logger.warning(
            "Transport error",
            error=str(error),
            error_type=type(error).__name__,
            state=self._state.value,
        )
        self._disconnect(trigger="error")

    def handle_close(self, closed: Optional[TransportClosed] = None) -> None:
        """React to the transport closing."""
        if closed is not None:
            self.logger.info(
                "Connection closed",
                code=closed.code,
                reason=closed.reason,
                state=self._state.value,
            )
        self._disconnect(trigger="close")

    def _disconnect(self, trigger: str) -> None:
        if self._state in (ClientState.DISCONNECTED, ClientState.STOPPED):
            # Error followed by close, or a close after shutdown.
            return

        self._cancel_keepalive()
        self._transport = None
        self._transition(ClientState.DISCONNECTED, trigger=trigger)
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        self._cancel_reconnect()
        delay = self.params.reconnect_delay_seconds
        self._reconnect_handle = asyncio.get_running_loop().call_later(delay, self._reconnect)
        self.stats.reconnects_scheduled += 1
        self.logger.info("Reconnect scheduled", delay_seconds=delay)

    def _reconnect(self) -> None:
        self._reconnect_handle = None
        if self._state is ClientState.DISCONNECTED:
            self.connect()

    def _cancel_keepalive(self) -> None:
        if self._keepalive_task is not None:
            self._keepalive_task.cancel()
            self._keepalive_task = None

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    def _transition(self, to_state: ClientState, trigger: str) -> None:
        from_state = self._state
        if to_state not in ALLOWED_TRANSITIONS[from_state]:
            raise StateTransitionError(
                f"Cannot move from {from_state.value} to {to_state.value}",
                current_state=from_state.value,
                attempted_transition=trigger,
            )
        self._state = to_state
        log_state_transition(
            self.logger,
            client_name=self.params.client_name,
            from_state=from_state.value,
            to_state=to_state.value,
            trigger=trigger,
        )

    def _record_malformed(self, message: str, raw: Any, error: Optional[Exception] = None) -> None:
        self.stats.malformed_messages += 1
        self.logger.warning(
            message,
            raw=raw[:200] if isinstance(raw, (str, bytes)) else repr(raw),
            error=str(error) if error else None,
        )

    async def shutdown(self) -> None:
        """Stop for good: cancel timers and close an open connection gracefully."""
        if self._state is ClientState.STOPPED:
            return

        self._transition(ClientState.STOPPED, trigger="shutdown")
        self._cancel_reconnect()
        self._cancel_keepalive()

        transport, self._transport = self._transport, None
        if transport is not None:
            try:
                await transport.close()
            except Exception as e:
                self.logger.warning("Error while closing connection", error=str(e))

        task, self._connection_task = self._connection_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._stopped.set()

    async def run_forever(self) -> None:
        """Connect and keep reconnecting until shutdown() is called."""
        if self._state is ClientState.DISCONNECTED:
            self.connect()
        await self._stopped.wait()
