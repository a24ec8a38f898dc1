"""
WebSocket push server.

Owns one registry, broadcaster and generator per instance. Accepts listener
connections, greets them, keeps them registered for the lifetime of the
socket and runs the periodic generator on the same event loop.
"""

import asyncio
from http import HTTPStatus
from typing import Any, Optional

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from ..config.defaults import HubConfig, get_default_config
from ..errors import DuplicateConnection
from ..logging.config import get_channel_logger
from ..markets.catalog import MarketCatalog
from ..signals.generator import RandomSource, SignalGenerator
from ..signals.models import Signal
from ..utils.time import Clock, format_timestamp, utc_now
from .broadcaster import Broadcaster
from .connection import WebSocketConnection
from .registry import ConnectionRegistry

logger = get_channel_logger(__name__)


class SignalServer:
    """Real-time signal push server for one process."""

    def __init__(
        self,
        config: Optional[HubConfig] = None,
        rng: Optional[RandomSource] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config or get_default_config()
        self.clock = clock
        self.registry = ConnectionRegistry()
        self.broadcaster = Broadcaster(self.registry)
        self.catalog = MarketCatalog(self.config.catalog)
        self.generator = SignalGenerator(
            self.registry,
            self.broadcaster,
            params=self.config.generator,
            catalog=self.catalog,
            rng=rng,
            clock=clock,
        )
        self.logger = logger
        self._server: Optional[Server] = None
        self._generator_task: Optional[asyncio.Task] = None

    def publish(
        self,
        symbol: Any,
        type: Any,
        price: Any,
        timeframe: Any = None
    ) -> Signal:
        """
        Create a signal from request fields and broadcast it.

        This is the entry point for an external on-demand trigger such as
        an HTTP handler.

        Raises:
            InvalidSignalRequest: If the fields are invalid; nothing is broadcast
        """
        signal = self.generator.from_request(symbol, type, price, timeframe)
        self.broadcaster.broadcast(signal)
        return signal

    def status(self) -> dict[str, Any]:
        """Connected listener count for status reporting."""
        return {
            "clients": self.registry.size(),
            "timestamp": format_timestamp(self.clock()),
        }

    async def handler(self, websocket: ServerConnection) -> None:
        """Serve one listener connection until it closes."""
        connection = WebSocketConnection(websocket)

        try:
            self.registry.register(connection)
        except DuplicateConnection as e:
            self.logger.error("Duplicate connection rejected", connection_id=e.connection_id)
            return

        self.logger.info(
            "Listener connected",
            connection_id=connection.id,
            remote=connection.remote_address,
            clients=self.registry.size(),
        )

        try:
            self.broadcaster.send_to(connection, {
                "type": "connection",
                "status": "connected",
                "message": self.config.server.welcome_message,
                "timestamp": format_timestamp(self.clock()),
            })

            async for message in websocket:
                self._on_message(connection.id, message)

        except ConnectionClosed as e:
            self.logger.info(
                "Listener connection closed with error",
                connection_id=connection.id,
                code=e.rcvd.code if e.rcvd else None,
            )
        finally:
            self.registry.unregister(connection)
            self.logger.info(
                "Listener disconnected",
                connection_id=connection.id,
                clients=self.registry.size(),
            )

    def _on_message(self, connection_id: str, message: Any) -> None:
        # Inbound messages (identification, keep-alive pings) need no reply.
        self.logger.debug(
            "Received listener message",
            connection_id=connection_id,
            size=len(message),
        )

    def process_request(self, connection: ServerConnection, request: Request) -> Optional[Response]:
        """Reject handshakes on any path other than the configured endpoint."""
        path = request.path.split("?", 1)[0]
        if path != self.config.server.path:
            return connection.respond(HTTPStatus.NOT_FOUND, "Not Found\n")
        return None

    async def run_generator(self) -> None:
        """Invoke the generator tick once per configured interval, forever."""
        interval = self.config.generator.interval_seconds
        while True:
            await asyncio.sleep(interval)
            try:
                self.generator.tick()
            except Exception:
                self.logger.exception("Generator tick failed")

    async def start(self) -> Server:
        """Bind the listener socket and start the periodic generator."""
        server_params = self.config.server
        self._server = await serve(
            self.handler,
            server_params.host,
            server_params.port,
            process_request=self.process_request,
        )

        if self.config.generator.enabled:
            self._generator_task = asyncio.create_task(self.run_generator())

        self.logger.info(
            "Signal server listening",
            host=server_params.host,
            port=self.port,
            path=server_params.path,
            generator_enabled=self.config.generator.enabled,
        )
        return self._server

    @property
    def port(self) -> Optional[int]:
        """Bound port, useful when configured with port 0."""
        if self._server is None:
            return None
        for sock in self._server.sockets:
            return sock.getsockname()[1]
        return None

    async def stop(self) -> None:
        """Stop the generator and close all listener connections."""
        if self._generator_task is not None:
            self._generator_task.cancel()
            try:
                await self._generator_task
            except asyncio.CancelledError:
                pass
            self._generator_task = None

        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

        self.logger.info("Signal server stopped")

    async def serve_forever(self, stop: asyncio.Future) -> None:
        """Run until the given future completes, then shut down."""
        await self.start()
        try:
            await stop
        finally:
            await self.stop()
