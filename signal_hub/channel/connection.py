"""Listener connection handles."""

from abc import ABC, abstractmethod
from typing import Optional

from websockets.asyncio.server import ServerConnection, broadcast
from websockets.protocol import State


class BaseConnection(ABC):
    """One open duplex channel to a listener."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identifier of the underlying channel."""
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the channel is in the OPEN state and accepts writes."""
        pass

    @abstractmethod
    def send(self, text: str) -> None:
        """
        Write a text frame without waiting for the peer to drain it.

        Raises:
            Exception: Any transport error, isolated by the caller
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class WebSocketConnection(BaseConnection):
    """Connection backed by a websockets server connection."""

    def __init__(self, websocket: ServerConnection):
        self.websocket = websocket

    @property
    def id(self) -> str:
        return str(self.websocket.id)

    @property
    def is_open(self) -> bool:
        return self.websocket.protocol.state is State.OPEN

    @property
    def remote_address(self) -> Optional[str]:
        address = self.websocket.remote_address
        if not address:
            return None
        return f"{address[0]}:{address[1]}"

    def send(self, text: str) -> None:
        # broadcast() writes into the transport buffer synchronously and
        # never waits for drain; errors come back as an ExceptionGroup.
        try:
            broadcast([self.websocket], text, raise_exceptions=True)
        except ExceptionGroup as group:
            raise group.exceptions[0] from group
