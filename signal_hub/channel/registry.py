"""Registry of currently open listener connections."""

from typing import Iterator

from ..errors import DuplicateConnection
from .connection import BaseConnection


class ConnectionRegistry:
    """
    Set of open listener connections, keyed by channel id.

    Membership changes only through register/unregister. Broadcasts iterate
    snapshot() so that connects and disconnects during a delivery pass do
    not disturb the iteration.
    """

    def __init__(self):
        self._connections: dict[str, BaseConnection] = {}

    def register(self, connection: BaseConnection) -> None:
        """
        Add a connection.

        Raises:
            DuplicateConnection: If the same channel is already registered
        """
        if connection.id in self._connections:
            raise DuplicateConnection(
                "Connection already registered",
                connection_id=connection.id
            )
        self._connections[connection.id] = connection

    def unregister(self, connection: BaseConnection) -> bool:
        """
        Remove a connection. Removing an absent connection is a no-op.

        Returns:
            True if the connection was registered
        """
        return self._connections.pop(connection.id, None) is not None

    def size(self) -> int:
        return len(self._connections)

    def snapshot(self) -> tuple[BaseConnection, ...]:
        """Members at this instant, in registration order."""
        return tuple(self._connections.values())

    def __contains__(self, connection: object) -> bool:
        if not isinstance(connection, BaseConnection):
            return False
        return self._connections.get(connection.id) is connection

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[BaseConnection]:
        return iter(self.snapshot())
