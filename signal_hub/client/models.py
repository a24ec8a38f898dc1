"""Client state machine data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ClientState(str, Enum):
    """Connection lifecycle states of the listener client."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    STOPPED = "stopped"                              # Terminal, after shutdown()


ALLOWED_TRANSITIONS: dict[ClientState, frozenset[ClientState]] = {
    ClientState.DISCONNECTED: frozenset({ClientState.CONNECTING, ClientState.STOPPED}),
    ClientState.CONNECTING: frozenset({
        ClientState.CONNECTED, ClientState.DISCONNECTED, ClientState.STOPPED
    }),
    ClientState.CONNECTED: frozenset({ClientState.DISCONNECTED, ClientState.STOPPED}),
    ClientState.STOPPED: frozenset(),
}


@dataclass
class ClientStats:
    """Counters for one client lifetime."""
    connection_attempts: int = 0
    connections_opened: int = 0
    reconnects_scheduled: int = 0
    signals_received: int = 0
    malformed_messages: int = 0
    pings_sent: int = 0
    last_error: Optional[str] = None
