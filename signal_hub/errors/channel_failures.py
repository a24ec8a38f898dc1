"""
Channel failure error classifications.

These exceptions represent invariant violations and per-connection
failures inside the broadcast channel and the client state machine.
They are logged and isolated where they occur.
"""

from typing import Any, Dict, Optional


class ChannelError(Exception):
    """Base class for broadcast channel failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class DuplicateConnection(ChannelError):
    """A connection was registered twice."""

    def __init__(self, message: str, connection_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.connection_id = connection_id


class DeliveryFailure(ChannelError):
    """A write to a single connection failed."""

    def __init__(self, message: str, connection_id: Optional[str] = None,
                 signal_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.connection_id = connection_id
        self.signal_id = signal_id


class StateTransitionError(ChannelError):
    """Transition not allowed from the client's current state."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition
