"""
Error classification for the signal hub.

This module provides the exception hierarchy for the three kinds of
failure the push channel deals with: rejected signal requests, channel
invariant and delivery failures, and recoverable client transport errors.
"""

from .request_errors import (
    SignalRequestError,
    InvalidSignalRequest,
)
from .channel_failures import (
    ChannelError,
    DuplicateConnection,
    DeliveryFailure,
    StateTransitionError,
)
from .recovery import (
    RecoverableError,
    TransportError,
    TransportClosed,
)

__all__ = [
    # Request Errors
    "SignalRequestError",
    "InvalidSignalRequest",
    # Channel Failures
    "ChannelError",
    "DuplicateConnection",
    "DeliveryFailure",
    "StateTransitionError",
    # Recovery Categories
    "RecoverableError",
    "TransportError",
    "TransportClosed",
]
