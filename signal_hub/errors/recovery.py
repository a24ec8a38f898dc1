"""
Recovery strategy classifications for error handling.

Transport errors seen by the listener client are always recoverable:
they move the client back to DISCONNECTED and schedule a reconnect.
"""

from typing import Optional


class RecoverableError(Exception):
    """Base for errors that can be recovered from automatically."""

    def __init__(self, message: str, retry_count: int = 0, **kwargs):
        super().__init__(message)
        self.retry_count = retry_count
        self.recoverable = True


class TransportError(RecoverableError):
    """The client transport failed to open or failed mid-stream."""

    def __init__(self, message: str, endpoint: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.endpoint = endpoint


class TransportClosed(TransportError):
    """The client transport was closed by the peer or the network."""

    def __init__(self, message: str, code: Optional[int] = None,
                 reason: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.code = code
        self.reason = reason
