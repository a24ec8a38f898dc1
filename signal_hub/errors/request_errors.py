"""
Signal request error classifications.

These exceptions describe on-demand signal requests that cannot be turned
into a signal. They are the only errors reported back to an external caller.
"""

from typing import Any, Dict, Optional


class SignalRequestError(Exception):
    """Base class for rejected signal requests."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class InvalidSignalRequest(SignalRequestError):
    """A required field is missing, unparseable or out of range."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
