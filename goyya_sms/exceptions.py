"""
Goyya Exceptions
================
Error hierarchy raised by message validation and submission.
"""

from typing import Optional


class GoyyaError(Exception):
    """Base exception for all Goyya Mobile client errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgumentError(GoyyaError, ValueError):
    """Raised when a field value fails local validation."""
    pass


class NetworkError(GoyyaError):
    """Raised on transport failures or a non-2xx final HTTP status."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class GatewayError(GoyyaError):
    """Raised when the gateway answers but does not accept the message."""
    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(message)
