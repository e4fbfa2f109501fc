"""
Goyya SMS Client
================
Validated SMS submission through the Goyya Mobile HTTP gateway.
"""

__version__ = "1.0.0"

from goyya_sms.config import GatewayConfig, GOYYA_BASE_URL
from goyya_sms.exceptions import (
    GoyyaError,
    InvalidArgumentError,
    NetworkError,
    GatewayError,
)
from goyya_sms.message import Message
from goyya_sms.models import MessageType, SubmissionPlan, SubmissionResult
from goyya_sms.transport import GatewayTransport

__all__ = [
    # Message
    "Message",
    "MessageType",
    "SubmissionPlan",
    "SubmissionResult",
    # Config / transport
    "GatewayConfig",
    "GatewayTransport",
    "GOYYA_BASE_URL",
    # Errors
    "GoyyaError",
    "InvalidArgumentError",
    "NetworkError",
    "GatewayError",
]
