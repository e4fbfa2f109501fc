"""
Goyya Models
============
Enums and result models for SMS submission.
"""

from enum import Enum

from pydantic import BaseModel


class MessageType(str, Enum):
    """Message types understood by the gateway (`msgtype` parameter)."""
    TEXT = "t"
    OVERLONG = "c"
    UTF8 = "utf8"


class SubmissionPlan(str, Enum):
    """
    Submission plans.

    Only honoured by the gateway when the combined tariff is booked.
    """
    BASIC = "OA"
    ECONOMY = "MA"
    QUALITY = "PM"


class SubmissionResult(BaseModel):
    """Identifiers returned by the gateway for an accepted message."""
    message_id: int
    message_count: int


# Maximum size of a plain-text SMS in bytes
MAX_TEXT_SMS_BYTES = 160

# Sender length limits
MAX_NUMERIC_SENDER_LENGTH = 16
MAX_ALPHANUMERIC_SENDER_LENGTH = 11
