"""
Field Validation
================
Normalization and validation of receiver, sender, message text and
planned submission date.
"""

import re
from datetime import datetime
from typing import Any

from .exceptions import InvalidArgumentError
from .models import (
    MessageType,
    MAX_TEXT_SMS_BYTES,
    MAX_NUMERIC_SENDER_LENGTH,
    MAX_ALPHANUMERIC_SENDER_LENGTH,
)

INTERNATIONAL_PREFIX = "00"

_SENDER_PATTERN = re.compile(r"[a-zA-Z0-9]+")


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError(
            f"{field_name} must be a string, got {type(value).__name__}"
        )
    return value


def _replace_plus_prefix(number: str) -> str:
    """Replace a leading `+` with the `00` international prefix."""
    if number.startswith("+"):
        return INTERNATIONAL_PREFIX + number[1:]
    return number


def normalize_receiver(receiver: str) -> str:
    """
    Normalize and validate a receiver number.

    Args:
        receiver: Mobile number, e.g. "+4917012345678" or "004917012345678"

    Returns:
        Number with the `00` international prefix

    Raises:
        InvalidArgumentError: If the number has no international prefix
    """
    receiver = _replace_plus_prefix(_require_str(receiver, "Receiver"))
    if not receiver.startswith(INTERNATIONAL_PREFIX):
        raise InvalidArgumentError("Receiver is invalid")
    return receiver


def normalize_sender(sender: str) -> str:
    """
    Normalize and validate a sender number or name.

    Rules:
    - Only letters and digits from [a-zA-Z0-9]
    - Max 16 characters for purely numeric senders
    - Max 11 characters for alphanumeric senders

    Args:
        sender: Raw sender number or name

    Returns:
        Normalized sender

    Raises:
        InvalidArgumentError: If the sender breaks one of the rules
    """
    sender = _replace_plus_prefix(_require_str(sender, "Sender"))
    if not _SENDER_PATTERN.fullmatch(sender):
        raise InvalidArgumentError("Sender contains invalid characters")

    if sender.isdigit():
        if len(sender) > MAX_NUMERIC_SENDER_LENGTH:
            raise InvalidArgumentError(
                f"Sender longer than {MAX_NUMERIC_SENDER_LENGTH} numeric digits"
            )
    elif len(sender) > MAX_ALPHANUMERIC_SENDER_LENGTH:
        raise InvalidArgumentError(
            f"Sender longer than {MAX_ALPHANUMERIC_SENDER_LENGTH} alphanumeric characters"
        )
    return sender


def validate_message(message: str, message_type: MessageType) -> str:
    """Check the message size against the limit of its message type."""
    _require_str(message, "Message")
    if (
        message_type == MessageType.TEXT
        and len(message.encode("utf-8")) > MAX_TEXT_SMS_BYTES
    ):
        raise InvalidArgumentError("Message too long for type text SMS")
    return message


def parse_planned_date(value: Any) -> datetime:
    """
    Convert a planned submission date to a datetime.

    Args:
        value: datetime, epoch seconds (local time), or ISO-8601 string

    Raises:
        InvalidArgumentError: If the value is of another type or cannot
            be converted
    """
    if isinstance(value, datetime):
        return value
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value)
        if isinstance(value, str):
            return datetime.fromisoformat(value)
    except (ValueError, OverflowError, OSError) as e:
        raise InvalidArgumentError(f"Planned submission date is invalid: {value!r}") from e
    raise InvalidArgumentError(
        f"Planned submission date must be a datetime, epoch seconds or ISO-8601 string, "
        f"got {type(value).__name__}"
    )
