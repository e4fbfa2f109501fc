"""
Goyya Message
=============
SMS message submission through the Goyya Mobile gateway.

Usage:
    from goyya_sms import Message

    message = Message(
        receiver="+4917012345678",
        sender="Shop",
        message="Your parcel has arrived",
        account_id="12345",
        account_password="secret",
    )
    result = message.submit()
    print(result.message_id, result.message_count)
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Type, TypeVar, Union

import httpx
import structlog

from .config import GatewayConfig
from .exceptions import GatewayError, InvalidArgumentError, NetworkError
from .models import MessageType, SubmissionPlan, SubmissionResult
from .protocol import (
    build_query_params,
    build_url,
    parse_submission_body,
    split_response,
)
from .transport import GatewayTransport
from .validation import (
    normalize_receiver,
    normalize_sender,
    parse_planned_date,
    validate_message,
)

logger = structlog.get_logger(__name__)

E = TypeVar("E", bound=Enum)

PlannedDate = Union[datetime, int, float, str]


def _coerce_enum(enum_cls: Type[E], value: Union[E, str], field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidArgumentError(f"Unknown {field_name} {value!r}") from None


class Message:
    """
    A single SMS message and its submission.

    Receiver, sender and message text are validated when assigned, so an
    invalid value never reaches the stored field. `message_id` and
    `message_count` stay None until `submit()` succeeds; each call to
    `submit()` resets them first and performs an independent request.

    Not safe for concurrent `submit()` calls on the same instance.
    """

    def __init__(
        self,
        receiver: Optional[str] = None,
        sender: Optional[str] = None,
        message: Optional[str] = None,
        message_type: Union[MessageType, str] = MessageType.TEXT,
        submission_plan: Union[SubmissionPlan, str] = SubmissionPlan.BASIC,
        account_id: Optional[str] = None,
        account_password: Optional[str] = None,
        delayed_submission: bool = False,
        planned_submission_date: PlannedDate = 0,
        debug_mode: bool = False,
        config: Optional[GatewayConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.gateway = GatewayTransport(config, transport=transport)

        self._receiver: Optional[str] = None
        self._sender: Optional[str] = None
        self._message: Optional[str] = None
        self._message_id: Optional[int] = None
        self._message_count: Optional[int] = None

        # Type first: the message length check depends on it
        self.message_type = message_type
        self.submission_plan = submission_plan
        if receiver is not None:
            self.receiver = receiver
        if sender is not None:
            self.sender = sender
        if message is not None:
            self.message = message
        self.account_id = account_id
        self.account_password = account_password
        self.delayed_submission = delayed_submission
        self.planned_submission_date = planned_submission_date
        self.debug_mode = debug_mode

    def __repr__(self) -> str:
        return (
            f"Message(receiver={self._receiver!r}, sender={self._sender!r}, "
            f"message_type={self._message_type.value!r}, "
            f"message_id={self._message_id!r})"
        )

    # Validated fields

    @property
    def receiver(self) -> Optional[str]:
        """Receiver mobile number with `00` international prefix."""
        return self._receiver

    @receiver.setter
    def receiver(self, value: str) -> None:
        self._receiver = normalize_receiver(value)

    @property
    def sender(self) -> Optional[str]:
        """Sender number (max 16 digits) or name (max 11 alphanumerics)."""
        return self._sender

    @sender.setter
    def sender(self, value: str) -> None:
        self._sender = normalize_sender(value)

    @property
    def message(self) -> Optional[str]:
        """Message text; at most 160 bytes for text SMS."""
        return self._message

    @message.setter
    def message(self, value: str) -> None:
        self._message = validate_message(value, self._message_type)

    @property
    def message_type(self) -> MessageType:
        """Gateway message type; decides the length check for text."""
        return self._message_type

    @message_type.setter
    def message_type(self, value: Union[MessageType, str]) -> None:
        self._message_type = _coerce_enum(MessageType, value, "message type")

    @property
    def submission_plan(self) -> SubmissionPlan:
        """Billing plan, honoured only with the combined tariff."""
        return self._submission_plan

    @submission_plan.setter
    def submission_plan(self, value: Union[SubmissionPlan, str]) -> None:
        self._submission_plan = _coerce_enum(SubmissionPlan, value, "submission plan")

    @property
    def planned_submission_date(self) -> datetime:
        """Local time at which a delayed message is sent."""
        return self._planned_submission_date

    @planned_submission_date.setter
    def planned_submission_date(self, value: PlannedDate) -> None:
        self._planned_submission_date = parse_planned_date(value)

    # Plain fields

    @property
    def delayed_submission(self) -> bool:
        """Whether `planned_submission_date` is sent to the gateway."""
        return self._delayed_submission

    @delayed_submission.setter
    def delayed_submission(self, value: bool) -> None:
        self._delayed_submission = bool(value)

    @property
    def debug_mode(self) -> bool:
        """In debug mode the gateway simulates the submission."""
        return self._debug_mode

    @debug_mode.setter
    def debug_mode(self, value: bool) -> None:
        self._debug_mode = bool(value)

    # Submission results

    @property
    def message_id(self) -> Optional[int]:
        """Gateway id of the last successfully submitted message."""
        return self._message_id

    @property
    def message_count(self) -> Optional[int]:
        """Number of SMS segments the last successful submission used."""
        return self._message_count

    def build_url(self) -> str:
        """Full request URL for the current field values."""
        return build_url(self.gateway.config.base_url, build_query_params(self))

    def submit(self) -> SubmissionResult:
        """
        Submit the message to the gateway.

        Returns:
            SubmissionResult with the gateway message id and segment count

        Raises:
            NetworkError: On transport failure or non-2xx HTTP status
            GatewayError: If the gateway did not answer with "OK"
        """
        self._message_id = None
        self._message_count = None

        raw = self.gateway.send(self.build_url())
        response = split_response(raw)

        if not response.is_success:
            logger.warning(
                "Goyya request rejected",
                status_code=response.status_code,
            )
            raise NetworkError(
                f"Goyya request failed with HTTP status code {response.status_code}",
                status_code=response.status_code,
            )

        try:
            message_id, message_count = parse_submission_body(response.body)
        except GatewayError as e:
            logger.warning("Goyya gateway error", response=e.body)
            raise

        self._message_id = message_id
        self._message_count = message_count

        logger.info(
            "Goyya message submitted",
            message_id=message_id,
            message_count=message_count,
            message_type=self._message_type.value,
            debug_mode=self._debug_mode,
        )
        return SubmissionResult(message_id=message_id, message_count=message_count)
