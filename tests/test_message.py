"""
Unit Tests for Message Submission
=================================
End-to-end submission against a mocked gateway.
"""

from datetime import datetime
from typing import Callable, List

import httpx
import pytest

from goyya_sms import (
    GatewayConfig,
    GatewayError,
    InvalidArgumentError,
    Message,
    MessageType,
    NetworkError,
    SubmissionPlan,
    SubmissionResult,
)


class RecordingGateway:
    """httpx transport double that records requests."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


def reply(status_code: int, text: str) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status_code, text=text)


def make_message(gateway: RecordingGateway, **fields) -> Message:
    defaults = dict(
        receiver="+4917012345678",
        sender="Shop",
        message="Your parcel has arrived",
        account_id="12345",
        account_password="secret",
    )
    defaults.update(fields)
    return Message(transport=gateway.transport, **defaults)


class TestFields:
    """Tests for field assignment."""

    def test_defaults(self):
        """A new message starts with text type, basic plan and no results."""
        message = Message()

        assert message.message_type == MessageType.TEXT
        assert message.submission_plan == SubmissionPlan.BASIC
        assert message.delayed_submission is False
        assert message.debug_mode is False
        assert message.message_id is None
        assert message.message_count is None

    def test_invalid_value_never_stored(self):
        """A rejected value should leave the previous value in place."""
        message = Message(receiver="+491701")

        with pytest.raises(InvalidArgumentError):
            message.receiver = "491702"
        assert message.receiver == "00491701"

    def test_invalid_argument_is_value_error(self):
        """Validation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            Message(sender="Too-Long-Sender!")

    def test_constructor_applies_type_before_message(self):
        """Long text is accepted when the constructor also sets overlong type."""
        message = Message(message="x" * 400, message_type="c")

        assert message.message_type == MessageType.OVERLONG
        assert len(message.message) == 400

    def test_long_text_rejected_for_text_type(self):
        """Setters validate against the current message type."""
        message = Message()
        with pytest.raises(InvalidArgumentError):
            message.message = "x" * 161

    def test_enum_codes_accepted(self):
        """Raw gateway codes are coerced to enums."""
        message = Message(message_type="utf8", submission_plan="PM")

        assert message.message_type is MessageType.UTF8
        assert message.submission_plan is SubmissionPlan.QUALITY

    def test_unknown_enum_code_rejected(self):
        """Unknown codes raise InvalidArgumentError."""
        message = Message()
        with pytest.raises(InvalidArgumentError, match="message type"):
            message.message_type = "sms"
        with pytest.raises(InvalidArgumentError, match="submission plan"):
            message.submission_plan = "XX"

    def test_results_read_only(self):
        """message_id and message_count cannot be assigned."""
        message = Message()
        with pytest.raises(AttributeError):
            message.message_id = 1

    def test_repr_hides_password(self):
        """The password should not appear in the repr."""
        message = Message(account_password="topsecret")
        assert "topsecret" not in repr(message)

    def test_planned_date_stored_as_datetime(self):
        """Epoch seconds and ISO strings are converted on assignment."""
        message = Message(planned_submission_date="2026-12-05T14:30:00")
        assert message.planned_submission_date == datetime(2026, 12, 5, 14, 30)

        message.planned_submission_date = 0
        assert message.planned_submission_date == datetime.fromtimestamp(0)

    @pytest.mark.parametrize("value", ["next tuesday", None])
    def test_invalid_planned_date_rejected(self, value):
        """An unusable date fails on assignment, before any request."""
        gateway = RecordingGateway(reply(200, "OK(1,1)"))
        message = make_message(gateway, delayed_submission=True)

        with pytest.raises(InvalidArgumentError):
            message.planned_submission_date = value
        with pytest.raises(InvalidArgumentError):
            make_message(gateway, delayed_submission=True, planned_submission_date=value)

        assert message.planned_submission_date == datetime.fromtimestamp(0)
        assert gateway.requests == []

    def test_non_string_values_rejected(self):
        """Wrong value types raise InvalidArgumentError, not AttributeError."""
        message = Message(receiver="+491701", message="Hi")

        with pytest.raises(InvalidArgumentError):
            message.receiver = 4917012345678
        with pytest.raises(InvalidArgumentError):
            message.message = None
        assert message.receiver == "00491701"
        assert message.message == "Hi"


class TestSubmit:
    """Tests for submission against a mocked gateway."""

    def test_success(self):
        """An OK body should populate id and count."""
        gateway = RecordingGateway(reply(200, "OK(12345,2)"))
        message = make_message(gateway)

        result = message.submit()

        assert result == SubmissionResult(message_id=12345, message_count=2)
        assert message.message_id == 12345
        assert message.message_count == 2

    def test_request_shape(self):
        """Should send one GET with the gateway headers."""
        gateway = RecordingGateway(reply(200, "OK(1,1)"))
        make_message(gateway, debug_mode=True).submit()

        assert len(gateway.requests) == 1
        request = gateway.requests[0]
        assert request.method == "GET"
        assert request.url.scheme == "https"
        assert request.url.host == "gate1.goyyamobile.com"
        assert request.url.path == "/sms/sendsms.asp"
        assert request.headers["accept"] == "*/*"
        assert request.headers["content-type"] == "*/*"
        assert request.headers["user-agent"] == "PyGoyyaMobile"
        assert request.headers["connection"] == "close"
        assert request.url.params["receiver"] == "004917012345678"
        assert request.url.params["test"] == "1"

    def test_custom_config(self):
        """Base URL and user agent come from the config."""
        gateway = RecordingGateway(reply(200, "OK(1,1)"))
        config = GatewayConfig(
            base_url="https://sms.example.com/send?lang=de",
            user_agent="Shop/2.0",
        )
        message = Message(config=config, transport=gateway.transport, receiver="0049")
        message.submit()

        request = gateway.requests[0]
        assert request.url.host == "sms.example.com"
        assert request.url.params["lang"] == "de"
        assert request.headers["user-agent"] == "Shop/2.0"

    def test_gateway_error(self):
        """A non-OK body raises GatewayError carrying the body."""
        gateway = RecordingGateway(reply(200, "ERROR: bad login"))
        message = make_message(gateway)

        with pytest.raises(GatewayError) as exc_info:
            message.submit()

        assert exc_info.value.body == "ERROR: bad login"
        assert message.message_id is None
        assert message.message_count is None

    def test_timeout(self):
        """A transport timeout raises NetworkError."""
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        message = make_message(RecordingGateway(handler))

        with pytest.raises(NetworkError) as exc_info:
            message.submit()

        assert exc_info.value.status_code is None
        assert message.message_id is None
        assert message.message_count is None

    def test_connection_error(self):
        """Connection failures raise NetworkError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError, match="transport error"):
            make_message(RecordingGateway(handler)).submit()

    def test_http_status_checked_before_body(self):
        """A 404 raises NetworkError even with an OK body."""
        gateway = RecordingGateway(reply(404, "OK(1,1)"))
        message = make_message(gateway)

        with pytest.raises(NetworkError) as exc_info:
            message.submit()

        assert exc_info.value.status_code == 404
        assert message.message_id is None

    def test_server_error(self):
        """5xx responses raise NetworkError."""
        gateway = RecordingGateway(reply(503, "Service Unavailable"))
        with pytest.raises(NetworkError, match="503"):
            make_message(gateway).submit()

    def test_follows_redirects(self):
        """The final response of a redirect chain is evaluated."""
        def handler(request):
            if request.url.path == "/sms/sendsms.asp":
                return httpx.Response(
                    302,
                    headers={"Location": "https://gate2.goyyamobile.com/sms/sendsms2.asp"},
                )
            return httpx.Response(200, text="OK(555,3)")

        gateway = RecordingGateway(handler)
        message = make_message(gateway)
        message.submit()

        assert len(gateway.requests) == 2
        assert gateway.requests[1].url.host == "gate2.goyyamobile.com"
        assert message.message_id == 555
        assert message.message_count == 3

    def test_submit_twice_sends_two_requests(self):
        """Each submit is an independent request."""
        responses = iter(["OK(1,1)", "OK(2,1)"])
        gateway = RecordingGateway(lambda request: httpx.Response(200, text=next(responses)))
        message = make_message(gateway)

        message.submit()
        message.submit()

        assert len(gateway.requests) == 2
        assert message.message_id == 2

    def test_failed_resubmit_clears_results(self):
        """A failure after a success leaves no stale results."""
        responses = iter([(200, "OK(10,1)"), (200, "ERROR: no credit")])

        def handler(request):
            status_code, text = next(responses)
            return httpx.Response(status_code, text=text)

        message = make_message(RecordingGateway(handler))
        message.submit()
        assert message.message_id == 10

        with pytest.raises(GatewayError):
            message.submit()
        assert message.message_id is None
        assert message.message_count is None

    def test_invalid_base_url(self):
        """A malformed gateway URL raises NetworkError."""
        gateway = RecordingGateway(reply(200, "OK(1,1)"))
        config = GatewayConfig(base_url="https://gate1.goyyamobile.com:99999/sms/sendsms.asp")
        message = make_message(gateway, config=config)

        with pytest.raises(NetworkError, match="transport error"):
            message.submit()
        assert gateway.requests == []
        assert message.message_id is None
