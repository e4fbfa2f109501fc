"""
Gateway Protocol
================
Request URL construction and response parsing for the Goyya Mobile
HTTP GET interface.

Request:  <base_url>?receiver=..&sender=..&msg=..&id=..&pw=..&time=..
          &msgtype=..&getId=1&countMsg=1&test=0|1
Response: one header block per response in the redirect chain, then the
          body, blocks separated by a blank line. A successful body reads
          "OK(<message id>,<message count>)".
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union, TYPE_CHECKING
from urllib.parse import urlencode

from .exceptions import GatewayError
from .validation import parse_planned_date

if TYPE_CHECKING:
    from .message import Message

HEADER_SEPARATOR = "\r\n\r\n"
LINE_SEPARATOR = "\r\n"

# Gateway date format: hour, minute, day, month, year (HHmmddMMYYYY)
PLANNED_DATE_FORMAT = "%H%M%d%m%Y"

_STATUS_DIGITS = re.compile(r"\d+")


@dataclass
class GatewayResponse:
    """Final status, headers and body of a gateway exchange."""
    status_code: int
    headers: List[str] = field(default_factory=list)
    body: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


# =============================================================================
# Request
# =============================================================================

def format_planned_date(value: Union[datetime, int, float, str]) -> str:
    """
    Render a planned submission date in the gateway's HHmmddMMYYYY format.

    Args:
        value: datetime, epoch seconds, or ISO-8601 string

    Returns:
        Formatted date, e.g. "143005122026" for 2026-12-05 14:30

    Raises:
        InvalidArgumentError: If the value cannot be converted to a date
    """
    return parse_planned_date(value).strftime(PLANNED_DATE_FORMAT)


def encode_message_text(text: Optional[str]) -> bytes:
    """Re-encode message text to Latin-1; unmappable characters become '?'."""
    return (text or "").encode("latin-1", errors="replace")


def build_query_params(message: "Message") -> Dict[str, Any]:
    """Collect the GET parameters for a message; unset fields are omitted."""
    if message.delayed_submission:
        planned = format_planned_date(message.planned_submission_date)
    else:
        planned = "0"

    params = {
        "receiver": message.receiver,
        "sender": message.sender,
        "msg": encode_message_text(message.message),
        "id": message.account_id,
        "pw": message.account_password,
        "time": planned,
        "msgtype": message.message_type.value,
        "getId": 1,
        "countMsg": 1,
        "test": 1 if message.debug_mode else 0,
    }
    return {key: value for key, value in params.items() if value is not None}


def build_url(base_url: str, params: Dict[str, Any]) -> str:
    """Append URL-encoded parameters to the base URL."""
    query = urlencode(params)
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{query}"


# =============================================================================
# Response
# =============================================================================

def parse_status_line(line: str) -> int:
    """
    Extract the status code from a status line such as "HTTP/1.1 302 Found".

    Returns 0 when the line carries no numeric status.
    """
    parts = line.strip().split(None, 2)
    if len(parts) < 2:
        return 0
    digits = _STATUS_DIGITS.match(parts[1][:3])
    return int(digits.group()) if digits else 0


def is_decisive_status(status_code: int) -> bool:
    """A final success (2xx) or an error (>= 400) ends the redirect chain."""
    return 200 <= status_code < 300 or status_code >= 400


def split_response(raw: str) -> GatewayResponse:
    """
    Separate header blocks from the body of a raw gateway exchange.

    Header blocks are consumed until a decisive status line has been read or
    no further blank-line-delimited block remains, so interim redirect
    responses are skipped and the final status and body are returned.
    """
    status_code = 0
    headers: List[str] = []
    body = raw

    while HEADER_SEPARATOR in body:
        block, body = body.split(HEADER_SEPARATOR, 1)
        lines = block.split(LINE_SEPARATOR)
        status_code = parse_status_line(lines[0])
        headers = [line for line in lines[1:] if line]
        if is_decisive_status(status_code):
            break

    return GatewayResponse(status_code=status_code, headers=headers, body=body)


def parse_submission_body(body: str) -> Tuple[int, int]:
    """
    Parse a gateway body of the form "OK(<id>,<count>)".

    Returns:
        Tuple of (message_id, message_count)

    Raises:
        GatewayError: If the gateway did not accept the message or the
            body is malformed
    """
    if not body.startswith("OK"):
        raise GatewayError(f"Goyya request failed with response {body}", body=body)

    payload = body.lstrip(" OK").strip().strip(" ()")
    parts = payload.split(",")
    if len(parts) != 2:
        raise GatewayError(f"Goyya response is malformed: {body}", body=body)

    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        raise GatewayError(f"Goyya response is malformed: {body}", body=body) from None
