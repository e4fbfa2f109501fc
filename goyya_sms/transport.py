"""
Gateway Transport
=================
Blocking HTTPS transport for the Goyya Mobile gateway.

Every request runs on its own short-lived httpx client with keep-alive
disabled, so each call performs a fresh TLS handshake. The configured
timeout is a wall-clock limit for the whole exchange, redirects and body
download included.
"""

import time
from typing import Callable, Dict, Optional

import httpx
import structlog

from .config import GatewayConfig
from .exceptions import NetworkError
from .protocol import HEADER_SEPARATOR, LINE_SEPARATOR

logger = structlog.get_logger(__name__)


def render_exchange(response: httpx.Response, body: str) -> str:
    """
    Render a response and its redirect history as raw HTTP text.

    Produces one header block per response in the chain followed by the
    final body, blocks separated by a blank line.
    """
    blocks = []
    for hop in [*response.history, response]:
        status_line = f"{hop.http_version} {hop.status_code} {hop.reason_phrase}"
        header_lines = [f"{name}: {value}" for name, value in hop.headers.items()]
        blocks.append(LINE_SEPARATOR.join([status_line, *header_lines]))
    return HEADER_SEPARATOR.join(blocks) + HEADER_SEPARATOR + body


class GatewayTransport:
    """
    Sends GET requests to the gateway.

    Args:
        config: Gateway connection settings
        transport: Optional httpx transport, e.g. httpx.MockTransport in tests
    """

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config or GatewayConfig()
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Accept": "*/*",
            "Content-Type": "*/*",
            "User-Agent": self.config.user_agent,
            "Connection": "close",
        }

    def _remaining(self, deadline: float) -> float:
        """Seconds left before the deadline; raises once it has passed."""
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.error("Goyya request exceeded time limit", timeout=self.config.timeout)
            raise NetworkError(
                f"Goyya request exceeded the time limit of {self.config.timeout}s"
            )
        return remaining

    def _deadline_hook(self, deadline: float) -> Callable[[httpx.Request], None]:
        """Request hook shrinking each hop's timeouts to the time left."""
        def limit_request(request: httpx.Request) -> None:
            remaining = self._remaining(deadline)
            request.extensions["timeout"] = httpx.Timeout(remaining).as_dict()
        return limit_request

    def _build_client(self, deadline: float) -> httpx.Client:
        return httpx.Client(
            headers=self._get_headers(),
            timeout=self.config.timeout,
            verify=self.config.verify_tls,
            follow_redirects=True,
            limits=httpx.Limits(max_keepalive_connections=0),
            event_hooks={"request": [self._deadline_hook(deadline)]},
            transport=self._transport,
        )

    def _read_body(self, response: httpx.Response, deadline: float) -> str:
        chunks = []
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            self._remaining(deadline)
        return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")

    def send(self, url: str) -> str:
        """
        Execute a GET request and return the raw exchange text.

        Raises:
            NetworkError: On connection, TLS, timeout, redirect or URL
                failures, or when the exchange outlasts the time limit
        """
        deadline = time.monotonic() + self.config.timeout
        try:
            with self._build_client(deadline) as client:
                with client.stream("GET", url) as response:
                    body = self._read_body(response, deadline)
                    return render_exchange(response, body)
        except httpx.TimeoutException as e:
            logger.error("Goyya request timed out", timeout=self.config.timeout)
            raise NetworkError(f"Goyya request timed out: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Goyya request failed", error=str(e))
            raise NetworkError(f"Goyya request with transport error {e}") from e
