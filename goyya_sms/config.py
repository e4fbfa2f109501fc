"""
Gateway Configuration
=====================
Connection settings for the Goyya Mobile gateway.
"""

import os
from dataclasses import dataclass

GOYYA_BASE_URL = "https://gate1.goyyamobile.com/sms/sendsms.asp"
DEFAULT_TIMEOUT = 5.0
DEFAULT_USER_AGENT = "PyGoyyaMobile"


@dataclass
class GatewayConfig:
    """Configuration for the gateway connection."""
    base_url: str = GOYYA_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    verify_tls: bool = True

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Build a config, letting GOYYA_* environment variables override defaults."""
        return cls(
            base_url=os.environ.get("GOYYA_BASE_URL", GOYYA_BASE_URL),
            timeout=float(os.environ.get("GOYYA_TIMEOUT", DEFAULT_TIMEOUT)),
            user_agent=os.environ.get("GOYYA_USER_AGENT", DEFAULT_USER_AGENT),
            verify_tls=os.environ.get("GOYYA_VERIFY_TLS", "true").lower()
            not in ("0", "false", "no"),
        )
