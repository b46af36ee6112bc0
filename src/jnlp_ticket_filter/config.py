"""
Filter configuration.

All fallbacks (signing secret, client IP) are explicit fields here and are
injected into the pipeline instead of being read from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

# Used when HMAC_SECRET is unset. Keeps the filter always-on; deployments
# relying on the token for origin binding must set a real secret.
DEFAULT_HMAC_SECRET = "default-secret"

# Used when neither peer-IP header is present.
DEFAULT_CLIENT_IP = "127.0.0.1"

DEFAULT_SESSION_COOKIE = "CF_Authorization"
DEFAULT_ORIGIN_TIMEOUT = 10.0

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class FilterConfig:
    """
    Settings for the JNLP ticket filter.

    Attributes:
        hmac_secret: HMAC-SHA256 key used to sign tickets
        default_ip: Client IP used when no peer-IP header is present
        debug: Enable verbose tracing of intermediate values. This logs the
            secret and session credential, so keep it off in production.
        session_cookie: Name of the session-authorization cookie
        peer_ip_header: Trusted single-value header carrying the client IP
        forwarded_for_header: Forwarding-chain header used as IP fallback
        origin_url: Base URL of the upstream origin (standalone proxy only)
        timeout_s: Origin request timeout in seconds (standalone proxy only)
        secret_is_default: True when hmac_secret fell back to the default
    """
    hmac_secret: str = DEFAULT_HMAC_SECRET
    default_ip: str = DEFAULT_CLIENT_IP
    debug: bool = False
    session_cookie: str = DEFAULT_SESSION_COOKIE
    peer_ip_header: str = "CF-Connecting-IP"
    forwarded_for_header: str = "X-Forwarded-For"
    origin_url: str | None = None
    timeout_s: float = DEFAULT_ORIGIN_TIMEOUT
    secret_is_default: bool = False

    @property
    def secret_bytes(self) -> bytes:
        return self.hmac_secret.encode("utf-8")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> FilterConfig:
        """
        Build a config from environment variables.

        Reads HMAC_SECRET, DEBUG, SESSION_COOKIE, ORIGIN_URL and ORIGIN_TIMEOUT.
        Missing values fall back to the documented defaults; nothing here
        raises for an absent secret.
        """
        if environ is None:
            environ = os.environ

        secret = environ.get("HMAC_SECRET") or ""
        timeout = environ.get("ORIGIN_TIMEOUT")

        return cls(
            hmac_secret=secret or DEFAULT_HMAC_SECRET,
            debug=parse_flag(environ.get("DEBUG")),
            session_cookie=environ.get("SESSION_COOKIE") or DEFAULT_SESSION_COOKIE,
            origin_url=environ.get("ORIGIN_URL") or None,
            timeout_s=float(timeout) if timeout else DEFAULT_ORIGIN_TIMEOUT,
            secret_is_default=not secret,
        )


def parse_flag(value: str | None) -> bool:
    """Interpret an environment flag; unset or unrecognized means False."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY
