"""
Time-bound HMAC ticket generation.

A ticket is "{timestamp}-{signature}" where signature is the standard padded
base64 encoding of HMAC-SHA256(secret, "{ip}:{timestamp}"). Downstream
consumers verify it by recomputing the signature over the same text.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
from typing import Callable

from .models import SignedToken, format_timestamp

Clock = Callable[[], float]


def wall_clock() -> float:
    """Current time in seconds since epoch, at millisecond resolution."""
    return time.time_ns() // 1_000_000 / 1000


def sign(ip: str, timestamp: float, secret: bytes) -> str:
    """
    Compute the base64 HMAC-SHA256 signature for an ip/timestamp pair.

    Examples:
        >>> sign("1.2.3.4", 1000.0, b"k") == sign("1.2.3.4", 1000.0, b"k")
        True
    """
    message = f"{ip}:{format_timestamp(timestamp)}".encode("utf-8")
    digest = hmac.new(secret, message, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def generate_token(
    ip: str,
    secret: bytes,
    clock: Clock = wall_clock,
) -> SignedToken:
    """
    Generate a fresh signed ticket for a client IP.

    Args:
        ip: Client IP the ticket is bound to
        secret: HMAC key
        clock: Returns seconds since epoch; injectable for tests

    Returns:
        SignedToken; str() of it is the embeddable ticket text
    """
    timestamp = float(clock())
    return SignedToken(timestamp=timestamp, signature=sign(ip, timestamp, secret))
