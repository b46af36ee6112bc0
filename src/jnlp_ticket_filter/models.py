"""
Data models for the JNLP ticket filter.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class ClientIdentity:
    """
    Caller context for one request.

    Attributes:
        ip: Resolved client IP (may be the configured fallback)
        session_credential: Raw value of the session-authorization cookie
    """
    ip: str
    session_credential: str


@dataclass(frozen=True)
class OriginResponse:
    """
    Response received from the origin, or about to be emitted to the client.

    Attributes:
        status_code: HTTP status code
        headers: Ordered (name, value) pairs; repeated names are kept
        body: Raw body bytes
    """
    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    def header(self, name: str) -> str | None:
        """Return the first value of a header, case-insensitively."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None

    @property
    def charset(self) -> str:
        content_type = self.header("content-type") or ""
        for param in content_type.split(";")[1:]:
            key, sep, value = param.partition("=")
            if sep and key.strip().lower() == "charset":
                return value.strip().strip('"') or "utf-8"
        return "utf-8"

    def text(self) -> str | None:
        """
        Decode the body as text.

        Returns None when the body carries a Content-Encoding, or is not valid
        in its declared charset (or the charset is unknown), so compressed and
        binary payloads pass through.
        """
        encoding = (self.header("content-encoding") or "identity").strip().lower()
        if encoding != "identity":
            return None
        try:
            codecs.lookup(self.charset)
            return self.body.decode(self.charset)
        except (LookupError, UnicodeDecodeError):
            return None

    def with_body(self, body: bytes, headers: list[tuple[str, str]]) -> OriginResponse:
        return replace(self, body=body, headers=headers)


@dataclass(frozen=True)
class SignedToken:
    """
    Freshness and integrity proof bound to a client IP.

    Attributes:
        timestamp: Seconds since epoch at generation
        signature: Base64 HMAC-SHA256 over "ip:timestamp"
    """
    timestamp: float
    signature: str

    @property
    def timestamp_text(self) -> str:
        return format_timestamp(self.timestamp)

    def message(self, ip: str) -> str:
        """The exact string that is signed for this token."""
        return f"{ip}:{self.timestamp_text}"

    def __str__(self) -> str:
        return f"{self.timestamp_text}-{self.signature}"


def format_timestamp(timestamp: float) -> str:
    """
    Render a timestamp for signing and embedding.

    Uses the shortest round-trip float representation, so the text in the
    token is byte-for-byte the text that was signed.

    Examples:
        >>> format_timestamp(1000.0)
        '1000.0'
        >>> format_timestamp(1699900000.123)
        '1699900000.123'
    """
    return repr(float(timestamp))
