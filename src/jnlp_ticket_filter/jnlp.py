"""
JNLP detection and http_ticket rewriting.

The rewrite locates every ``<param name="http_ticket" value="...">`` (or the
value-first ordering of the same two attributes) and splits it into a
prefix (through the opening quote of the value), the value itself and the
closing quote. Only the value is replaced; prefix and suffix are copied
byte-for-byte.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple
from urllib.parse import unquote

logger = logging.getLogger(__name__)

JNLP_ROOT_MARKER = "<jnlp"
TICKET_PARAM = "http_ticket"

# <param name="http_ticket" value="VALUE"
_NAME_FIRST = re.compile(
    r'<param\s+name="' + TICKET_PARAM + r'"\s+value="(?P<value>[^"]+)"'
)
# <param value="VALUE" name="http_ticket"
_VALUE_FIRST = re.compile(
    r'<param\s+value="(?P<value>[^"]+)"\s+name="' + TICKET_PARAM + r'"'
)


class TicketSpan(NamedTuple):
    """
    One located http_ticket value.

    ``body[start:end] == prefix + value + suffix``, where prefix ends with
    ``value="`` and suffix starts with the closing quote.
    """
    start: int
    end: int
    prefix: str
    value: str
    suffix: str


def is_jnlp(body: str) -> bool:
    """
    Return True if the body looks like a JNLP descriptor carrying a ticket param.

    Both the root tag marker and the parameter name must be present.

    Examples:
        >>> is_jnlp('<jnlp><param name="http_ticket" value="x"></jnlp>')
        True
        >>> is_jnlp('<html>http_ticket</html>')
        False
    """
    return JNLP_ROOT_MARKER in body and TICKET_PARAM in body


def _split(body: str, match: re.Match[str]) -> TicketSpan:
    start, end = match.span()
    value_start, value_end = match.span("value")
    return TicketSpan(
        start=start,
        end=end,
        prefix=body[start:value_start],
        value=body[value_start:value_end],
        suffix=body[value_end:end],
    )


def find_ticket_spans(body: str) -> list[TicketSpan]:
    """
    Locate all http_ticket param values in document order.

    Returns an empty list if there are none.
    """
    spans = [_split(body, m) for m in _NAME_FIRST.finditer(body)]
    spans.extend(_split(body, m) for m in _VALUE_FIRST.finditer(body))
    spans.sort(key=lambda span: span.start)
    return spans


def decode_credential(raw: str) -> str:
    """
    Percent-decode a session credential for embedding.

    Newlines are removed and surrounding whitespace trimmed. If the decoded
    bytes are not valid UTF-8 the credential is replaced by an empty string.

    Examples:
        >>> decode_credential("a%3Db")
        'a=b'
        >>> decode_credential("%FF")
        ''
    """
    try:
        decoded = unquote(raw, errors="strict")
    except UnicodeDecodeError:
        logger.debug("Session credential is not valid percent-encoded UTF-8")
        return ""
    return decoded.replace("\n", "").strip()


def rewrite_jnlp(body: str, token: str, credential: str) -> str:
    """
    Append the ticket and decoded credential to every http_ticket value.

    Each value becomes ``"{value}++{token}++{decoded credential}"``. A body
    with no matching param is returned unchanged.

    Args:
        body: JNLP document text
        token: Signed ticket text ("{timestamp}-{signature}")
        credential: Raw (percent-encoded) session credential

    Examples:
        >>> rewrite_jnlp('<param name="http_ticket" value="T1">', "1.0-S=", "c")
        '<param name="http_ticket" value="T1++1.0-S=++c">'
    """
    spans = find_ticket_spans(body)
    if not spans:
        return body

    clean_credential = decode_credential(credential)

    parts: list[str] = []
    cursor = 0
    for span in spans:
        parts.append(body[cursor:span.start])
        parts.append(span.prefix)
        parts.append(f"{span.value}++{token}++{clean_credential}")
        parts.append(span.suffix)
        cursor = span.end
    parts.append(body[cursor:])

    return "".join(parts)
