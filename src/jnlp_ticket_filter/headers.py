"""
Cookie parsing, client identity extraction and header rewriting.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .config import FilterConfig
from .errors import AuthenticationMissing
from .models import ClientIdentity

logger = logging.getLogger(__name__)

# Connection-scoped headers that must not be relayed between hops
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
})


def normalize_headers(headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> dict[str, str]:
    """
    Lowercase header names for lookup. The first value of a repeated header wins.
    """
    items = headers.items() if isinstance(headers, Mapping) else headers
    normalized: dict[str, str] = {}
    for key, value in items:
        normalized.setdefault(key.lower(), value)
    return normalized


def parse_cookies(cookie_header: str | None) -> dict[str, str]:
    """
    Parse a Cookie header into a name -> value mapping.

    Segments are split on ";" and then on the first "="; names and values are
    trimmed. Segments without "=" are dropped. On duplicate names the first
    occurrence wins.

    Examples:
        >>> parse_cookies("a=1; b = 2;junk; a=3")
        {'a': '1', 'b': '2'}
        >>> parse_cookies("token=x=y")
        {'token': 'x=y'}
    """
    cookies: dict[str, str] = {}
    if not cookie_header:
        return cookies

    for segment in cookie_header.split(";"):
        name, sep, value = segment.partition("=")
        if not sep:
            continue
        cookies.setdefault(name.strip(), value.strip())

    return cookies


def extract_client_ip(
    headers: Mapping[str, str],
    config: FilterConfig,
) -> str:
    """
    Resolve the client IP from request headers.

    Order: the trusted peer-IP header verbatim, then the first entry of the
    forwarding chain, then the configured fallback. Empty values count as
    absent. The fallback is a degraded path, not an error.

    Args:
        headers: Request headers with lowercase names
        config: Filter configuration naming the headers and the fallback IP
    """
    peer_ip = headers.get(config.peer_ip_header.lower())
    if peer_ip:
        return peer_ip

    forwarded = headers.get(config.forwarded_for_header.lower())
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    if config.debug:
        logger.warning("No client IP found in headers, using default %s", config.default_ip)
    return config.default_ip


def extract_identity(
    headers: Mapping[str, str] | Iterable[tuple[str, str]],
    config: FilterConfig,
) -> ClientIdentity:
    """
    Derive the caller's identity from request headers.

    Raises:
        AuthenticationMissing: If the session-authorization cookie is absent
    """
    normalized = normalize_headers(headers)

    ip = extract_client_ip(normalized, config)
    cookies = parse_cookies(normalized.get("cookie"))

    if config.debug:
        logger.debug("Client IP: %s", ip)
        logger.debug("Cookies: %r", cookies)

    credential = cookies.get(config.session_cookie)
    if credential is None:
        raise AuthenticationMissing(config.session_cookie)

    if config.debug:
        logger.debug("%s: %s", config.session_cookie, credential)

    return ClientIdentity(ip=ip, session_credential=credential)


def filter_hop_by_hop(
    headers: Iterable[tuple[str, str]],
    extra: Iterable[str] = (),
) -> list[tuple[str, str]]:
    """Drop hop-by-hop headers (and any names in ``extra``), keeping order."""
    skip = HOP_BY_HOP_HEADERS | {name.lower() for name in extra}
    return [(key, value) for key, value in headers if key.lower() not in skip]


def with_content_length(
    headers: Iterable[tuple[str, str]],
    length: int,
) -> list[tuple[str, str]]:
    """
    Replace any Content-Length header with the given length.

    Other headers keep their order and repeated values.
    """
    result = [(key, value) for key, value in headers if key.lower() != "content-length"]
    result.append(("content-length", str(length)))
    return result
