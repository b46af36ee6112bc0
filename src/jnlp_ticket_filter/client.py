"""
Origin client for forwarding requests to the upstream server.
"""

from __future__ import annotations

from typing import Iterable

import httpx

from .config import DEFAULT_ORIGIN_TIMEOUT
from .errors import OriginUnreachable
from .headers import filter_hop_by_hop
from .models import OriginResponse

# Dropped from the outbound request; httpx sets Host and Content-Length itself,
# and Accept-Encoding is pinned below
_REQUEST_SKIP = ("host", "content-length", "accept-encoding")

# Ask for an unencoded body so JNLP documents can be classified. The body is
# relayed as raw bytes either way, so an origin that encodes regardless keeps
# its Content-Encoding and passes through untouched.
_ACCEPT_ENCODING = ("accept-encoding", "identity")


def _build_url(origin_url: str, path: str, query: str = "") -> str:
    """Join the origin base URL with the inbound path and query string."""
    url = origin_url.rstrip("/") + "/" + path.lstrip("/")
    if query:
        url = f"{url}?{query}"
    return url


def _outbound_headers(headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    return filter_hop_by_hop(headers, _REQUEST_SKIP) + [_ACCEPT_ENCODING]


class OriginClient:
    """
    Client that relays requests to the origin.

    Requests are sent as received apart from hop-by-hop headers, Host and
    Accept-Encoding. Response bodies are read raw, so Content-Encoding and
    Content-Length from the origin stay valid. Redirects are returned to the
    caller, not followed, and nothing is retried.

    Args:
        origin_url: Base URL of the origin, e.g. https://apps.internal.example
        timeout_s: Request timeout in seconds. Default: 10.0

    Example:
        >>> client = OriginClient("https://apps.internal.example")
        >>> response = await client.forward("GET", "/app/launch.jnlp", headers=headers)
        >>> response.status_code
        200
    """

    def __init__(
        self,
        origin_url: str,
        timeout_s: float = DEFAULT_ORIGIN_TIMEOUT,
    ):
        self.origin_url = origin_url
        self.timeout_s = timeout_s

    async def forward(
        self,
        method: str,
        path: str,
        query: str = "",
        headers: Iterable[tuple[str, str]] = (),
        body: bytes | None = None,
    ) -> OriginResponse:
        """
        Forward a request to the origin asynchronously.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path
            query: Raw query string, without the leading "?"
            headers: Request headers as (name, value) pairs
            body: Optional request body

        Returns:
            OriginResponse with status, headers and raw body

        Raises:
            OriginUnreachable: On connection, timeout or protocol errors
        """
        url = _build_url(self.origin_url, path, query)

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                request = client.build_request(
                    method.upper(),
                    url,
                    headers=_outbound_headers(headers),
                    content=body or None,
                )
                response = await client.send(request, stream=True)
                try:
                    content = b"".join([chunk async for chunk in response.aiter_raw()])
                finally:
                    await response.aclose()
        except httpx.HTTPError as e:
            raise OriginUnreachable(url, str(e) or type(e).__name__) from e

        return self._parse_response(response, content)

    def forward_sync(
        self,
        method: str,
        path: str,
        query: str = "",
        headers: Iterable[tuple[str, str]] = (),
        body: bytes | None = None,
    ) -> OriginResponse:
        """
        Forward a request to the origin synchronously.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path
            query: Raw query string, without the leading "?"
            headers: Request headers as (name, value) pairs
            body: Optional request body

        Returns:
            OriginResponse with status, headers and raw body

        Raises:
            OriginUnreachable: On connection, timeout or protocol errors
        """
        url = _build_url(self.origin_url, path, query)

        try:
            with httpx.Client(timeout=self.timeout_s) as client:
                request = client.build_request(
                    method.upper(),
                    url,
                    headers=_outbound_headers(headers),
                    content=body or None,
                )
                response = client.send(request, stream=True)
                try:
                    content = b"".join(response.iter_raw())
                finally:
                    response.close()
        except httpx.HTTPError as e:
            raise OriginUnreachable(url, str(e) or type(e).__name__) from e

        return self._parse_response(response, content)

    def _parse_response(self, response: httpx.Response, content: bytes) -> OriginResponse:
        """Convert an httpx response and its raw body into an OriginResponse."""
        return OriginResponse(
            status_code=response.status_code,
            headers=filter_hop_by_hop(response.headers.multi_items()),
            body=content,
        )
