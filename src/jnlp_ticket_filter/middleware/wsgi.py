"""
WSGI middleware for JNLP ticket injection (Flask).
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable

from ..config import FilterConfig
from ..errors import AuthenticationMissing
from ..filter import TicketFilter
from ..headers import filter_hop_by_hop
from ..models import OriginResponse
from ..signing import Clock


def _extract_headers(environ: dict[str, Any]) -> list[tuple[str, str]]:
    """Extract HTTP headers from WSGI environ."""
    headers: list[tuple[str, str]] = []
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            # HTTP_CF_CONNECTING_IP -> cf-connecting-ip
            headers.append((key[5:].replace("_", "-").lower(), value))
        elif key == "CONTENT_TYPE":
            headers.append(("content-type", value))
        elif key == "CONTENT_LENGTH":
            headers.append(("content-length", value))
    return headers


def _status_code(status: str) -> int:
    return int(status.split(" ", 1)[0])


class JnlpTicketWSGIMiddleware:
    """
    WSGI middleware that injects signed tickets into JNLP responses.

    The wrapped application plays the role of the origin. Requests without
    the session cookie get a 401 before the application is called. Other
    responses are buffered, rewritten if they are JNLP documents carrying an
    http_ticket param, and returned with the application's status line and
    headers (Content-Length recomputed only for rewritten bodies).

    Args:
        app: WSGI application
        config: Filter configuration (default: FilterConfig())
        clock: Optional clock override, mainly for tests

    Example (Flask):
        >>> from flask import Flask
        >>> from jnlp_ticket_filter.middleware.wsgi import JnlpTicketWSGIMiddleware
        >>>
        >>> app = Flask(__name__)
        >>> app.wsgi_app = JnlpTicketWSGIMiddleware(app.wsgi_app)
    """

    def __init__(
        self,
        app: Callable[..., Iterable[bytes]],
        config: FilterConfig | None = None,
        clock: Clock | None = None,
    ):
        self.app = app
        self.filter = TicketFilter(config=config, clock=clock)

    def __call__(
        self,
        environ: dict[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        try:
            identity = self.filter.identify(_extract_headers(environ))
        except AuthenticationMissing as e:
            return self._error_response(start_response, str(e))

        captured: dict[str, Any] = {}
        chunks: list[bytes] = []

        def capture_start_response(
            status: str,
            response_headers: list[tuple[str, str]],
            exc_info: Any = None,
        ) -> Callable[[bytes], None]:
            captured["status"] = status
            captured["headers"] = list(response_headers)
            captured["exc_info"] = exc_info
            # Legacy write() callable
            return chunks.append

        app_iter = self.app(environ, capture_start_response)
        try:
            for chunk in app_iter:
                chunks.append(chunk)
        finally:
            close = getattr(app_iter, "close", None)
            if close is not None:
                close()

        status = captured["status"]
        origin = OriginResponse(
            status_code=_status_code(status),
            headers=captured["headers"],
            body=b"".join(chunks),
        )
        result = self.filter.process(identity, origin)

        headers = filter_hop_by_hop(result.headers)
        start_response(status, headers, captured["exc_info"])
        return [result.body]

    def _error_response(
        self,
        start_response: Callable[..., Any],
        error: str,
    ) -> Iterable[bytes]:
        """Return 401 error response."""
        body = json.dumps({"error": error}).encode("utf-8")
        start_response(
            "401 Unauthorized",
            [
                ("Content-Type", "application/json"),
                ("Content-Length", str(len(body))),
            ],
        )
        return [body]
