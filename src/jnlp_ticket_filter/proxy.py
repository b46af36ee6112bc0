"""
Standalone reverse proxy that injects tickets into JNLP responses.

Every request is checked for the session cookie, relayed to the origin
unchanged, and the origin response is passed through the ticket filter.
"""

from __future__ import annotations

import logging

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from .client import OriginClient
from .config import FilterConfig
from .errors import AuthenticationMissing, OriginUnreachable
from .filter import TicketFilter
from .middleware.asgi import error_response, to_starlette_response
from .signing import Clock

logger = logging.getLogger(__name__)

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: FilterConfig | None = None,
    client: OriginClient | None = None,
    clock: Clock | None = None,
) -> Starlette:
    """
    Build the proxy application.

    Args:
        config: Filter configuration; origin_url is required unless a client
            is given
        client: Origin client override
        clock: Optional clock override, mainly for tests

    Raises:
        ValueError: If neither a client nor config.origin_url is provided
    """
    config = config or FilterConfig()
    if client is None:
        if not config.origin_url:
            raise ValueError("origin_url must be configured for the proxy")
        client = OriginClient(config.origin_url, timeout_s=config.timeout_s)

    ticket_filter = TicketFilter(config=config, clock=clock)

    async def relay(request: Request) -> Response:
        try:
            identity = ticket_filter.identify(request.headers.items())
        except AuthenticationMissing as e:
            return error_response(401, str(e))

        body = await request.body()
        try:
            origin = await client.forward(
                method=request.method,
                path=request.url.path,
                query=request.url.query,
                headers=request.headers.items(),
                body=body,
            )
        except OriginUnreachable as e:
            logger.warning("%s", e)
            return error_response(502, "Origin unreachable")

        return to_starlette_response(ticket_filter.process(identity, origin))

    app = Starlette(routes=[Route("/{path:path}", relay, methods=PROXY_METHODS)])
    app.state.ticket_filter = ticket_filter
    app.state.origin_client = client
    return app
