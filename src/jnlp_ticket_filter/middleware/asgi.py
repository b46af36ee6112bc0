"""
ASGI middleware for JNLP ticket injection (FastAPI/Starlette).
"""

from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..config import FilterConfig
from ..errors import AuthenticationMissing
from ..filter import TicketFilter
from ..headers import filter_hop_by_hop
from ..models import OriginResponse
from ..signing import Clock


def to_starlette_response(result: OriginResponse) -> Response:
    """
    Emit an OriginResponse with its exact status and header list.

    Headers are copied as given; Content-Length is only recomputed by the
    filter when it rewrites a body, so HEAD responses keep the origin length.
    """
    headers = filter_hop_by_hop(result.headers)
    response = Response(content=result.body, status_code=result.status_code)
    response.raw_headers = [
        (key.lower().encode("latin-1"), value.encode("latin-1"))
        for key, value in headers
    ]
    return response


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error})


class JnlpTicketASGIMiddleware(BaseHTTPMiddleware):
    """
    ASGI middleware that injects signed tickets into JNLP responses.

    The wrapped application plays the role of the origin. Requests without
    the session cookie get a 401 before the application is called. Other
    responses are buffered, rewritten if they are JNLP documents carrying an
    http_ticket param, and returned with the application's status and headers.

    Args:
        app: ASGI application
        config: Filter configuration (default: FilterConfig())
        clock: Optional clock override, mainly for tests

    Example (FastAPI):
        >>> from fastapi import FastAPI
        >>> from jnlp_ticket_filter import FilterConfig, JnlpTicketASGIMiddleware
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(
        ...     JnlpTicketASGIMiddleware,
        ...     config=FilterConfig.from_env(),
        ... )
    """

    def __init__(
        self,
        app: Any,
        config: FilterConfig | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(app)
        self.filter = TicketFilter(config=config, clock=clock)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        try:
            identity = self.filter.identify(request.headers.items())
        except AuthenticationMissing as e:
            return error_response(401, str(e))

        response = await call_next(request)

        body = b"".join([chunk async for chunk in response.body_iterator])
        origin = OriginResponse(
            status_code=response.status_code,
            headers=[
                (key.decode("latin-1"), value.decode("latin-1"))
                for key, value in response.raw_headers
            ],
            body=body,
        )

        return to_starlette_response(self.filter.process(identity, origin))
