"""
JNLP ticket middleware for ASGI and WSGI frameworks.

Re-exports middleware classes for convenient imports:
    from jnlp_ticket_filter.middleware import JnlpTicketASGIMiddleware
    from jnlp_ticket_filter.middleware import JnlpTicketWSGIMiddleware
"""

from .wsgi import JnlpTicketWSGIMiddleware

__all__: list[str] = ["JnlpTicketWSGIMiddleware"]

# ASGI middleware (FastAPI, Starlette)
try:
    from .asgi import JnlpTicketASGIMiddleware
    __all__.append("JnlpTicketASGIMiddleware")
except ImportError:
    pass
