"""
JNLP ticket filter

Inject time-bound, HMAC-signed tickets and the caller's session credential
into JNLP launch descriptors served behind an identity-aware proxy.
"""

from .config import DEFAULT_CLIENT_IP, DEFAULT_HMAC_SECRET, FilterConfig
from .errors import AuthenticationMissing, OriginUnreachable, TicketFilterError
from .models import ClientIdentity, OriginResponse, SignedToken
from .headers import extract_client_ip, extract_identity, parse_cookies
from .signing import generate_token, sign
from .jnlp import decode_credential, find_ticket_spans, is_jnlp, rewrite_jnlp
from .filter import TicketFilter
from .client import OriginClient
from .middleware.wsgi import JnlpTicketWSGIMiddleware

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CLIENT_IP",
    "DEFAULT_HMAC_SECRET",
    "FilterConfig",
    "AuthenticationMissing",
    "OriginUnreachable",
    "TicketFilterError",
    "ClientIdentity",
    "OriginResponse",
    "SignedToken",
    "extract_client_ip",
    "extract_identity",
    "parse_cookies",
    "generate_token",
    "sign",
    "decode_credential",
    "find_ticket_spans",
    "is_jnlp",
    "rewrite_jnlp",
    "TicketFilter",
    "OriginClient",
    "JnlpTicketWSGIMiddleware",
]

# Starlette-based components - optional, require the "asgi" extra
try:
    from .middleware.asgi import JnlpTicketASGIMiddleware
    from .proxy import create_app
    __all__.extend(["JnlpTicketASGIMiddleware", "create_app"])
except ImportError:
    pass
