"""
The per-request ticket pipeline: identify, classify, sign, rewrite, emit.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .config import FilterConfig
from .headers import extract_identity, with_content_length
from .jnlp import is_jnlp, rewrite_jnlp
from .models import ClientIdentity, OriginResponse
from .signing import Clock, generate_token, wall_clock

logger = logging.getLogger(__name__)


class TicketFilter:
    """
    Rewrites JNLP responses to carry a signed ticket and the session credential.

    The filter holds only configuration; every value it derives is local to
    one call, so a single instance can serve concurrent requests.

    Args:
        config: Filter configuration (defaults: FilterConfig())
        clock: Returns seconds since epoch; injectable for tests

    Example:
        >>> f = TicketFilter(FilterConfig(hmac_secret="s3cret"))
        >>> identity = f.identify({"cookie": "CF_Authorization=abc"})
        >>> origin = OriginResponse(
        ...     status_code=200,
        ...     headers=[("Content-Type", "application/x-java-jnlp-file")],
        ...     body=b'<jnlp><param name="http_ticket" value="T1"/></jnlp>',
        ... )
        >>> response = f.process(identity, origin)
        >>> b'value="T1++' in response.body
        True
    """

    def __init__(
        self,
        config: FilterConfig | None = None,
        clock: Clock | None = None,
    ):
        self.config = config or FilterConfig()
        self.clock = clock or wall_clock

        if self.config.secret_is_default:
            logger.warning(
                "HMAC_SECRET is not set; signing tickets with the default secret"
            )

    def identify(
        self,
        headers: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> ClientIdentity:
        """
        Extract the client identity from request headers.

        Raises:
            AuthenticationMissing: If the session cookie is absent
        """
        return extract_identity(headers, self.config)

    def process(
        self,
        identity: ClientIdentity,
        response: OriginResponse,
    ) -> OriginResponse:
        """
        Rewrite an origin response if it is an eligible JNLP document.

        Undecodable and non-JNLP bodies are returned untouched. A rewritten
        response keeps the origin status and headers, with Content-Length
        recomputed for the new body.
        """
        debug = self.config.debug

        body_text = response.text()
        if body_text is None:
            if debug:
                logger.warning("Response body is not decodable text, passing through")
            return response

        if debug:
            logger.debug("response body: %r", body_text)

        if not is_jnlp(body_text):
            if debug:
                logger.debug("not a jnlp file")
            return response

        if debug:
            logger.debug("hmac_secret: %s", self.config.hmac_secret)

        token = str(generate_token(identity.ip, self.config.secret_bytes, self.clock))
        if debug:
            logger.debug(
                "hmacToken with clientIP: %s secret: %s = token: %s",
                identity.ip,
                self.config.hmac_secret,
                token,
            )

        modified = rewrite_jnlp(body_text, token, identity.session_credential)
        if modified == body_text:
            if debug:
                logger.warning("JNLP body has no http_ticket param to rewrite")
            return response

        if debug:
            logger.debug("modified content: %r", modified)

        return emit(response, modified.encode(response.charset, errors="xmlcharrefreplace"))


def emit(response: OriginResponse, body: bytes) -> OriginResponse:
    """Carry the origin status and headers over to a new body."""
    return response.with_body(body, with_content_length(response.headers, len(body)))
