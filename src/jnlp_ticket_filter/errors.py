"""
Exceptions raised by the ticket filter pipeline.
"""


class TicketFilterError(Exception):
    """Base class for hard failures that abort a request."""


class AuthenticationMissing(TicketFilterError):
    """The session-authorization cookie is not present on the request."""

    def __init__(self, cookie_name: str):
        super().__init__(f"{cookie_name} not found in cookies")
        self.cookie_name = cookie_name


class OriginUnreachable(TicketFilterError):
    """Forwarding the request to the origin failed at the transport level."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Origin request to {url} failed: {reason}")
        self.url = url
