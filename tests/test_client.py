"""Tests for OriginClient."""

import gzip

import pytest
import httpx
import respx

from jnlp_ticket_filter import OriginClient, OriginUnreachable
from jnlp_ticket_filter.config import DEFAULT_ORIGIN_TIMEOUT

ORIGIN = "http://origin.test"


@pytest.fixture
def mock_origin():
    """Create a respx mock for the origin server."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


class TestOriginClient:
    """Tests for OriginClient."""

    def test_default_timeout(self):
        """Default timeout is the configured origin timeout."""
        client = OriginClient(ORIGIN)
        assert client.origin_url == ORIGIN
        assert client.timeout_s == DEFAULT_ORIGIN_TIMEOUT == 10.0

    @pytest.mark.asyncio
    async def test_forward_success(self, mock_origin):
        """Origin response is returned with status, headers and body."""
        mock_origin.get(f"{ORIGIN}/app/launch.jnlp").respond(
            200,
            content=b"<jnlp/>",
            headers={"Content-Type": "application/x-java-jnlp-file", "X-Origin": "apps"},
        )

        client = OriginClient(ORIGIN)
        response = await client.forward("GET", "/app/launch.jnlp")

        assert response.status_code == 200
        assert response.body == b"<jnlp/>"
        assert response.header("content-type") == "application/x-java-jnlp-file"
        assert response.header("x-origin") == "apps"
        assert response.header("content-length") == "7"

    @pytest.mark.asyncio
    async def test_forward_request_unchanged(self, mock_origin):
        """Method, query, headers and body are relayed."""
        route = mock_origin.post(f"{ORIGIN}/submit").respond(204)

        client = OriginClient(ORIGIN + "/")
        await client.forward(
            "post",
            "/submit",
            query="a=1&b=2",
            headers=[
                ("Host", "proxy.example.com"),
                ("Cookie", "CF_Authorization=abc"),
                ("X-Custom", "yes"),
                ("Connection", "keep-alive"),
            ],
            body=b"payload",
        )

        assert route.called
        request = route.calls.last.request
        assert request.method == "POST"
        assert request.url == f"{ORIGIN}/submit?a=1&b=2"
        assert request.headers["cookie"] == "CF_Authorization=abc"
        assert request.headers["x-custom"] == "yes"
        assert request.headers["host"] == "origin.test"
        assert request.content == b"payload"

    @pytest.mark.asyncio
    async def test_error_status_is_a_response(self, mock_origin):
        """Non-2xx statuses are ordinary responses."""
        mock_origin.get(f"{ORIGIN}/missing").respond(404, text="not found")

        client = OriginClient(ORIGIN)
        response = await client.forward("GET", "/missing")

        assert response.status_code == 404
        assert response.body == b"not found"

    @pytest.mark.asyncio
    async def test_redirect_not_followed(self, mock_origin):
        mock_origin.get(f"{ORIGIN}/old").respond(302, headers={"Location": "/new"})

        client = OriginClient(ORIGIN)
        response = await client.forward("GET", "/old")

        assert response.status_code == 302
        assert response.header("location") == "/new"

    @pytest.mark.asyncio
    async def test_accept_encoding_pinned(self, mock_origin):
        """The client's Accept-Encoding is replaced by identity."""
        route = mock_origin.get(f"{ORIGIN}/launch.jnlp").respond(200, content=b"<jnlp/>")

        client = OriginClient(ORIGIN)
        await client.forward(
            "GET",
            "/launch.jnlp",
            headers=[("Accept-Encoding", "gzip, deflate, br, zstd")],
        )

        request = route.calls.last.request
        assert request.headers.get_list("accept-encoding") == ["identity"]

    @pytest.mark.asyncio
    async def test_encoded_body_relayed_raw(self, mock_origin):
        """Encoded bodies keep their bytes, Content-Encoding and Content-Length."""
        compressed = b"\x1b\x13\x00\xf8\x8d\x94nO\x00\x00"
        mock_origin.get(f"{ORIGIN}/index.html").respond(
            200,
            content=compressed,
            headers={"Content-Type": "text/html", "Content-Encoding": "br"},
        )

        client = OriginClient(ORIGIN)
        response = await client.forward("GET", "/index.html")

        assert response.body == compressed
        assert response.header("content-encoding") == "br"
        assert response.header("content-length") == str(len(compressed))

    def test_gzip_body_not_decoded(self, mock_origin):
        """Even encodings httpx can decode are relayed as sent."""
        compressed = gzip.compress(b"<jnlp/>")
        mock_origin.get(f"{ORIGIN}/launch.jnlp").respond(
            200,
            content=compressed,
            headers={"Content-Encoding": "gzip"},
        )

        client = OriginClient(ORIGIN)
        response = client.forward_sync("GET", "/launch.jnlp")

        assert response.body == compressed
        assert response.header("content-encoding") == "gzip"

    @pytest.mark.asyncio
    async def test_connect_error(self, mock_origin):
        """Transport failures raise OriginUnreachable."""
        mock_origin.get(f"{ORIGIN}/app").mock(side_effect=httpx.ConnectError("refused"))

        client = OriginClient(ORIGIN)
        with pytest.raises(OriginUnreachable) as exc_info:
            await client.forward("GET", "/app")

        assert exc_info.value.url == f"{ORIGIN}/app"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_forward_sync(self, mock_origin):
        """Sync forward works the same way."""
        mock_origin.get(f"{ORIGIN}/launch.jnlp").respond(200, content=b"<jnlp/>")

        client = OriginClient(ORIGIN)
        response = client.forward_sync("GET", "/launch.jnlp")

        assert response.status_code == 200
        assert response.body == b"<jnlp/>"

    def test_forward_sync_timeout(self, mock_origin):
        mock_origin.get(f"{ORIGIN}/slow").mock(side_effect=httpx.ReadTimeout("slow"))

        client = OriginClient(ORIGIN)
        with pytest.raises(OriginUnreachable):
            client.forward_sync("GET", "/slow")
