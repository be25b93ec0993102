"""Tests for the streaming download helpers."""
import httpx
import pytest

from gonpm.Errors import DownloadError
from gonpm.FileIO import ResponseStream, make_client, open_download

URL = "https://example.test/artifact.tar.gz"


def client_for(handler):
    return make_client(transport=httpx.MockTransport(handler))


def chunked(*chunks):
    def handler(request):
        return httpx.Response(200, content=iter(chunks))
    return handler


def test_stream_reads_whole_body_and_reports_progress():
    seen = []
    with client_for(chunked(b"abc", b"", b"defg")) as client:
        with open_download(client, URL, progress_callback=seen.append) as stream:
            assert isinstance(stream, ResponseStream)
            assert stream.read() == b"abcdefg"
            assert stream.tell() == 7
    assert sum(seen) == 7


def test_peek_does_not_consume():
    with client_for(chunked(b"ab", b"cd", b"ef")) as client:
        with open_download(client, URL) as stream:
            assert stream.peek(5) == b"abcde"
            assert stream.read(1) == b"a"
            assert stream.read() == b"bcdef"
            assert stream.peek(4) == b""


def test_size_from_content_length():
    def handler(request):
        return httpx.Response(200, content=b"x" * 10)

    with client_for(handler) as client:
        with open_download(client, URL) as stream:
            assert stream.size == 10
            assert not stream.seekable()


def test_non_success_status():
    with client_for(lambda request: httpx.Response(404)) as client:
        with pytest.raises(DownloadError, match="HTTP status code: 404") as excinfo:
            with open_download(client, URL):
                pytest.fail("body must not be handed out")
    assert excinfo.value.status_code == 404


def test_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with client_for(handler) as client:
        with pytest.raises(DownloadError, match="connection refused") as excinfo:
            with open_download(client, URL):
                pass
    assert excinfo.value.status_code is None


def test_redirects_are_followed():
    def handler(request):
        if request.url.path == "/artifact.tar.gz":
            return httpx.Response(302, headers={"Location": "https://cdn.example.test/blob"})
        return httpx.Response(200, content=b"payload")

    with client_for(handler) as client:
        with open_download(client, URL) as stream:
            assert stream.read() == b"payload"


def test_user_agent():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200)

    with client_for(handler) as client:
        with open_download(client, URL):
            pass
    assert requests[0].headers["User-Agent"].startswith("gonpm/")
