"""HTTP download as a file-like stream.

Provides `ResponseStream`, an io.RawIOBase-compatible reader over the body
of a streaming httpx response, and `open_download`, which issues the GET
and checks the status before handing the stream over. The archive engine
reads the body straight off the socket, so the artifact is never held in
memory or written to disk as a whole.
"""

import io
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import httpx

from . import __version__
from .Errors import DownloadError

CHUNK_SIZE = 128 * 1024  # 128 KiB

HEADERS = {
    "User-Agent": f"gonpm/{__version__}",
    "Accept": "*/*",
}

ProgressCallback = Callable[[int], None]


def make_client(transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Create the HTTP client used for one invocation.

    Redirects are followed because release hosts usually answer with a
    redirect to their object storage.

    Args:
        transport (httpx.BaseTransport | None): Optional transport override.
    """
    return httpx.Client(
        headers=HEADERS,
        follow_redirects=True,
        timeout=httpx.Timeout(10.0, read=300.0),
        transport=transport,
    )


class ResponseStream(io.RawIOBase):
    """Read-only, forward-only stream over an httpx response body.

    Attributes:
        response (httpx.Response): An open streaming response.
        progress_callback (callable|None): Called with the size of every
            chunk received from the network.
        pos (int): Number of bytes handed out so far.
    """

    def __init__(self, response: httpx.Response, progress_callback: Optional[ProgressCallback] = None,
                 chunk_size: int = CHUNK_SIZE):
        self.response = response
        self.progress_callback = progress_callback
        self.pos: int = 0
        self._chunks = response.iter_bytes(chunk_size)
        self._pending: bytes = b""

    @property
    def size(self) -> int:
        """Content-Length reported by the server, or 0 if unknown."""
        try:
            return int(self.response.headers.get("Content-Length", 0))
        except ValueError:
            return 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def writable(self) -> bool:
        return False

    def tell(self) -> int:
        return self.pos

    def _next_chunk(self) -> bytes:
        for chunk in self._chunks:
            if not chunk:
                continue
            if self.progress_callback:
                self.progress_callback(len(chunk))
            return chunk
        return b""

    def peek(self, size: int) -> bytes:
        """Return up to `size` upcoming bytes without consuming them.

        Fewer bytes are returned only when the body is shorter than `size`.
        """
        while len(self._pending) < size:
            chunk = self._next_chunk()
            if not chunk:
                break
            self._pending += chunk
        return self._pending[:size]

    def readinto(self, buffer) -> int:
        """Fill `buffer` from the next network chunk.

        Returns:
            int: Number of bytes copied, 0 at end of body.

        Raises:
            httpx.HTTPError: If the connection fails mid-body.
        """
        if not self._pending:
            self._pending = self._next_chunk()
            if not self._pending:
                return 0

        count = min(len(buffer), len(self._pending))
        buffer[:count] = self._pending[:count]
        self._pending = self._pending[count:]
        self.pos += count
        return count


@contextmanager
def open_download(client: httpx.Client, url: str,
                  progress_callback: Optional[ProgressCallback] = None) -> Iterator[ResponseStream]:
    """GET `url` and yield its body as a `ResponseStream`.

    Transport errors, whether raised while connecting or while the caller
    is consuming the body, surface as `DownloadError`.

    Raises:
        DownloadError: On a non-success status or a transport failure.
    """
    try:
        with client.stream("GET", url) as response:
            if not response.is_success:
                raise DownloadError(
                    f"error downloading binary. HTTP status code: {response.status_code}",
                    status_code=response.status_code,
                )
            yield ResponseStream(response, progress_callback)
    except httpx.HTTPError as e:
        raise DownloadError(f"error downloading binary from {url}: {e}") from e
