"""Streaming tar extraction.

`TarArchiveEngine` unpacks a (usually gzip compressed) tar archive from a
forward-only stream such as `gonpm.FileIO.ResponseStream`. Decompression
and unpacking happen in one pass while the body is still downloading.
"""

import lzma
import tarfile
import zlib
from pathlib import Path
from typing import List

from .Errors import ExtractionError
from .Protocols import ArchiveEngineProtocol

TAR_COMPRESSION_TYPES = {
    b"\x1f\x8b": "gz",  # GZIP compressed
    b"\xfd7zXZ\x00": "xz",  # XZ compressed
    b"BZh": "bz2",  # BZIP2 compressed
}

# Uncompressed tar carries its magic inside the first header block
USTAR_MAGIC = b"ustar"
USTAR_OFFSET = 257

SNIFF_SIZE = USTAR_OFFSET + len(USTAR_MAGIC)


def detect_mode(magic_bytes: bytes) -> str:
    """Pick the tarfile stream mode for an archive starting with `magic_bytes`.

    Raises:
        ExtractionError: If the bytes match no supported format.
    """
    for signature, comp in TAR_COMPRESSION_TYPES.items():
        if magic_bytes.startswith(signature):
            return f"r|{comp}"
    if magic_bytes[USTAR_OFFSET:USTAR_OFFSET + len(USTAR_MAGIC)] == USTAR_MAGIC:
        return "r|"
    raise ExtractionError(f"unknown archive format with signature: {magic_bytes[:8].hex().upper()}")


class TarArchiveEngine(ArchiveEngineProtocol):
    """
    Tar archive engine using the stdlib tarfile module in stream mode.

    Attributes:
        stream: Readable binary stream offering `peek(size)`.
        mode (str): tarfile stream mode chosen from the leading bytes.
    """

    def __init__(self, stream) -> None:
        self.stream = stream
        self.mode = detect_mode(stream.peek(SNIFF_SIZE))

    def extract_all(self, target_dir: Path) -> List[Path]:
        """
        Unpack every member below `target_dir`.

        Members go through tarfile's "data" filter: absolute names, `..`
        components and links leaving `target_dir` are rejected, while the
        owner's executable bit survives.

        Raises:
            ExtractionError: If the data is not a readable archive.
        """
        try:
            with tarfile.open(fileobj=self.stream, mode=self.mode) as archive:
                archive.extractall(path=target_dir, filter="data")
                return [Path(member.name) for member in archive.getmembers() if member.isfile()]
        except (tarfile.TarError, zlib.error, lzma.LZMAError, EOFError) as e:
            raise ExtractionError(f"failed to extract archive: {e}") from e
