"""Install and uninstall pipelines.

`install` downloads the artifact named by an `InstallPlan`, unpacks it into
the staging directory, checks the binary is there and moves it into the
package manager's global binary directory. `uninstall` deletes it again.
Each step raises on failure and nothing is retried or rolled back.
"""

import errno
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import httpx

from .Config import InstallPlan
from .Errors import MissingBinaryError
from .FileIO import ProgressCallback, make_client, open_download
from .InstallDir import get_installation_path
from .Protocols import PrefixProvider
from .TarArchive import TarArchiveEngine

SizeCallback = Callable[[int], None]


@dataclass(frozen=True)
class UninstallResult:
    """Outcome of `uninstall`.

    Attributes:
        path (Path): Location the binary was expected at.
        removed (bool): False when there was nothing to delete.
    """
    path: Path
    removed: bool


def verify_binary(plan: InstallPlan) -> Path:
    """Return the unpacked binary's path, failing if the archive did not contain it."""
    source = plan.staging_path / plan.binary_name
    if not source.is_file():
        raise MissingBinaryError(
            f"archive missing expected binary: {plan.binary_name} (looked in {plan.staging_path})"
        )
    return source


def place_binary(source: Path, target: Path) -> None:
    """Move `source` to `target`, replacing any existing file.

    A plain rename is used when both paths share a filesystem. Otherwise
    the file is copied next to `target` under a hidden name and renamed
    over it, so `target` never exists half written.
    """
    try:
        os.replace(source, target)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        partial = target.with_name(f".{target.name}.partial")
        shutil.copy2(source, partial)
        os.replace(partial, target)
        source.unlink()


def download_and_extract(plan: InstallPlan, client: httpx.Client,
                         progress_callback: Optional[ProgressCallback] = None,
                         size_callback: Optional[SizeCallback] = None) -> None:
    """Stream the artifact through decompression and tar extraction into the staging directory.

    `size_callback` receives the Content-Length once the response is open,
    and is not called when the server does not send one.
    """
    with open_download(client, plan.download_url, progress_callback=progress_callback) as stream:
        if size_callback and stream.size:
            size_callback(stream.size)
        TarArchiveEngine(stream).extract_all(plan.staging_path)


def install(plan: InstallPlan, provider: PrefixProvider, client: Optional[httpx.Client] = None,
            progress_callback: Optional[ProgressCallback] = None,
            size_callback: Optional[SizeCallback] = None) -> Path:
    """
    Run the full install for `plan`.

    Args:
        plan (InstallPlan): Resolved plan for this host.
        provider (PrefixProvider): Supplies the package manager's global prefix.
        client (httpx.Client | None): HTTP client; a default one is created
            (and closed) when omitted.
        progress_callback (callable|None): Called with the byte count of
            every downloaded chunk.
        size_callback (callable|None): Called once with the download size
            when the server reports it.

    Returns:
        Path: Final location of the installed binary.

    Raises:
        DownloadError: If the artifact cannot be fetched.
        ExtractionError: If the archive is malformed.
        MissingBinaryError: If the archive lacks the binary.
        InstallPathError: If the global binary directory is unknown.
        OSError: If the binary cannot be moved.
    """
    plan.staging_path.mkdir(parents=True, exist_ok=True)

    if client is None:
        with make_client() as own_client:
            download_and_extract(plan, own_client, progress_callback, size_callback)
    else:
        download_and_extract(plan, client, progress_callback, size_callback)

    source = verify_binary(plan)
    directory = get_installation_path(provider, plan.is_windows)
    target = directory / plan.binary_name
    place_binary(source, target)
    return target


def uninstall(plan: InstallPlan, provider: PrefixProvider) -> UninstallResult:
    """Delete the installed binary; a binary that is already gone is not an error."""
    directory = get_installation_path(provider, plan.is_windows)
    target = directory / plan.binary_name
    try:
        target.unlink()
    except FileNotFoundError:
        return UninstallResult(path=target, removed=False)
    return UninstallResult(path=target, removed=True)
