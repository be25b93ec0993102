"""Resolution of the package manager's global binary directory."""

import shutil
import subprocess
from pathlib import Path
from typing import List

from .Errors import InstallPathError
from .Protocols import PrefixProvider

INSTALL_PATH_ERROR = "could not determine installation path"


class NpmPrefixProvider:
    """Asks npm for its global prefix with `npm prefix -g`.

    `npm bin -g` was removed in npm 9, while `npm prefix -g` works on every
    release, so the prefix is what we query. npm applies its own overrides
    (NPM_CONFIG_PREFIX, .npmrc) before answering.

    Attributes:
        package_manager (str): Executable name to look up on PATH.
        pm_path (str | None): Resolved executable path (`npm.cmd` on Windows).
    """

    def __init__(self, package_manager: str = "npm"):
        self.package_manager = package_manager
        self.pm_path = shutil.which(package_manager)

    def command(self) -> List[str]:
        return [self.pm_path or self.package_manager, "prefix", "-g"]

    def get_prefix(self) -> str:
        try:
            result = subprocess.run(self.command(), capture_output=True, text=True, check=False, shell=False)
        except OSError as e:
            raise InstallPathError(f"{INSTALL_PATH_ERROR}: {e}") from e

        prefix = result.stdout.strip()
        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise InstallPathError(f"{INSTALL_PATH_ERROR}: {self.package_manager} failed ({detail})")
        if not prefix:
            raise InstallPathError(f"{INSTALL_PATH_ERROR}: {self.package_manager} reported an empty prefix")
        return prefix


def bin_dir_for_prefix(prefix: str, windows: bool) -> Path:
    """npm puts global executables directly in the prefix on Windows, in `prefix/bin` elsewhere."""
    return Path(prefix) if windows else Path(prefix) / "bin"


def get_installation_path(provider: PrefixProvider, windows: bool) -> Path:
    """Return the global binary directory, creating it if needed.

    Args:
        provider (PrefixProvider): Where to get the global prefix from.
        windows (bool): Whether the host is in the Windows family.

    Raises:
        InstallPathError: If the provider cannot report a prefix.
        OSError: If the directory cannot be created.
    """
    prefix = provider.get_prefix()
    if not prefix or not prefix.strip():
        raise InstallPathError(INSTALL_PATH_ERROR)
    directory = bin_dir_for_prefix(prefix.strip(), windows)
    directory.mkdir(parents=True, exist_ok=True)
    return directory
