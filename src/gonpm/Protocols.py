"""Protocol definitions.

`PrefixProvider` abstracts the one question we ask the host package
manager (where is your global prefix?) so tests can answer it without
spawning npm. `ArchiveEngineProtocol` is the contract archive adapters
satisfy to unpack a downloaded artifact into the staging directory.
"""

from pathlib import Path
from typing import List, Protocol


class PrefixProvider(Protocol):
    """Source of the package manager's configured global installation prefix."""

    def get_prefix(self) -> str:
        """Return the global prefix directory.

        Raises:
            gonpm.Errors.InstallPathError: If the prefix cannot be determined.
        """
        ...


class ArchiveEngineProtocol(Protocol):
    """Minimal archive engine interface.

    Implementations read the archive from a non-seekable stream in a single
    pass, so listing and extracting happen together.
    """

    def extract_all(self, target_dir: Path) -> List[Path]:
        """Extract every member below `target_dir`.

        Args:
            target_dir (Path): Destination directory; must already exist.

        Returns:
            List[Path]: Archive-relative paths of the regular files written.
        """
        ...
