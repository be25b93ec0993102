"""Exception types raised by gonpm.

Every fatal condition of an install or uninstall run is a `GoNpmError`
subclass so the CLI can report it and exit with status 1. Filesystem
errors while moving or deleting the binary are left as plain `OSError`.
"""


class GoNpmError(Exception):
    """Base class for all gonpm failures."""


class UnsupportedPlatformError(GoNpmError):
    """The host architecture or operating system has no vendor token."""


class ManifestNotFoundError(GoNpmError):
    """No package.json in the working directory."""


class InvalidConfigurationError(GoNpmError):
    """package.json is unreadable or lacks a required field."""


class DownloadError(GoNpmError):
    """The artifact could not be fetched.

    Attributes:
        status_code (int | None): HTTP status of the failed response, or None
            for transport level failures (DNS, refused connection, ...).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(GoNpmError):
    """The downloaded archive could not be decompressed or unpacked."""


class MissingBinaryError(GoNpmError):
    """The archive was unpacked but the configured binary is not in it."""


class InstallPathError(GoNpmError):
    """The package manager did not report a usable global prefix."""
