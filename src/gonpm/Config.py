"""Manifest loading and install plan resolution.

The manifest is the `package.json` of the npm package being installed. Its
`goBinary` block tells us where the prebuilt binary lives:

    {
        "version": "v0.3.1",
        "goBinary": {
            "name": "demo",
            "path": "bin",
            "url": "https://example.test/demo_{{version}}_{{platform}}_{{arch}}.tar.gz"
        }
    }

`resolve_plan` validates the host and the manifest and turns them into an
`InstallPlan`. It performs no network access and writes nothing.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .Errors import InvalidConfigurationError, ManifestNotFoundError, UnsupportedPlatformError
from .Platforms import WINDOWS, PlatformTables

MANIFEST_NAME = "package.json"
EXE_SUFFIX = ".exe"

REQUIRED_BINARY_FIELDS = ("name", "path", "url")


@dataclass(frozen=True)
class InstallPlan:
    """Everything an install or uninstall run needs, derived from the manifest.

    Attributes:
        binary_name (str): File name of the executable, with `.exe` on Windows.
        staging_path (Path): Directory the archive is unpacked into.
        download_url (str): Fully interpolated artifact URL.
        version (str): Manifest version without a leading "v".
        platform (str): Vendor operating system token, e.g. "linux" or "windows".
    """
    binary_name: str
    staging_path: Path
    download_url: str
    version: str
    platform: str

    @property
    def is_windows(self) -> bool:
        return self.platform == WINDOWS


def load_manifest(path: Path) -> Dict[str, Any]:
    """Read and parse the manifest at `path`.

    Raises:
        ManifestNotFoundError: If `path` does not exist.
        InvalidConfigurationError: If the file is not a JSON object.
    """
    if not path.is_file():
        raise ManifestNotFoundError(
            f"manifest not found: {path}. "
            "Please run this command at the root of the package you want to be installed"
        )
    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidConfigurationError(f"invalid configuration: {path} is not valid JSON ({e})") from e
    if not isinstance(manifest, dict):
        raise InvalidConfigurationError(f"invalid configuration: {path} must contain a JSON object")
    return manifest


def validate_manifest(manifest: Dict[str, Any]) -> None:
    """Check the fields `resolve_plan` relies on, reporting the first one missing."""
    _require_string(manifest.get("version"), "version")

    binary = manifest.get("goBinary")
    if not isinstance(binary, dict):
        raise InvalidConfigurationError(
            "invalid configuration: 'goBinary' property must be defined and be an object"
        )

    for key in REQUIRED_BINARY_FIELDS:
        _require_string(binary.get(key), f"goBinary.{key}")


def _require_string(value: Any, field: str) -> None:
    if value is None or value == "":
        raise InvalidConfigurationError(f"invalid configuration: '{field}' property is required")
    if not isinstance(value, str):
        raise InvalidConfigurationError(
            f"invalid configuration: '{field}' property must be a non-empty string, got {type(value).__name__}"
        )


def normalize_version(version: str) -> str:
    """Strip a single leading "v": `v1.2.3` -> `1.2.3`."""
    return version[1:] if version.startswith("v") else version


def interpolate_url(template: str, values: Dict[str, str]) -> str:
    """Replace every `{{key}}` occurrence for each key in `values`.

    Placeholders without a value are left as they are.
    """
    url = template
    for key, value in values.items():
        url = url.replace("{{" + key + "}}", value)
    return url


def resolve_plan(tables: PlatformTables, host_platform: str, host_arch: str,
                 manifest_path: Path = Path(MANIFEST_NAME)) -> InstallPlan:
    """Build the install plan for this host from the manifest.

    The host is checked before the manifest is touched, so an unsupported
    machine fails without any filesystem access.

    Args:
        tables (PlatformTables): Host identifier -> vendor token lookups.
        host_platform (str): Host operating system, as from `detect_host()`.
        host_arch (str): Host architecture, as from `detect_host()`.
        manifest_path (Path): Location of package.json, relative to the working directory by default.

    Returns:
        InstallPlan: The resolved plan.

    Raises:
        UnsupportedPlatformError: Unknown architecture or operating system.
        ManifestNotFoundError: The manifest file does not exist.
        InvalidConfigurationError: The manifest is malformed or incomplete.
    """
    arch = tables.vendor_arch(host_arch)
    if arch is None:
        raise UnsupportedPlatformError(f"unsupported architecture: {host_arch}")
    platform = tables.vendor_platform(host_platform)
    if platform is None:
        raise UnsupportedPlatformError(f"unsupported platform: {host_platform}")

    manifest = load_manifest(manifest_path)
    validate_manifest(manifest)
    binary = manifest["goBinary"]

    version = normalize_version(manifest["version"])
    binary_name = binary["name"]
    if platform == WINDOWS and not binary_name.endswith(EXE_SUFFIX):
        binary_name += EXE_SUFFIX

    url = interpolate_url(binary["url"], {
        "arch": arch,
        "platform": platform,
        "version": version,
        "bin_name": binary_name,
    })

    return InstallPlan(
        binary_name=binary_name,
        staging_path=Path(binary["path"]),
        download_url=url,
        version=version,
        platform=platform,
    )
