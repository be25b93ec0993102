"""Host platform detection and vendor naming tables.

Release artifacts are named after Go's `$GOOS`/`$GOARCH` values while
Python reports host identifiers such as `x86_64` or `win32`. The
`PlatformTables` object built here holds both mappings; it is created once
by the caller and handed to `gonpm.Config.resolve_plan`.
"""

import platform
import re
import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

# platform.machine() -> $GOARCH
ARCH_MAPPING = {
    "i386": "386",
    "i486": "386",
    "i586": "386",
    "i686": "386",
    "x86": "386",
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm": "arm",
    "armv6l": "arm",
    "armv7l": "arm",
    "aarch64": "arm64",
    "arm64": "arm64",
}

# sys.platform -> $GOOS
PLATFORM_MAPPING = {
    "darwin": "darwin",
    "linux": "linux",
    "win32": "windows",
    "freebsd": "freebsd",
}

WINDOWS = "windows"


@dataclass(frozen=True)
class PlatformTables:
    """Read-only lookup from host identifiers to vendor tokens.

    Attributes:
        arch (Mapping[str, str]): Architecture name -> vendor architecture token.
        platform (Mapping[str, str]): Operating system name -> vendor OS token.
    """
    arch: Mapping[str, str] = field(default_factory=lambda: ARCH_MAPPING)
    platform: Mapping[str, str] = field(default_factory=lambda: PLATFORM_MAPPING)

    def __post_init__(self):
        # frozen copies of the source tables
        object.__setattr__(self, "arch", MappingProxyType(dict(self.arch)))
        object.__setattr__(self, "platform", MappingProxyType(dict(self.platform)))

    def vendor_arch(self, host_arch: str) -> str | None:
        return self.arch.get(host_arch.lower())

    def vendor_platform(self, host_platform: str) -> str | None:
        return self.platform.get(host_platform.lower())


def normalize_platform(name: str) -> str:
    """Drop the release number some platforms carry, e.g. `freebsd13` -> `freebsd`."""
    return re.sub(r"^(freebsd|openbsd|netbsd)\d+$", r"\1", name.lower())


def detect_host() -> Tuple[str, str]:
    """Return the `(platform, arch)` identifiers of the running interpreter."""
    return normalize_platform(sys.platform), platform.machine().lower()
