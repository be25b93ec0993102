"""gonpm package initializer.

gonpm installs prebuilt Go binaries for npm packages. The package-level
surface is small:

- __version__: Package version string.
- resolve_plan / InstallPlan: read package.json and work out what to fetch.
- install / uninstall: the two pipelines.
- PlatformTables / detect_host: host identifier to Go naming lookups.
- cli: The click command behind the `gonpm` executable.

Example:
    from gonpm import PlatformTables, detect_host, resolve_plan, install
    from gonpm.InstallDir import NpmPrefixProvider

    plan = resolve_plan(PlatformTables(), *detect_host())
    install(plan, NpmPrefixProvider())
"""

# Public version string
__version__ = "0.1.0"

from .Config import InstallPlan, resolve_plan
from .Errors import GoNpmError
from .Installer import install, uninstall
from .Platforms import PlatformTables, detect_host
from .Protocols import PrefixProvider

from .CLI import cli

__all__ = [
    "__version__",
    "InstallPlan",
    "resolve_plan",
    "install",
    "uninstall",
    "PlatformTables",
    "detect_host",
    "PrefixProvider",
    "GoNpmError",
    "cli",
]
