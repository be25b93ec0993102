"""gonpm CLI entrypoint.

This module provides the `cli` click command, meant to run from an npm
package's `postinstall` and `preuninstall` scripts:

    gonpm install
    gonpm uninstall

Both read `package.json` from the working directory. Install downloads the
prebuilt Go binary it describes and places it in npm's global binary
directory; uninstall removes it. Any failure is printed to stderr and the
process exits with status 1.
"""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, DownloadColumn, TransferSpeedColumn

from .Config import InstallPlan, resolve_plan
from .Errors import GoNpmError
from .InstallDir import NpmPrefixProvider
from .Installer import install, uninstall
from .FileIO import make_client
from .Platforms import PlatformTables, detect_host

console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)


def run_install(plan: InstallPlan) -> None:
    console.print(f"Downloading from URL: {escape(plan.download_url)}")
    with make_client() as client, Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Downloading {escape(plan.binary_name)}...", total=None)

        def progress_callback(bytes_read):
            progress.update(task, advance=bytes_read)

        def size_callback(total):
            progress.update(task, total=total)

        target = install(plan, NpmPrefixProvider(), client=client,
                         progress_callback=progress_callback, size_callback=size_callback)

    console.print(f"Installed {escape(plan.binary_name)} to {escape(str(target.parent))}")


def run_uninstall(plan: InstallPlan) -> None:
    result = uninstall(plan, NpmPrefixProvider())
    directory = escape(str(result.path.parent))
    if result.removed:
        console.print(f"Removed {escape(plan.binary_name)} from {directory}")
    else:
        console.print(f"[yellow]Warning:[/yellow] {escape(plan.binary_name)} not found in {directory}")


ACTIONS = {
    "install": run_install,
    "uninstall": run_uninstall,
}


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("command", type=click.Choice(sorted(ACTIONS)))
def cli(command: str):
    """Install or uninstall the Go binary described by ./package.json.

    COMMAND is `install` or `uninstall`.
    """
    tables = PlatformTables()
    host_platform, host_arch = detect_host()
    try:
        with console.status("Reading package.json..."):
            plan = resolve_plan(tables, host_platform, host_arch, Path("package.json"))
        ACTIONS[command](plan)
    except (GoNpmError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)


def main():
    cli()
