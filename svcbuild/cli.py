"""Thin CLI wrapper for svcbuild.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from svcbuild import __version__
from svcbuild.config import get_settings, print_settings_json

app = typer.Typer(
    name="svcbuild",
    help="Workspace service builder - compile native and WASM services",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"svcbuild version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Workspace service builder - compile native and WASM services."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        console.print(print_settings_json(settings))
    else:
        target_dir_display = (
            str(settings.target_dir) if settings.target_dir else "(<workspace>/target)"
        )
        jobs_display = str(settings.jobs) if settings.jobs else "(CPU count)"
        console.print("[bold]Effective Configuration:[/bold]")
        console.print()
        console.print("[bold]Toolchain:[/bold]")
        console.print(f"  Cargo binary:        {settings.cargo_bin}")
        console.print(f"  Manifest name:       {settings.manifest_name}")
        console.print(f"  WASM target:         {settings.wasm_target}")
        console.print(f"  Target directory:    {target_dir_display}")
        console.print(f"  Jobs:                {jobs_display}")
        console.print()
        console.print("[bold]Service detection:[/bold]")
        console.print(f"  Native marker:       {settings.native_marker}")
        console.print(f"  WASM marker:         {settings.wasm_marker}")
        console.print(f"  Metadata key:        {settings.metadata_key}")
        console.print(f"  Service manifest:    {settings.service_manifest_name}")
        console.print()
        console.print("[bold]Operational:[/bold]")
        console.print(f"  Allow failed build:  {settings.allow_failed_build}")
        console.print(f"  Log level:           {settings.log_level}")


@app.command()
def build(
    path: Annotated[
        Path,
        typer.Argument(help="Workspace root directory"),
    ] = Path("."),
    release: Annotated[
        bool,
        typer.Option("--release", "-r", help="Build with the release profile"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Build every service in a workspace."""
    from svcbuild.builds.orchestrator import BuildOrchestrator
    from svcbuild.errors import BuildError, InvalidNameError
    from svcbuild.naming import ServiceNameResolver
    from svcbuild.types import BuildProfile

    settings = get_settings()
    profile = BuildProfile.from_release_flag(release)
    orchestrator = BuildOrchestrator.from_settings(settings)
    resolver = ServiceNameResolver.from_settings(settings)

    try:
        services = orchestrator.build(path, profile)
    except BuildError as e:
        if json_output:
            console.print(
                json.dumps({"error": e.to_dict()}, indent=2),
                soft_wrap=True,
                markup=False,
            )
        else:
            console.print(f"[red]Build failed ({e.code}): {e}[/red]")
            stderr = getattr(e, "stderr", "")
            if stderr:
                console.print(stderr, markup=False)
        raise typer.Exit(code=1) from None

    output = []
    for service in services:
        entry = service.to_dict()
        try:
            entry["service_name"] = resolver.resolve_name(service)
        except InvalidNameError as e:
            entry["service_name"] = None
            entry["name_error"] = str(e)
        output.append(entry)

    if json_output:
        console.print(json.dumps(output, indent=2), soft_wrap=True, markup=False)
        return

    if not output:
        console.print("[yellow]No services found in workspace[/yellow]")
        return

    console.print(f"[bold]Built {len(output)} service(s) ({profile.value}):[/bold]")
    console.print()
    for entry in output:
        display_name = entry["service_name"] or "(invalid name)"
        console.print(f"  [green]{display_name}[/green]")
        console.print(f"    Package: {entry['package_name']}")
        console.print(f"    Kind: {entry['kind']}")
        console.print(f"    Artifact: {entry['executable_path']}")
        console.print(f"    Working directory: {entry['working_directory']}")
        if "name_error" in entry:
            console.print(f"    [red]{entry['name_error']}[/red]")
        console.print()


@app.command()
def clean(
    path: Annotated[
        Path,
        typer.Argument(help="Workspace root directory"),
    ] = Path("."),
    release: Annotated[
        bool,
        typer.Option("--release", "-r", help="Clean the release profile"),
    ] = False,
) -> None:
    """Remove build outputs for one profile."""
    from svcbuild.builds.cleaner import WorkspaceCleaner
    from svcbuild.errors import BuildError
    from svcbuild.types import BuildProfile

    settings = get_settings()
    cleaner = WorkspaceCleaner.from_settings(settings)

    try:
        stderr, stdout = cleaner.clean(path, BuildProfile.from_release_flag(release))
    except BuildError as e:
        console.print(f"[red]Clean failed ({e.code}): {e}[/red]")
        raise typer.Exit(code=1) from None

    for text in (stderr, stdout):
        if text.strip():
            console.print(text.rstrip(), markup=False)


@app.command()
def name(
    package: Annotated[str, typer.Argument(help="Package name to fall back on")],
    path: Annotated[
        Path,
        typer.Option("--dir", "-d", help="Directory holding the override file"),
    ] = Path("."),
) -> None:
    """Resolve the service name for a package."""
    from svcbuild.errors import InvalidNameError
    from svcbuild.naming import ServiceNameResolver

    resolver = ServiceNameResolver.from_settings(get_settings())
    try:
        console.print(resolver.resolve_for(path, package))
    except InvalidNameError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from None


if __name__ == "__main__":
    app()
