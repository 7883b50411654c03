"""
.NET SDK buildpack — compile hook entrypoint.

Usage:
    python -m dotnet_buildpack.main --help
    python -m dotnet_buildpack.main compile BUILD_DIR CACHE_DIR
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from dotnet_buildpack import __version__
from dotnet_buildpack.core.config.settings import load_settings
from dotnet_buildpack.core.observability.logging_config import setup_logging_from_settings


@click.group()
@click.version_option(version=__version__, prog_name="dotnet-buildpack")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """.NET SDK buildpack — install the SDK and restore packages for an app."""
    ctx.ensure_object(dict)
    settings = load_settings()
    ctx.obj["settings"] = settings

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = None

    setup_logging_from_settings(settings, level_override=level)


@cli.command("compile")
@click.argument(
    "build_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.argument("cache_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print a JSON summary.")
@click.pass_context
def compile_command(
    ctx: click.Context,
    build_dir: Path,
    cache_dir: Path,
    as_json: bool,
) -> None:
    """Install the .NET SDK into BUILD_DIR and restore its projects."""
    from dotnet_buildpack.core.use_cases.compile import compile_app

    cache_dir.mkdir(parents=True, exist_ok=True)
    result = compile_app(
        build_dir.resolve(),
        cache_dir.resolve(),
        out=sys.stdout,
        settings=ctx.obj["settings"],
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))

    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
