"""CLI commands using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from treecopy.context import AppContext
    from treecopy.options import CopyOptions

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from treecopy import __version__
from treecopy.console import ConsoleOutput
from treecopy.context import create_context
from treecopy.errors import CopyError
from treecopy.types import CopyOutcome, ErrorMode

app = typer.Typer(
    name="treecopy",
    help="Recursive file and directory copy with symlink control",
    no_args_is_help=True,
)

config_app = typer.Typer(help="Configuration commands")

app.add_typer(config_app, name="config")

console = Console()
output = ConsoleOutput(console)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"treecopy v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Recursive file and directory copy with symlink control."""
    pass


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _error_mode(resilient: bool | None) -> ErrorMode | None:
    """Map the --resilient/--fail-fast pair onto an ErrorMode; None keeps the default."""
    if resilient is None:
        return None
    return ErrorMode.RESILIENT if resilient else ErrorMode.FAIL_FAST


def _run_copy(
    ctx: AppContext, source: Path, destination: Path, options: CopyOptions
) -> CopyOutcome:
    """Run the engine behind a spinner."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Copying {source}...", total=None)
        return ctx.engine.copy_recursive(source, destination, options)


# ============================================================================
# Copy Command
# ============================================================================


@app.command()
def copy(
    source: Annotated[Path, typer.Argument(help="File, directory or symlink to copy")],
    destination: Annotated[Path, typer.Argument(help="Destination path")],
    overwrite: Annotated[
        bool | None,
        typer.Option("--overwrite/--no-overwrite", "-f", help="Replace existing files and links"),
    ] = None,
    follow_symlinks: Annotated[
        bool | None,
        typer.Option(
            "--follow-symlinks/--no-follow-symlinks",
            "-L",
            help="Copy link targets instead of links",
        ),
    ] = None,
    restrict_symlinks: Annotated[
        bool | None,
        typer.Option(
            "--restrict-symlinks/--no-restrict-symlinks",
            help="Skip followed links that leave the source tree",
        ),
    ] = None,
    content_only: Annotated[
        bool | None,
        typer.Option(
            "--content-only/--no-content-only",
            "-c",
            help="Copy directory contents, not the directory",
        ),
    ] = None,
    buffer_size: Annotated[
        int | None, typer.Option("--buffer-size", help="Transfer chunk size in bytes")
    ] = None,
    max_depth: Annotated[
        int | None, typer.Option("--max-depth", help="Maximum directory nesting depth")
    ] = None,
    resilient: Annotated[
        bool | None,
        typer.Option(
            "--resilient/--fail-fast", "-r", help="Record per-entry errors and keep going"
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log each entry")] = False,
    _context=None,
) -> None:
    """Copy a file or directory tree."""
    _configure_logging(verbose)
    ctx = _context or create_context()

    try:
        options = ctx.config.to_options(
            overwrite=overwrite,
            follow_symlinks=follow_symlinks,
            restrict_symlinks=restrict_symlinks,
            content_only=content_only,
            buffer_size=buffer_size,
            max_depth=max_depth,
            error_mode=_error_mode(resilient),
        )
    except (ValueError, ValidationError) as e:
        output.show_error(f"Invalid options: {escape(str(e))}")
        raise typer.Exit(1) from e

    try:
        outcome = _run_copy(ctx, source, destination, options)
    except CopyError as e:
        output.show_error(escape(str(e)))
        raise typer.Exit(e.exit_code) from e

    output.show_outcome(outcome, show_skipped=verbose)
    if not outcome.success:
        output.show_warning(f"Completed with {outcome.error_count} error(s)")
        raise typer.Exit(1)
    output.show_success(f"Copied {source} to {destination}")


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    _context=None,
) -> None:
    """Show default copy options."""
    ctx = _context or create_context()
    try:
        config = ctx.config.load()
    except (ValueError, ValidationError) as e:
        output.show_error(f"Invalid config: {escape(str(e))}")
        raise typer.Exit(1) from e
    output.show_config(config, ctx.config.config_file)


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Option name, e.g. max-depth")],
    value: Annotated[str, typer.Argument(help="Option value")],
    _context=None,
) -> None:
    """Set a default copy option."""
    ctx = _context or create_context()

    try:
        ctx.config.set_value(key, value)
    except KeyError as e:
        output.show_error(f"Unknown configuration key: {key}")
        raise typer.Exit(1) from e
    except (ValueError, ValidationError) as e:
        output.show_error(f"Invalid value for {key}: {escape(value)}")
        raise typer.Exit(1) from e
    output.show_success(f"Set {key} to {value}")


if __name__ == "__main__":
    app()
