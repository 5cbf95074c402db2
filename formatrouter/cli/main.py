"""Main CLI entry point for formatrouter."""

import json
import sys
import traceback
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from formatrouter import __version__
from formatrouter.config import Settings, get_settings
from formatrouter.exceptions import FormatRouterError
from formatrouter.logging_config import setup_logging

OUTPUT_FORMATS = ("table", "json", "csv")

app = typer.Typer(
    name="formatrouter",
    help="formatrouter - Route file conversions to pluggable backends",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=False,
)

console = Console()
console_err = Console(stderr=True)


class CLIState:
    """Global CLI state."""

    output_format: str = "table"
    verbose: bool = False
    quiet: bool = False
    settings: Optional[Settings] = None


state = CLIState()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"formatrouter version: {__version__}")
        console.print(f"Python: {sys.version.split()[0]}")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version information and exit",
        callback=version_callback,
        is_eager=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    output: str = typer.Option(
        "table",
        "--output",
        "-o",
        help="Output format: table, json, csv",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
) -> None:
    """
    formatrouter - file conversion routing

    Picks a conversion backend per file, runs batches with bounded
    concurrency and bundles multi-frame output.
    """
    if output not in OUTPUT_FORMATS:
        console_err.print(f"[red]Error:[/red] Invalid output format: {output}")
        console_err.print(f"Valid formats: {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(1)

    state.output_format = output
    state.verbose = verbose
    state.quiet = quiet
    # An explicit --config replaces whatever settings were loaded before
    state.settings = get_settings(config_path=config, reload=config is not None)

    setup_logging("DEBUG" if verbose else None)

    ctx.obj = state


def handle_error(error: Exception) -> None:
    """Report an error that escaped a command and exit with status 1.

    With ``--output json`` formatrouter errors are written as their
    ``to_dict()`` form so scripts can parse them.
    """
    if isinstance(error, FormatRouterError):
        if state.output_format == "json":
            console_err.print_json(json.dumps(error.to_dict(), default=str))
        else:
            console_err.print(f"\n[red]Error:[/red] {error.message}")
            if state.verbose and error.context:
                console_err.print("\n[yellow]Context:[/yellow]")
                for key, value in error.context.items():
                    console_err.print(f"  {key}: {value}")
    else:
        console_err.print(f"\n[red]Unexpected Error:[/red] {error}")
        if state.verbose:
            console_err.print("\n[yellow]Traceback:[/yellow]")
            console_err.print(traceback.format_exc())

    sys.exit(1)


from formatrouter.cli import convert  # noqa: E402

app.command(name="convert", help="Convert uploaded files")(convert.convert)
app.command(name="targets", help="List targets reachable from an extension")(
    convert.targets
)
app.command(name="backends", help="List backends in priority order")(convert.backends)


def main_cli() -> None:
    """Entry point for CLI application with error handling."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        handle_error(e)


if __name__ == "__main__":
    main_cli()
