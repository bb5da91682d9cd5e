"""The ``specwiki`` command: root Typer app and console-script entry point.

Global flags are read once in :func:`main_callback`, which installs the
shared :class:`~specwiki.output.OutputManager` and points the ``specwiki``
logger at its stderr console. :func:`main` turns escaped
:class:`~specwiki.exceptions.SpecwikiError` into their exit codes and any
other exception into a crash log.
"""

from __future__ import annotations

import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from specwiki import __version__
from specwiki.commands.config import config_app
from specwiki.commands.convert import convert_command
from specwiki.commands.inspect import inspect_app
from specwiki.commands.serve import serve_command
from specwiki.exceptions import SpecwikiError
from specwiki.exit_codes import EXIT_GENERIC_FAILURE
from specwiki.output import OutputFormat, OutputManager, error, set_output

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="specwiki",
    help="Convert Swagger 2.0 API documents to Jira wiki markup.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.command("convert")(convert_command)
app.command("serve")(serve_command)
app.add_typer(inspect_app, name="inspect", help="Inspect the model built from a document.")
app.add_typer(config_app, name="config", help="Show or change saved defaults.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"specwiki {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="Write data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Write data as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Never use colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only report errors on stderr."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log parser progress to stderr."),
) -> None:
    """Apply the global flags before any sub-command runs.

    ``--json`` wins over ``--plain``; with neither, the format follows the
    terminal.
    """
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet)
    set_output(output)
    _route_logging(output.stderr_console, logging.DEBUG if verbose else logging.WARNING)


def _route_logging(console: Console, level: int) -> None:
    """Send the package logger to *console*, replacing an earlier Rich handler."""
    logger = logging.getLogger("specwiki")
    for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=console, show_path=False, rich_tracebacks=True))
    logger.setLevel(level)


def _write_crash_log() -> Path:
    """Save the traceback being handled under the data directory."""
    from specwiki.config import get_data_dir

    path = get_data_dir() / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    path.write_text(traceback.format_exc(), encoding="utf-8")
    return path


def main() -> None:
    """Console-script entry point."""
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except SpecwikiError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Details saved to {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
