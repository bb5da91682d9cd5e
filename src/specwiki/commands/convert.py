"""Convert command -- render a document as Jira wiki markup.

``specwiki convert`` reads the source document (file, URL or stdin),
builds the operation model and writes the markup to the destination file
(or stdout with ``--out -``). Source and destination default to the
resolved configuration (``test.yml`` and ``test.txt`` out of the box).
"""

from __future__ import annotations

from typing import Optional

import typer

from specwiki.output import error, info


def convert_command(
    source: Optional[str] = typer.Option(
        None, "--in", "-i", help="Source document: file path, URL, or '-' for stdin."
    ),
    destination: Optional[str] = typer.Option(
        None, "--out", "-o", help="Destination file, or '-' for stdout."
    ),
) -> None:
    """Convert an API document to Jira wiki markup.

    On a read or parse failure nothing is written; the error is printed
    to stderr and the command exits with the error's exit code.

    Args:
        source: Source override (highest precedence).
        destination: Destination override (highest precedence).

    Example::

        specwiki convert --in api.yml --out api.txt
        curl -s https://example.com/swagger.json | specwiki convert -i - -o -
    """
    from specwiki.config import resolve_config
    from specwiki.converter import convert_file
    from specwiki.exceptions import SpecwikiError

    try:
        config = resolve_config(cli_input=source, cli_output=destination)
        info(f"Converting file: {config.convert.input}")
        convert_file(config.convert.input, config.convert.output)
    except SpecwikiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Completed: {config.convert.output}")
