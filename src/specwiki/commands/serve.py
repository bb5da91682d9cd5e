"""Serve command -- run the HTTP conversion endpoint.

``specwiki serve`` listens for ``POST /convert`` requests whose body is a
document and answers with the rendered markup. See :mod:`specwiki.server`.
"""

from __future__ import annotations

from typing import Optional

import typer

from specwiki.output import error, info


def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind."),
    port: Optional[int] = typer.Option(None, "--port", help="TCP port to listen on."),
) -> None:
    """Serve document conversion over HTTP.

    Example::

        specwiki serve --port 9999
        curl --data-binary @api.yml http://localhost:9999/convert
    """
    from specwiki.config import resolve_config
    from specwiki.exceptions import SpecwikiError
    from specwiki.server import CONVERT_PATH, serve

    try:
        config = resolve_config(cli_host=host, cli_port=port)
    except SpecwikiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Listening on http://{config.server.host}:{config.server.port}{CONVERT_PATH}")
    try:
        serve(config.server.host, config.server.port)
    except OSError as exc:
        error(f"Cannot listen on {config.server.host}:{config.server.port}: {exc}")
        raise typer.Exit(code=1) from None
