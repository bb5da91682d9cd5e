"""The load -> build -> render -> write pipeline.

Shared by ``specwiki convert`` and the serving mode. Nothing is written
until the whole document has been parsed, linked and rendered, so a
malformed document never leaves a partial output file behind.
"""

from __future__ import annotations

import logging
from pathlib import Path

from specwiki.config import atomic_write
from specwiki.exceptions import OutputWriteError
from specwiki.output import print_data
from specwiki.parser import build_model, load_document, parse_document
from specwiki.render import to_jira

logger = logging.getLogger(__name__)

STDOUT_DESTINATION = "-"


def convert_text(content: str, hint: str = "") -> str:
    """Render an already-read document as Jira markup.

    Args:
        content: The raw JSON or YAML text.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The rendered markup.

    Raises:
        DocumentError: If the content cannot be parsed or has the wrong shape.
    """
    model = build_model(parse_document(content, hint=hint))
    return to_jira(model.groups)


def convert_file(source: str, destination: str) -> str:
    """Convert the document at *source* and write the markup to *destination*.

    Args:
        source: File path, HTTP(S) URL, or '-' for stdin.
        destination: File path, or '-' to print to stdout. The file is
            replaced atomically.

    Returns:
        The rendered markup.

    Raises:
        DocumentReadError: If *source* cannot be read.
        DocumentError: If the document cannot be parsed or has the wrong shape.
        OutputWriteError: If *destination* cannot be written.
    """
    model = build_model(load_document(source))
    markup = to_jira(model.groups)

    if destination == STDOUT_DESTINATION:
        print_data(markup)
        return markup

    try:
        atomic_write(Path(destination), markup)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write {destination}: {exc}") from exc
    logger.debug("Wrote %d characters to %s", len(markup), destination)
    return markup
