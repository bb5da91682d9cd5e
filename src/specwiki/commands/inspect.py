"""Inspect commands -- examine the model built from a document.

Provides the ``specwiki inspect`` sub-command group with read-only
commands for viewing what the converter would render: operations per
group, the linked definitions, or the whole model as structured output.
All sub-commands read the source the same way ``convert`` does.
"""

from __future__ import annotations

from typing import Optional

import typer

from specwiki.models import ApiModel
from specwiki.output import error, format_response, get_output


inspect_app = typer.Typer(no_args_is_help=True)

_SOURCE_HELP = "Source document: file path, URL, or '-' for stdin."


def _load_model(source: Optional[str]) -> ApiModel:
    """Build the :class:`~specwiki.models.ApiModel` for *source*.

    Falls back to the configured default source when *source* is ``None``.

    Raises:
        typer.Exit: With the error's exit code when the document cannot be
            read or parsed.
    """
    from specwiki.config import resolve_config
    from specwiki.exceptions import SpecwikiError
    from specwiki.parser import build_model, load_document

    try:
        config = resolve_config(cli_input=source)
        return build_model(load_document(config.convert.input))
    except SpecwikiError as exc:
        error(f"Failed to load document: {exc}")
        raise typer.Exit(code=exc.exit_code) from None


@inspect_app.command("operations")
def inspect_operations(
    source: Optional[str] = typer.Option(None, "--in", "-i", help=_SOURCE_HELP),
) -> None:
    """List every operation with its group and schemas.

    Example::

        specwiki inspect operations --in api.yml
        specwiki --json inspect operations
    """
    model = _load_model(source)

    headers = ["Group", "Method", "Summary", "Query", "Request", "Response"]
    rows: list[list[str]] = []
    for group in model.groups.values():
        for operation in group.operations:
            rows.append([
                group.name,
                operation.method,
                operation.summary or "-",
                str(len(operation.query_params)),
                operation.request_schema.name
                or _count(len(operation.request_schema.attributes)),
                operation.response_schema.name or "-",
            ])

    get_output().print_table(headers, rows, title=f"Operations ({len(rows)})")


@inspect_app.command("definitions")
def inspect_definitions(
    source: Optional[str] = typer.Option(None, "--in", "-i", help=_SOURCE_HELP),
) -> None:
    """List the named definitions with their attributes.

    Example::

        specwiki inspect definitions --in api.yml
    """
    model = _load_model(source)

    headers = ["Name", "Attributes", "Mandatory"]
    rows = [
        [
            name,
            ", ".join(attribute.name for attribute in schema.attributes) or "-",
            ", ".join(a.name for a in schema.attributes if a.mandatory) or "-",
        ]
        for name, schema in model.definitions.items()
    ]

    get_output().print_table(headers, rows, title=f"Definitions ({len(rows)})")


@inspect_app.command("model")
def inspect_model(
    source: Optional[str] = typer.Option(None, "--in", "-i", help=_SOURCE_HELP),
) -> None:
    """Dump the complete linked model as structured data.

    Example::

        specwiki --json inspect model --in api.yml
    """
    model = _load_model(source)
    format_response(model.model_dump(mode="json", by_alias=True))


def _count(attributes: int) -> str:
    return f"{attributes} form fields" if attributes else "-"
