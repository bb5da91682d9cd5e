"""Render the operation model as Jira wiki markup.

The layout lives in the Jinja2 template ``templates/jira.txt.j2``; this
module prepares what the template cannot express cleanly -- the parameter
tables, with nested attributes flattened into dotted rows -- and exposes the
markup helpers as template filters.

Output structure::

    h3. <group>
    h4. <operation summary>
    <description>
    *Method*: {noformat}GET /pets{noformat}
    *<Custom Tag>*: <value>
    *Query Parameters*:
    ||Name||Type||Description||
    |{{limit}}|integer|Page size|

Three tables may follow each operation -- query, request and response --
and each is omitted when it has no rows. Only the request table carries a
``Mandatory`` column, and only when the request schema has mandatory
attributes. The response table never shows it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from specwiki.models import Group, Operation, Param


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``render/templates/``)."""

HEADER_BIG = 3
HEADER_NORMAL = 4

CELL_DELIMITER = "|"
HEADER_CELL_DELIMITER = "||"
ENUM_DELIMITER = " \\| "
CHECK_MARK = "(/)"


@dataclass
class ParamTable:
    """One parameter table of an operation, ready to print."""

    title: str
    header: str
    rows: list[str] = field(default_factory=list)


def to_jira(groups: Mapping[str, Group]) -> str:
    """Render *groups* as Jira wiki markup.

    Groups and their operations are emitted in the order *groups* stores
    them.

    Args:
        groups: Group name to :class:`~specwiki.models.Group`, typically
            :attr:`ApiModel.groups <specwiki.models.ApiModel.groups>`.

    Returns:
        The rendered markup text.
    """
    env = _create_jinja_env()
    template = env.get_template("jira.txt.j2")
    return template.render(
        groups=list(groups.values()),
        big=HEADER_BIG,
        normal=HEADER_NORMAL,
    )


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for the markup template.

    Autoescape is disabled for ``.txt.j2`` templates since the output is
    wiki markup, not HTML. Block trimming and lstrip keep control-flow lines
    out of the output.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("txt.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["bold"] = bold
    env.filters["noformat"] = noformat
    env.filters["tables"] = operation_tables
    return env


def operation_tables(operation: Operation) -> list[ParamTable]:
    """Return the non-empty parameter tables of *operation*, in print order."""
    candidates = [
        ("Query Parameters", operation.query_params, False),
        (
            "Request Parameters",
            operation.request_schema.attributes,
            operation.request_schema.has_mandatory_params,
        ),
        ("Response Attributes", operation.response_schema.attributes, False),
    ]
    return [
        ParamTable(title=title, header=_header_row(mandatory), rows=param_rows(params, mandatory))
        for title, params, mandatory in candidates
        if params
    ]


def _header_row(mandatory: bool) -> str:
    columns = ["Name", "Type"]
    if mandatory:
        columns.append("Mandatory")
    columns.append("Description")
    return HEADER_CELL_DELIMITER + "".join(c + HEADER_CELL_DELIMITER for c in columns)


def param_rows(params: list[Param], mandatory: bool, prefix: str = "") -> list[str]:
    """Flatten *params* into table rows.

    Each parameter's nested schema attributes follow it as extra rows whose
    name is the dotted path from the top-level parameter (``owner.name``).
    """
    rows: list[str] = []
    for param in params:
        cells = [monospaced(prefix + param.name), param_type(param)]
        if mandatory:
            cells.append(check(param.mandatory))
        cells.append(param.description)
        rows.append(CELL_DELIMITER + CELL_DELIMITER.join(cells) + CELL_DELIMITER)
        rows.extend(param_rows(param.schema_.attributes, mandatory, f"{prefix}{param.name}."))
    return rows


def param_type(param: Param) -> str:
    """Type column text: the allowed values when enumerated, else the type."""
    if param.enum:
        return ENUM_DELIMITER.join(monospaced(value) for value in param.enum)
    return param.type


def monospaced(text: str) -> str:
    return f"{{{{{text}}}}}"


def noformat(text: str) -> str:
    return f"{{noformat}}{text}{{noformat}}"


def bold(text: str) -> str:
    return f"*{text}*"


def check(value: bool) -> str:
    return CHECK_MARK if value else " "
