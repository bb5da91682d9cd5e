"""Extract grouped operations from a document's ``paths`` section.

This module walks the ``paths`` mapping in document order and builds one
:class:`~specwiki.models.Operation` per path + HTTP verb, appended to the
:class:`~specwiki.models.Group` named by the operation's first tag.

The single public entry point is :func:`extract_groups`. Internally it
delegates to private helpers that each handle one part of an operation:

* ``_extract_operation`` -- tags, summary, description and vendor keys.
* ``_extract_parameter`` -- classifies a parameter by its ``in`` field:
  ``query`` parameters are listed, a ``body`` parameter names the request
  schema, and ``formData`` parameters are collected inline as the request
  schema's attributes.
* ``_extract_responses`` -- names the response schema from the ``200``,
  ``201`` or ``default`` response. When several of them carry a schema
  reference, the one written last in the document wins.

Schema references found here are names only; the
:mod:`~specwiki.parser.linker` fills them in from the definitions registry.
"""

from __future__ import annotations

import logging
import re

from specwiki.models import DEFAULT_GROUP_NAME, Group, HTTPMethod, Operation, Param
from specwiki.parser.definitions import ref_name
from specwiki.parser.tree import MappingNode, Node

logger = logging.getLogger(__name__)

# HTTP methods recognized by Swagger 2.0
_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

_RESPONSE_KEYS = frozenset({"200", "201", "default"})

VENDOR_PREFIX = "x-"
"""Operation keys starting with this prefix become custom tags."""


def extract_groups(root: MappingNode) -> dict[str, Group]:
    """Extract every operation of the document, grouped by first tag.

    Args:
        root: The document's root mapping node.

    Returns:
        A dict mapping group name to :class:`~specwiki.models.Group`, in the
        order groups were first seen. Operations without tags land in
        :data:`~specwiki.models.DEFAULT_GROUP_NAME`. Empty when the
        document has no ``paths`` key.

    Raises:
        ShapeError: If a recognised key holds the wrong kind of node.

    Example::

        root = load_document("petstore.yml")
        for group in extract_groups(root).values():
            print(group.name, [op.method for op in group.operations])
    """
    groups: dict[str, Group] = {}
    for key, value in root.as_mapping():
        if key == "paths":
            # A repeated ``paths`` key replaces the earlier one.
            groups = _extract_paths(value)
    return groups


def _extract_paths(paths: Node) -> dict[str, Group]:
    groups: dict[str, Group] = {}
    for path, path_item in paths.as_mapping():
        logger.debug("Parsing path %s", path)
        for verb, operation in path_item.as_mapping():
            if verb.lower() not in _HTTP_METHODS:
                continue
            _extract_operation(operation, verb, path, groups)
    return groups


def _extract_operation(
    node: Node,
    verb: str,
    path: str,
    groups: dict[str, Group],
) -> None:
    """Build one operation and append it to its group in *groups*."""
    group_name = DEFAULT_GROUP_NAME
    operation = Operation(method=f"{verb.upper()} {path}")

    for key, value in node.as_mapping():
        if key == "tags":
            tags = value.as_scalar_list()
            if tags:
                group_name = tags[0]
        elif key == "summary":
            operation.summary = value.as_scalar()
        elif key == "description":
            operation.description = value.as_scalar()
        elif key == "parameters":
            for parameter in value.as_sequence():
                _extract_parameter(parameter, operation)
        elif key == "responses":
            _extract_responses(value, operation)
        elif key.startswith(VENDOR_PREFIX):
            operation.custom_tags[custom_tag_name(key)] = value.as_scalar()

    get_group(groups, group_name).operations.append(operation)


def get_group(groups: dict[str, Group], name: str) -> Group:
    """Return the group called *name*, creating and registering it if needed."""
    group = groups.get(name)
    if group is None:
        group = Group(name=name)
        groups[name] = group
    return group


def custom_tag_name(key: str) -> str:
    """Turn a vendor extension key into its display name.

    Example::

        >>> custom_tag_name("x-rate-limit-per-minute")
        'Rate Limit Per Minute'
    """
    words = re.split(r"[-_\s]+", key.removeprefix(VENDOR_PREFIX))
    return " ".join(word[:1].upper() + word[1:] for word in words if word)


def _extract_parameter(node: Node, operation: Operation) -> None:
    """Parse one parameter object and attach it to *operation* by location.

    Parameters with an ``in`` value other than ``query``, ``body`` or
    ``formData`` (or none at all) are dropped.
    """
    parameter = Param()
    location = ""

    for key, value in node.as_mapping():
        if key == "name":
            parameter.name = value.as_scalar()
        elif key == "type":
            parameter.type = value.as_scalar()
        elif key == "description":
            parameter.description = value.as_scalar()
        elif key == "schema":
            name = _schema_ref(value)
            if name is not None:
                parameter.schema_.name = name
        elif key == "enum":
            parameter.enum = value.as_scalar_list()
        elif key == "in":
            location = value.as_scalar()

    if location == "query":
        operation.query_params.append(parameter)
    elif location == "body":
        operation.request_schema.name = parameter.schema_.name
    elif location == "formData":
        operation.request_schema.attributes.append(parameter)


def _extract_responses(node: Node, operation: Operation) -> None:
    for status, response in node.as_mapping():
        if status not in _RESPONSE_KEYS:
            continue
        for key, value in response.as_mapping():
            if key != "schema":
                continue
            name = _schema_ref(value)
            if name is not None:
                operation.response_schema.name = name


def _schema_ref(schema: Node) -> str | None:
    """Return the definition named by a schema's ``$ref`` or ``items.$ref``.

    The last reference in document order wins. ``None`` when the schema
    carries no reference (an inline schema).
    """
    name: str | None = None
    for key, value in schema.as_mapping():
        if key == "$ref":
            name = ref_name(value.as_scalar())
        elif key == "items":
            for item_key, item_value in value.as_mapping():
                if item_key == "$ref":
                    name = ref_name(item_value.as_scalar())
    return name
