"""Build the named schema registry from a document's ``definitions`` section.

Each definition becomes a :class:`~specwiki.models.Schema` whose attributes
are the definition's ``properties``. Properties that point at another
definition (``$ref`` or ``items.$ref``) get a name-only stub schema; the
:mod:`~specwiki.parser.linker` replaces those stubs afterwards, so a
definition may refer to one declared earlier or later in the document.

The ``required`` list is matched against attribute *names*: listing ``id``
marks the ``id`` attribute mandatory wherever it sits in ``properties``.
"""

from __future__ import annotations

import logging

from specwiki.models import Param, Schema
from specwiki.parser.tree import MappingNode, Node

logger = logging.getLogger(__name__)

DEFINITIONS_PREFIX = "#/definitions/"
"""Locator prefix stripped from ``$ref`` values."""


def ref_name(ref: str) -> str:
    """Return the definition name a ``$ref`` value points at."""
    return ref.removeprefix(DEFINITIONS_PREFIX)


def resolve_definitions(root: MappingNode) -> dict[str, Schema]:
    """Build the definition registry for a document.

    Args:
        root: The document's root mapping node.

    Returns:
        A dict mapping definition name to its (not yet linked)
        :class:`~specwiki.models.Schema`, in document order. Empty when the
        document has no ``definitions`` key.

    Raises:
        ShapeError: If a recognised key holds the wrong kind of node.
    """
    registry: dict[str, Schema] = {}
    for key, value in root.as_mapping():
        if key != "definitions":
            continue
        # A repeated ``definitions`` key adds to the registry; repeated names
        # overwrite.
        for name, body in value.as_mapping():
            registry[name] = _parse_definition(name, body)
    logger.debug("Resolved %d definitions", len(registry))
    return registry


def _parse_definition(name: str, body: Node) -> Schema:
    schema = Schema(name=name)
    required: list[str] = []

    for key, value in body.as_mapping():
        if key == "properties":
            schema.attributes = [
                parse_property(prop_name, prop_body)
                for prop_name, prop_body in value.as_mapping()
            ]
        elif key == "required":
            required = value.as_scalar_list()

    mark_required(schema, required)
    return schema


def parse_property(name: str, body: Node) -> Param:
    """Convert one entry of a definition's ``properties`` into a :class:`Param`."""
    attribute = Param(name=name)

    for key, value in body.as_mapping():
        if key == "type":
            attribute.type = value.as_scalar()
        elif key == "description":
            attribute.description = value.as_scalar()
        elif key == "$ref":
            attribute.schema_.name = ref_name(value.as_scalar())
        elif key == "items":
            for item_key, item_value in value.as_mapping():
                if item_key == "$ref":
                    attribute.schema_.name = ref_name(item_value.as_scalar())
                elif item_key == "type":
                    attribute.type = "array of " + item_value.as_scalar()
                elif item_key == "description":
                    attribute.description = item_value.as_scalar()
        elif key == "enum":
            attribute.enum = value.as_scalar_list()

    return attribute


def mark_required(schema: Schema, required: list[str]) -> None:
    """Flag the attributes named in *required* as mandatory.

    Names that match no attribute are ignored. ``has_mandatory_params`` is
    set only when at least one attribute was flagged.
    """
    names = set(required)
    for attribute in schema.attributes:
        if attribute.name in names:
            attribute.mandatory = True
            schema.has_mandatory_params = True
