"""Replace named schema references with the definitions they point at.

Linking runs in two passes over a document's model:

1. :func:`link_definitions` -- every attribute of every definition whose
   nested schema is a name-only reference receives the referenced
   definition instead, and its type becomes ``"struct"`` (``"array"``
   attributes keep their type).
2. :func:`link_operations` -- each operation's request and response schema
   that names a definition is replaced by a copy of the linked definition.
   Inline form-data attributes of the request are kept, after the
   definition's own attributes.

Resolution goes exactly one level deep: a definition's attributes carry the
referenced definition's attributes, and those in turn keep their own
references as name-only stubs. An operation therefore nests at most
operation -> schema -> attribute schema -> stub, so the model stays
proportional to the document even when many definitions share references,
and circular references need no special handling.

References to names missing from the registry are not errors: the stub is
left as it is (name set, no attributes) and renders as an empty table.
Every call builds fresh copies; no :class:`~specwiki.models.Schema`
instance is shared between two places in the result, and linking an
already linked model changes nothing.
"""

from __future__ import annotations

import logging

from specwiki.models import Group, Param, Schema

logger = logging.getLogger(__name__)

STRUCT_TYPE = "struct"
ARRAY_TYPE = "array"


def link_definitions(registry: dict[str, Schema]) -> dict[str, Schema]:
    """Resolve the attribute references of every definition in *registry*.

    Args:
        registry: Definition name to schema, as returned by
            :func:`~specwiki.parser.definitions.resolve_definitions`.

    Returns:
        A **new** registry, in the same order. The input is not modified.
    """
    return {
        name: Schema(
            name=schema.name,
            attributes=[_link_attribute(a, registry) for a in schema.attributes],
            has_mandatory_params=schema.has_mandatory_params,
        )
        for name, schema in registry.items()
    }


def link_operations(groups: dict[str, Group], registry: dict[str, Schema]) -> None:
    """Replace request/response schema references in place.

    Args:
        groups: The extracted groups; their operations are updated in place.
        registry: The **linked** registry from :func:`link_definitions`.
    """
    for group in groups.values():
        for operation in group.operations:
            operation.request_schema = _lookup(operation.request_schema, registry)
            operation.response_schema = _lookup(operation.response_schema, registry)


def _lookup(schema: Schema, registry: dict[str, Schema]) -> Schema:
    """Return the definition *schema* names, followed by its inline attributes."""
    definition = registry.get(schema.name) if schema.name else None
    if definition is None:
        if schema.name:
            logger.debug("Unresolved schema reference '%s'", schema.name)
        return schema

    linked = definition.model_copy(deep=True)
    inline = schema.attributes
    # Already linked: the definition's attributes lead the list.
    if inline[: len(linked.attributes)] == linked.attributes:
        inline = inline[len(linked.attributes):]
    linked.attributes.extend(attribute.model_copy(deep=True) for attribute in inline)
    return linked


def _link_attribute(attribute: Param, registry: dict[str, Schema]) -> Param:
    """Copy *attribute*, filling its schema from the definition it names."""
    linked = _copy_attribute(attribute, registry)
    target = attribute.schema_.name
    if not target:
        return linked

    if target not in registry:
        logger.debug("Unresolved schema reference '%s' in attribute '%s'", target, attribute.name)
        return linked

    source = registry[target]
    linked.schema_ = Schema(
        name=source.name,
        attributes=[_copy_attribute(nested, registry) for nested in source.attributes],
        has_mandatory_params=source.has_mandatory_params,
    )
    return linked


def _copy_attribute(attribute: Param, registry: dict[str, Schema]) -> Param:
    """Copy *attribute* with its schema reduced to a name-only stub.

    The type becomes ``"struct"`` when the stub names a known definition.
    """
    target = attribute.schema_.name
    copied = Param(
        name=attribute.name,
        type=attribute.type,
        description=attribute.description,
        mandatory=attribute.mandatory,
        enum=list(attribute.enum),
        schema=Schema(name=target),
    )
    if target and target in registry and copied.type != ARRAY_TYPE:
        copied.type = STRUCT_TYPE
    return copied
