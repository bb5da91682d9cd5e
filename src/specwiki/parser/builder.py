"""Assemble the complete operation model for one document.

:func:`build_model` runs the three parser stages in order over a root node:

1. :func:`~specwiki.parser.extractor.extract_groups` -- operations grouped by tag.
2. :func:`~specwiki.parser.definitions.resolve_definitions` -- the named
   schema registry.
3. :mod:`~specwiki.parser.linker` -- resolve references inside the registry,
   then inside the operations.

Every call creates its own registries, so concurrent or repeated builds
never observe each other's state.
"""

from __future__ import annotations

import logging

from specwiki.models import ApiModel
from specwiki.parser.definitions import resolve_definitions
from specwiki.parser.extractor import extract_groups
from specwiki.parser.linker import link_definitions, link_operations
from specwiki.parser.tree import MappingNode

logger = logging.getLogger(__name__)


def build_model(root: MappingNode) -> ApiModel:
    """Build the linked :class:`~specwiki.models.ApiModel` for a document.

    Args:
        root: The document's root node, as returned by
            :func:`~specwiki.parser.loader.load_document`.

    Returns:
        The model with every resolvable schema reference filled in.

    Raises:
        ShapeError: If a recognised key holds the wrong kind of node.

    Example::

        model = build_model(load_document("petstore.yml"))
        print(to_jira(model.groups))
    """
    groups = extract_groups(root)
    definitions = link_definitions(resolve_definitions(root))
    link_operations(groups, definitions)

    logger.debug(
        "Built %d groups with %d operations",
        len(groups),
        sum(len(group.operations) for group in groups.values()),
    )
    return ApiModel(groups=groups, definitions=definitions)
