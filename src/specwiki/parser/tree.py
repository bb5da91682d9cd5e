"""Order-preserving node tree for parsed documents.

The parser never works on plain ``dict``/``list`` values: a YAML mapping can
repeat a key, and the builder needs to see every occurrence in the order it
was written. Documents are therefore converted into three node kinds:

* :class:`ScalarNode` -- text (numbers and booleans are kept as written).
* :class:`SequenceNode` -- ordered elements.
* :class:`MappingNode` -- ordered ``(key, node)`` pairs, duplicates kept.

Every node records its dotted location (``paths./pets.get.tags``) and offers
typed accessors (:meth:`~Node.as_mapping`, :meth:`~Node.as_sequence`,
:meth:`~Node.as_scalar`) that raise :class:`~specwiki.exceptions.ShapeError`
naming that location when the node has the wrong kind. A null scalar
(``key:`` with nothing after it) reads as an empty mapping or sequence.

Two front-ends build the tree: :func:`from_yaml` composes the YAML
representation graph with PyYAML, and :func:`from_json` uses an
``object_pairs_hook`` so JSON objects keep duplicates too.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

import yaml

from specwiki.exceptions import DocumentError, ShapeError

_YAML_NULL_TAG = "tag:yaml.org,2002:null"


class _NodeBase:
    """Typed accessors shared by all node kinds."""

    kind: str = "node"
    path: str

    def as_mapping(self) -> list[tuple[str, Node]]:
        raise self._shape_error("mapping")

    def as_sequence(self) -> list[Node]:
        raise self._shape_error("list")

    def as_scalar(self) -> str:
        raise self._shape_error("scalar")

    def as_scalar_list(self) -> list[str]:
        """Return the elements of a sequence of scalars as strings."""
        return [item.as_scalar() for item in self.as_sequence()]

    @property
    def location(self) -> str:
        return self.path or "<root>"

    def _shape_error(self, expected: str) -> ShapeError:
        return ShapeError(f"Expected a {expected} at '{self.location}', got a {self.kind}")


@dataclass(frozen=True)
class ScalarNode(_NodeBase):
    """A leaf value kept as text."""

    value: str
    path: str = ""
    is_null: bool = False

    kind = "scalar"

    def as_scalar(self) -> str:
        return self.value

    def as_mapping(self) -> list[tuple[str, Node]]:
        if self.is_null:
            return []
        raise self._shape_error("mapping")

    def as_sequence(self) -> list[Node]:
        if self.is_null:
            return []
        raise self._shape_error("list")


@dataclass(frozen=True)
class SequenceNode(_NodeBase):
    """An ordered list of nodes."""

    items: tuple[Node, ...] = ()
    path: str = ""

    kind = "list"

    def as_sequence(self) -> list[Node]:
        return list(self.items)


@dataclass(frozen=True)
class MappingNode(_NodeBase):
    """Ordered key/value pairs, duplicate keys preserved in document order."""

    pairs: tuple[tuple[str, Node], ...] = ()
    path: str = ""

    kind = "mapping"

    def as_mapping(self) -> list[tuple[str, Node]]:
        return list(self.pairs)

    def get(self, key: str) -> Node | None:
        """Return the value for *key*; the last occurrence wins."""
        found: Node | None = None
        for pair_key, value in self.pairs:
            if pair_key == key:
                found = value
        return found

    def keys(self) -> list[str]:
        return [key for key, _ in self.pairs]


Node = Union[ScalarNode, SequenceNode, MappingNode]


def _child_path(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


# ------------------------------------------------------------------ #
# YAML
# ------------------------------------------------------------------ #

MAX_NODES = 1_000_000
"""Largest number of nodes a single document may expand to."""


def from_yaml(content: str) -> Node:
    """Compose *content* as YAML and convert it to a node tree.

    Uses :func:`yaml.compose` rather than :func:`yaml.safe_load` so that
    mapping order and repeated keys survive exactly as written. Aliases are
    expanded in place; an alias that refers to one of its own ancestors, or
    expansion past :data:`MAX_NODES` nodes, is rejected.

    Args:
        content: The raw YAML text.

    Returns:
        The root node.

    Raises:
        DocumentError: If the YAML is malformed, empty, self-referencing,
            too large or nested too deeply.
    """
    try:
        root = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise DocumentError(f"Invalid YAML: {exc}") from exc
    except RecursionError as exc:
        raise DocumentError("Document nests too deeply") from exc
    if root is None:
        raise DocumentError("Document is empty")
    try:
        return _YamlConverter().convert(root, "")
    except RecursionError as exc:
        raise DocumentError("Document nests too deeply") from exc


class _YamlConverter:
    """Convert one composed YAML graph, guarding against alias abuse."""

    def __init__(self) -> None:
        self._open: set[int] = set()
        self._count = 0

    def convert(self, node: yaml.Node, path: str) -> Node:
        self._count += 1
        if self._count > MAX_NODES:
            raise DocumentError(f"Document expands to more than {MAX_NODES} nodes")

        if isinstance(node, yaml.ScalarNode):
            if node.tag == _YAML_NULL_TAG:
                return ScalarNode(value="", path=path, is_null=True)
            return ScalarNode(value=str(node.value), path=path)

        # Composed aliases share the anchored node object.
        if id(node) in self._open:
            raise DocumentError(f"Recursive alias at '{path or '<root>'}'")
        self._open.add(id(node))
        try:
            if isinstance(node, yaml.MappingNode):
                return self._mapping(node, path)
            return self._sequence(node, path)
        finally:
            self._open.discard(id(node))

    def _mapping(self, node: yaml.MappingNode, path: str) -> MappingNode:
        pairs: list[tuple[str, Node]] = []
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise DocumentError(f"Mapping keys must be scalars at '{path or '<root>'}'")
            key = key_node.value
            pairs.append((key, self.convert(value_node, _child_path(path, key))))
        return MappingNode(pairs=tuple(pairs), path=path)

    def _sequence(self, node: yaml.SequenceNode, path: str) -> SequenceNode:
        return SequenceNode(
            items=tuple(
                self.convert(item, f"{path}[{index}]") for index, item in enumerate(node.value)
            ),
            path=path,
        )


# ------------------------------------------------------------------ #
# JSON
# ------------------------------------------------------------------ #


class _JsonObject(list):
    """Marker for JSON objects decoded as ordered pair lists."""


def from_json(content: str) -> Node:
    """Decode *content* as JSON and convert it to a node tree.

    Raises:
        json.JSONDecodeError: If the content is not valid JSON. The loader
            catches this to fall back to YAML.
        DocumentError: If the document nests too deeply to convert.
    """
    try:
        data = json.loads(content, object_pairs_hook=_JsonObject)
        return _convert_json(data, "")
    except RecursionError as exc:
        raise DocumentError("Document nests too deeply") from exc


def _convert_json(value: Any, path: str) -> Node:
    if isinstance(value, _JsonObject):
        return MappingNode(
            pairs=tuple(
                (key, _convert_json(item, _child_path(path, key))) for key, item in value
            ),
            path=path,
        )
    if isinstance(value, list):
        return SequenceNode(
            items=tuple(
                _convert_json(item, f"{path}[{index}]") for index, item in enumerate(value)
            ),
            path=path,
        )
    if value is None:
        return ScalarNode(value="", path=path, is_null=True)
    if isinstance(value, bool):
        return ScalarNode(value="true" if value else "false", path=path)
    return ScalarNode(value=str(value), path=path)
