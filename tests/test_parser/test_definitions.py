"""Tests for specwiki.parser.definitions -- the named schema registry."""

from __future__ import annotations

import textwrap

import pytest

from specwiki.exceptions import ShapeError
from specwiki.models import Schema
from specwiki.parser.definitions import (
    mark_required,
    parse_property,
    ref_name,
    resolve_definitions,
)
from specwiki.parser.tree import MappingNode, from_yaml


def _root(text: str) -> MappingNode:
    return from_yaml(textwrap.dedent(text))


class TestRefName:
    def test_strips_prefix(self) -> None:
        assert ref_name("#/definitions/Pet") == "Pet"

    def test_other_locator_kept(self) -> None:
        assert ref_name("Pet") == "Pet"


class TestResolveDefinitions:
    def test_no_definitions(self) -> None:
        assert resolve_definitions(_root("swagger: '2.0'\n")) == {}

    def test_attributes_in_document_order(self) -> None:
        registry = resolve_definitions(_root("""\
            definitions:
              Pet:
                properties:
                  name:
                    type: string
                  id:
                    type: integer
                    description: Identifier
        """))
        pet = registry["Pet"]
        assert pet.name == "Pet"
        assert [(a.name, a.type) for a in pet.attributes] == [("name", "string"), ("id", "integer")]
        assert pet.attributes[1].description == "Identifier"

    def test_required_matched_by_name(self) -> None:
        registry = resolve_definitions(_root("""\
            definitions:
              Pet:
                properties:
                  name:
                    type: string
                  tag:
                    type: string
                  id:
                    type: integer
                required:
                  - id
        """))
        mandatory = {a.name: a.mandatory for a in registry["Pet"].attributes}
        assert mandatory == {"name": False, "tag": False, "id": True}
        assert registry["Pet"].has_mandatory_params is True

    def test_required_before_properties(self) -> None:
        registry = resolve_definitions(_root("""\
            definitions:
              Pet:
                required: [id]
                properties:
                  id:
                    type: integer
        """))
        assert registry["Pet"].attributes[0].mandatory is True

    def test_required_unknown_name(self) -> None:
        registry = resolve_definitions(_root("""\
            definitions:
              Pet:
                properties:
                  id:
                    type: integer
                required: [missing]
        """))
        assert registry["Pet"].has_mandatory_params is False
        assert registry["Pet"].attributes[0].mandatory is False

    def test_reference_becomes_stub(self) -> None:
        registry = resolve_definitions(_root("""\
            definitions:
              Pet:
                properties:
                  owner:
                    $ref: "#/definitions/Person"
        """))
        owner = registry["Pet"].attributes[0]
        assert owner.schema_.name == "Person"
        assert owner.schema_.is_stub
        assert owner.type == ""

    def test_repeated_definitions_key_merges(self) -> None:
        registry = resolve_definitions(_root("""\
            definitions:
              A:
                properties:
                  x: {type: string}
              B:
                properties:
                  y: {type: string}
            definitions:
              B:
                properties:
                  z: {type: integer}
              C: {}
        """))
        assert list(registry) == ["A", "B", "C"]
        assert [a.name for a in registry["B"].attributes] == ["z"]
        assert registry["C"].attributes == []

    def test_required_wrong_shape(self) -> None:
        with pytest.raises(ShapeError, match="definitions.Pet.required"):
            resolve_definitions(_root("""\
                definitions:
                  Pet:
                    required:
                      id: true
            """))


class TestParseProperty:
    def test_array_of_scalars(self) -> None:
        body = from_yaml("type: array\nitems:\n  type: string\n")
        attribute = parse_property("tags", body)
        assert attribute.type == "array of string"
        assert attribute.schema_.name == ""

    def test_array_of_references(self) -> None:
        body = from_yaml("type: array\nitems:\n  $ref: '#/definitions/Pet'\n")
        attribute = parse_property("pets", body)
        assert attribute.type == "array"
        assert attribute.schema_.name == "Pet"

    def test_enum(self) -> None:
        body = from_yaml("type: string\nenum: [cat, dog]\n")
        assert parse_property("kind", body).enum == ["cat", "dog"]

    def test_unknown_keys_ignored(self) -> None:
        body = from_yaml("type: string\nformat: date\nexample: today\n")
        attribute = parse_property("day", body)
        assert attribute.type == "string"


class TestMarkRequired:
    def test_empty_list(self) -> None:
        schema = Schema(name="X")
        mark_required(schema, [])
        assert schema.has_mandatory_params is False
