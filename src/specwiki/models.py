"""Canonical Pydantic models shared across all specwiki modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ConvertConfig`, :class:`ServerConfig` and :class:`GlobalConfig`.

**Operation model** -- produced by the document parser and consumed by the
markup renderer:
    :class:`Param`, :class:`Schema`, :class:`Operation`, :class:`Group` and
    :class:`ApiModel`.

The operation models are mutable while the builder runs. Registries hold
references to them, so an in-place update through a registry entry is
visible everywhere that entry is reachable. Once the schema linker has
finished, nothing mutates them again.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

DEFAULT_GROUP_NAME = "API Specifics"
"""Group that collects operations declaring no ``tags``."""


# --- Configuration ---


class ConvertConfig(BaseModel):
    """Default source and destination for ``specwiki convert``."""

    input: str = Field(default="test.yml", description="Source document path or URL")
    output: str = Field(default="test.txt", description="Destination path, '-' for stdout")


class ServerConfig(BaseModel):
    """Bind address for ``specwiki serve``."""

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=9999, description="TCP port to listen on")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specwiki/config.json``.

    Loaded and saved by :func:`~specwiki.config.load_global_config` and
    :func:`~specwiki.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specwiki.config.resolve_config`
    for the full precedence chain.
    """

    convert: ConvertConfig = Field(default_factory=ConvertConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


# --- Operation model ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operations in a Swagger 2.0 path item.

    Any other key under a path (path-level ``parameters``, vendor
    extensions) is not an operation and is skipped by the extractor.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"


class Param(BaseModel):
    """A query/form parameter or a property of a named :class:`Schema`.

    ``schema_`` is empty for scalar parameters. For a property that refers
    to another definition it starts as a name-only stub and is replaced by
    the resolved schema during linking, at which point ``type`` becomes
    ``"struct"`` (unless the property is an ``"array"``).
    """

    name: str = ""
    type: str = ""
    description: str = ""
    mandatory: bool = False
    schema_: Schema = Field(default_factory=lambda: Schema(), alias="schema")
    enum: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class Schema(BaseModel):
    """A named or inline collection of attributes.

    * Name and attributes -- a resolved definition.
    * Attributes only -- an inline schema (aggregated form-data parameters).
    * Name only -- a reference still pending linking, or one that matched
      no definition and stays unresolved.
    """

    name: str = ""
    attributes: list[Param] = Field(default_factory=list)
    has_mandatory_params: bool = False

    @property
    def is_stub(self) -> bool:
        """Whether this schema is a bare reference without attributes."""
        return bool(self.name) and not self.attributes


class Operation(BaseModel):
    """One (HTTP verb, path) pair with its parameters and response shape."""

    summary: str = ""
    description: str = ""
    method: str = Field(description='Verb and path, e.g. "GET /pets"')
    query_params: list[Param] = Field(default_factory=list)
    request_schema: Schema = Field(default_factory=Schema)
    response_schema: Schema = Field(default_factory=Schema)
    custom_tags: dict[str, str] = Field(
        default_factory=dict, description="Display name to value, from x-* keys"
    )


class Group(BaseModel):
    """Operations sharing the same first tag, in document order."""

    name: str
    operations: list[Operation] = Field(default_factory=list)


class ApiModel(BaseModel):
    """Result of building one document.

    Produced by :func:`~specwiki.parser.builder.build_model` and consumed
    by :func:`~specwiki.render.jira.to_jira`. ``groups`` keeps the order in
    which groups were first seen; ``definitions`` is the linked registry.
    """

    groups: dict[str, Group] = Field(default_factory=dict)
    definitions: dict[str, Schema] = Field(default_factory=dict)


Param.model_rebuild()
Schema.model_rebuild()
Operation.model_rebuild()
