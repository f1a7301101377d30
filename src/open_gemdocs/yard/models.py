"""YARD registry facts and their JSON-friendly projections.

``ObjectFacts`` mirrors what the documentation generator declares about one
registry object.  The projection models are what ``fetch_gem_docs`` renders
and what ``open-gemdocs docs --json`` prints; serialize them with
:func:`dump_projection` so absent optional fields are omitted.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Raw registry facts
# ---------------------------------------------------------------------------


class TagFacts(BaseModel):
    """A YARD tag such as ``@param``, ``@return`` or ``@example``."""

    tag_name: str
    text: str | None = None
    types: list[str] | None = None
    name: str | None = None


class AttributeFacts(BaseModel):
    """An attribute declared with ``attr_reader``/``attr_writer``/``attr_accessor``."""

    name: str
    scope: str = "instance"
    read: str | None = Field(default=None, description="Path of the reader method.")
    write: str | None = Field(default=None, description="Path of the writer method.")


class ObjectFacts(BaseModel):
    """Everything the generator declares about one code object."""

    path: str
    name: str
    type: str
    namespace: str | None = Field(default=None, description="Namespace path; '' is the root namespace.")
    docstring: str = ""
    file: str | None = None
    line: int | None = None
    tags: list[TagFacts] = []

    # classes and modules
    superclass: str | None = None
    instance_mixins: list[str] = []
    class_mixins: list[str] = []
    meths: list[str] = Field(default_factory=list, description="Paths of the object's methods.")
    attributes: list[AttributeFacts] = []

    # methods
    signature: str | None = None
    parameters: list[tuple[str, str | None]] = []
    visibility: str | None = None
    scope: str | None = None
    aliases: list[str] = []

    @property
    def is_root_level(self) -> bool:
        return self.namespace in ("", "root")


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------


class TagInfo(BaseModel):
    tag_name: str
    text: str | None = None
    types: list[str] | None = None
    name: str | None = None


class SourceLocation(BaseModel):
    file: str
    line: int | None = None


class ParameterInfo(BaseModel):
    name: str
    default: str | None = None


class MethodInfo(BaseModel):
    """A method as listed inside its class or module."""

    name: str
    path: str
    signature: str | None = None
    visibility: str = "public"
    scope: str = "instance"
    docstring: str | None = None
    parameters: list[ParameterInfo] = []
    return_type: list[str] | None = None


class AttributeInfo(BaseModel):
    name: str
    read: bool
    write: bool
    docstring: str | None = None


class ObjectProjection(BaseModel):
    """Full documentation of a single registry object."""

    name: str
    path: str
    type: str
    namespace: str | None = None
    docstring: str | None = None
    tags: list[TagInfo] = []
    source: SourceLocation | None = None

    # classes and modules
    superclass: str | None = None
    includes: list[str] | None = None
    extends: list[str] | None = None
    methods: list[MethodInfo] | None = None
    attributes: list[AttributeInfo] | None = None

    # methods
    signature: str | None = None
    parameters: list[ParameterInfo] | None = None
    visibility: Literal["public", "protected", "private"] | None = None
    scope: Literal["instance", "class"] | None = None
    aliases: list[str] | None = None


class GemSummary(BaseModel):
    version: str | None = None
    description: str | None = None
    summary: str | None = None
    homepage: str | None = None


class NamespaceEntry(BaseModel):
    name: str
    path: str
    type: str


class ClassEntry(BaseModel):
    name: str
    path: str
    namespace: str | None = None
    superclass: str | None = None
    docstring: str | None = None
    methods_count: int = 0


class ModuleEntry(BaseModel):
    name: str
    path: str
    namespace: str | None = None
    docstring: str | None = None
    methods_count: int = 0


class GemOverview(BaseModel):
    """Top-level documentation of a gem."""

    gem: str
    summary: GemSummary = Field(default_factory=GemSummary)
    namespaces: list[NamespaceEntry] = []
    classes: list[ClassEntry] = []
    modules: list[ModuleEntry] = []


def dump_projection(projection: GemOverview | ObjectProjection) -> dict[str, Any]:
    """Serialize a projection, omitting absent optional fields."""
    return projection.model_dump(exclude_none=True)
