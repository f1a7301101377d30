"""Documentation generator access — building and loading ``.yardoc`` databases.

YARD stores its registry as Ruby-marshalled objects, so loading goes through
a short Ruby script that prints every object's facts as JSON.  The resulting
:class:`YardRegistry` is an in-memory view scoped to a single request.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from open_gemdocs.config.models import RubySettings, YardSettings
from open_gemdocs.errors import CommandError, GeneratorError
from open_gemdocs.utils.process import run_command
from open_gemdocs.yard.models import ObjectFacts

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)

_FACTS_ADAPTER = TypeAdapter(list[ObjectFacts])

DUMP_SCRIPT = """
YARD::Registry.load!(ARGV[0])
objects = YARD::Registry.all.map do |obj|
  facts = {
    path: obj.path,
    name: obj.name.to_s,
    type: obj.type.to_s,
    namespace: obj.namespace ? obj.namespace.path : nil,
    docstring: obj.docstring.to_s,
    file: obj.file,
    line: obj.line,
    tags: obj.tags.map { |t| { tag_name: t.tag_name, text: t.text, types: t.types, name: t.name } }
  }
  if obj.is_a?(YARD::CodeObjects::NamespaceObject)
    facts[:instance_mixins] = obj.mixins(:instance).map(&:path)
    facts[:class_mixins] = obj.mixins(:class).map(&:path)
    facts[:meths] = obj.meths.map(&:path)
    facts[:attributes] = obj.attributes.flat_map do |scope, attrs|
      attrs.map do |name, rw|
        { name: name.to_s, scope: scope.to_s,
          read: rw[:read] && rw[:read].path, write: rw[:write] && rw[:write].path }
      end
    end
  end
  facts[:superclass] = obj.superclass && obj.superclass.path if obj.type == :class
  if obj.type == :method
    facts[:signature] = obj.signature
    facts[:parameters] = obj.parameters
    facts[:visibility] = obj.visibility.to_s
    facts[:scope] = obj.scope.to_s
    facts[:aliases] = obj.aliases.map { |a| a.name.to_s }
  end
  facts
end
puts JSON.generate(objects)
"""


@runtime_checkable
class RegistryHandle(Protocol):
    """A loaded documentation registry."""

    def lookup(self, path: str) -> ObjectFacts | None: ...
    def all(self, *kinds: str) -> list[ObjectFacts]: ...
    def release(self) -> None: ...


@runtime_checkable
class DocumentationGenerator(Protocol):
    """Builds and loads documentation databases."""

    async def build_database(self, source: Path, output: Path) -> None:
        """Analyze the gem sources in *source* and write a database to *output*."""
        ...

    async def load(self, database: Path) -> RegistryHandle:
        """Load *database* into a registry view."""
        ...


class YardRegistry:
    """In-memory registry view over the facts dumped from a ``.yardoc`` database."""

    def __init__(self, objects: Iterable[ObjectFacts]) -> None:
        self._objects: dict[str, ObjectFacts] = {obj.path: obj for obj in objects}

    def __len__(self) -> int:
        return len(self._objects)

    def lookup(self, path: str) -> ObjectFacts | None:
        return self._objects.get(path)

    def all(self, *kinds: str) -> list[ObjectFacts]:
        """Return every object, or only those whose type is in *kinds*."""
        if not kinds:
            return list(self._objects.values())
        return [obj for obj in self._objects.values() if obj.type in kinds]

    def release(self) -> None:
        self._objects.clear()


def parse_registry_dump(output: str) -> YardRegistry:
    """Parse the JSON printed by :data:`DUMP_SCRIPT`."""
    try:
        raw: Any = json.loads(output)
        objects = _FACTS_ADAPTER.validate_python(raw)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise GeneratorError(f"Unreadable registry dump: {exc}") from exc
    return YardRegistry(objects)


class YardGenerator:
    """Runs YARD to build databases and Ruby to read them back.

    Satisfies the :class:`DocumentationGenerator` protocol.
    """

    def __init__(
        self,
        yard: YardSettings | None = None,
        ruby: RubySettings | None = None,
    ) -> None:
        self._yard = yard or YardSettings()
        self._ruby = ruby or RubySettings()

    async def build_database(self, source: Path, output: Path) -> None:
        output.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Generating YARD database for %s at %s", source, output)
        try:
            await run_command(
                [self._yard.command, "doc", "--no-output", "--no-stats", "--db", str(output)],
                cwd=source,
                timeout=self._yard.timeout,
                check=True,
            )
        except CommandError as exc:
            raise GeneratorError(f"Failed to generate documentation: {exc}") from exc

    async def load(self, database: Path) -> YardRegistry:
        try:
            result = await run_command(
                [self._ruby.command, "-ryard", "-rjson", "-e", DUMP_SCRIPT, str(database)],
                timeout=self._ruby.timeout,
                check=True,
            )
        except CommandError as exc:
            raise GeneratorError(f"Failed to load {database}: {exc}") from exc

        registry = parse_registry_dump(result.stdout)
        logger.debug("Loaded %d objects from %s", len(registry), database)
        return registry
