"""RegistryProjector — turns a gem's YARD registry into serializable projections.

Each call resolves (or generates) the gem's ``.yardoc`` database, loads it,
builds either a :class:`GemOverview` or an :class:`ObjectProjection`, and
releases the registry view before returning.
"""

from __future__ import annotations

import asyncio
import glob
import logging
import os
import re
import tempfile
from collections import Counter
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from open_gemdocs.errors import ObjectNotFoundError, PackageNotFoundError
from open_gemdocs.utils.telemetry import ATTR_GEM_NAME, ATTR_OBJECT_PATH, ATTR_YARDOC_PATH, get_tracer
from open_gemdocs.yard.models import (
    AttributeInfo,
    ClassEntry,
    GemOverview,
    GemSummary,
    MethodInfo,
    ModuleEntry,
    NamespaceEntry,
    ObjectFacts,
    ObjectProjection,
    ParameterInfo,
    SourceLocation,
    TagInfo,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from open_gemdocs.gems.provider import PackageManager
    from open_gemdocs.yard.registry import DocumentationGenerator, RegistryHandle

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_DB_PATTERNS = ("~/.yard/gems/{name}-*/.yardoc",)


def _docstring(text: str | None) -> str | None:
    """Blank docstrings become ``None``."""
    if text is None or not text.strip():
        return None
    return text


def _namespace(facts: ObjectFacts) -> str | None:
    return facts.namespace or None


def _parameters(facts: ObjectFacts) -> list[ParameterInfo]:
    return [ParameterInfo(name=name, default=default) for name, default in facts.parameters]


def _return_type(facts: ObjectFacts) -> list[str] | None:
    for tag in facts.tags:
        if tag.tag_name == "return":
            return tag.types
    return None


class RegistryProjector:
    """Projects YARD registries of installed gems.

    Loads for the same gem are serialized; different gems proceed
    concurrently.
    """

    def __init__(
        self,
        packages: PackageManager,
        generator: DocumentationGenerator,
        *,
        db_patterns: list[str] | None = None,
        temp_dir: Path | None = None,
    ) -> None:
        self._packages = packages
        self._generator = generator
        self._db_patterns = [*DEFAULT_DB_PATTERNS, *(db_patterns or [])]
        self._temp_dir = temp_dir or Path(tempfile.gettempdir())
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: Counter[str] = Counter()

    async def project_overview(self, gem_name: str) -> GemOverview:
        """Summary, root namespaces, classes and modules of *gem_name*."""
        with _tracer.start_as_current_span("gemdocs.project.overview") as span:
            span.set_attribute(ATTR_GEM_NAME, gem_name)
            async with self._loaded(gem_name) as registry:
                summary = await self._summary(gem_name)
                return GemOverview(
                    gem=gem_name,
                    summary=summary,
                    namespaces=[
                        NamespaceEntry(name=obj.name, path=obj.path, type=obj.type)
                        for obj in registry.all("module", "class")
                        if obj.is_root_level
                    ],
                    classes=[
                        ClassEntry(
                            name=obj.name,
                            path=obj.path,
                            namespace=_namespace(obj),
                            superclass=obj.superclass,
                            docstring=_docstring(obj.docstring),
                            methods_count=len(obj.meths),
                        )
                        for obj in registry.all("class")
                    ],
                    modules=[
                        ModuleEntry(
                            name=obj.name,
                            path=obj.path,
                            namespace=_namespace(obj),
                            docstring=_docstring(obj.docstring),
                            methods_count=len(obj.meths),
                        )
                        for obj in registry.all("module")
                    ],
                )

    async def project_object(self, gem_name: str, object_path: str) -> ObjectProjection:
        """Full documentation of *object_path* inside *gem_name*.

        Raises:
            PackageNotFoundError: If the gem is not installed.
            ObjectNotFoundError: If the registry has no such object.
        """
        with _tracer.start_as_current_span("gemdocs.project.object") as span:
            span.set_attribute(ATTR_GEM_NAME, gem_name)
            span.set_attribute(ATTR_OBJECT_PATH, object_path)
            async with self._loaded(gem_name) as registry:
                facts = registry.lookup(object_path)
                if facts is None:
                    raise ObjectNotFoundError(object_path, gem_name)
                return self._project(facts, registry)

    async def resolve_database(self, gem_name: str) -> Path:
        """Find an existing ``.yardoc`` for *gem_name* or generate one."""
        for pattern in await self._candidate_patterns(gem_name):
            found = self._match(pattern, gem_name)
            if found is not None:
                logger.debug("Using YARD database %s", found)
                return found

        private = self._private_database(gem_name)
        if private.exists():
            return private

        source = await self._packages.locate_source(gem_name)
        await self._generator.build_database(source, private)
        return private

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _gem_lock(self, gem_name: str) -> AsyncIterator[None]:
        # Entries live only while someone holds or waits on the lock.
        lock = self._locks.setdefault(gem_name, asyncio.Lock())
        self._lock_users[gem_name] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[gem_name] -= 1
            if not self._lock_users[gem_name]:
                del self._lock_users[gem_name]
                del self._locks[gem_name]

    @asynccontextmanager
    async def _loaded(self, gem_name: str) -> AsyncIterator[RegistryHandle]:
        async with self._gem_lock(gem_name):
            database = await self.resolve_database(gem_name)
            with _tracer.start_as_current_span("gemdocs.registry.load") as span:
                span.set_attribute(ATTR_YARDOC_PATH, str(database))
                registry = await self._generator.load(database)
            try:
                yield registry
            finally:
                registry.release()

    async def _candidate_patterns(self, gem_name: str) -> list[str]:
        escaped = glob.escape(gem_name)
        patterns = [p.format(name=escaped) for p in self._db_patterns]
        gem_dir = await self._packages.gem_dir()
        if gem_dir is not None:
            patterns.insert(1, str(gem_dir / "doc" / f"{escaped}-*" / ".yardoc"))
        return patterns

    @staticmethod
    def _match(pattern: str, gem_name: str) -> Path | None:
        # "rails-*" must not pick up "rails-html-sanitizer-1.6.0".
        versioned = re.compile(re.escape(gem_name) + r"-\d")
        for match in sorted(glob.glob(os.path.expanduser(pattern))):
            directory = Path(match).parent.name
            if directory.startswith(f"{gem_name}-") and not versioned.match(directory):
                continue
            return Path(match)
        return None

    def _private_database(self, gem_name: str) -> Path:
        return self._temp_dir / f"yard_{gem_name}_{os.getpid()}" / ".yardoc"

    async def _summary(self, gem_name: str) -> GemSummary:
        try:
            spec = await self._packages.find(gem_name)
        except PackageNotFoundError:
            return GemSummary()
        return GemSummary(
            version=spec.version,
            description=spec.description,
            summary=spec.summary,
            homepage=spec.homepage,
        )

    def _project(self, facts: ObjectFacts, registry: RegistryHandle) -> ObjectProjection:
        projection = ObjectProjection(
            name=facts.name,
            path=facts.path,
            type=facts.type,
            namespace=_namespace(facts),
            docstring=_docstring(facts.docstring),
            tags=[TagInfo.model_validate(tag.model_dump()) for tag in facts.tags],
            source=SourceLocation(file=facts.file, line=facts.line) if facts.file else None,
        )

        if facts.type in ("class", "module"):
            if facts.type == "class":
                projection.superclass = facts.superclass
            projection.includes = list(facts.instance_mixins)
            projection.extends = list(facts.class_mixins)
            projection.methods = self._methods(facts, registry)
            projection.attributes = self._attributes(facts, registry)
        elif facts.type == "method":
            projection.signature = facts.signature
            projection.parameters = _parameters(facts)
            projection.visibility = facts.visibility or "public"  # type: ignore[assignment]
            projection.scope = facts.scope or "instance"  # type: ignore[assignment]
            projection.aliases = list(facts.aliases)

        return projection

    @staticmethod
    def _methods(facts: ObjectFacts, registry: RegistryHandle) -> list[MethodInfo]:
        methods: list[MethodInfo] = []
        for path in facts.meths:
            meth = registry.lookup(path)
            if meth is None:
                logger.debug("Skipping unresolved method %s", path)
                continue
            methods.append(
                MethodInfo(
                    name=meth.name,
                    path=meth.path,
                    signature=meth.signature,
                    visibility=meth.visibility or "public",
                    scope=meth.scope or "instance",
                    docstring=_docstring(meth.docstring),
                    parameters=_parameters(meth),
                    return_type=_return_type(meth),
                )
            )
        return methods

    @staticmethod
    def _attributes(facts: ObjectFacts, registry: RegistryHandle) -> list[AttributeInfo]:
        attributes: list[AttributeInfo] = []
        for attr in facts.attributes:
            accessor = attr.read or attr.write
            if accessor is None:
                continue
            accessor_facts = registry.lookup(accessor)
            attributes.append(
                AttributeInfo(
                    name=attr.name.removesuffix("="),
                    read=attr.read is not None,
                    write=attr.write is not None,
                    docstring=_docstring(accessor_facts.docstring) if accessor_facts else None,
                )
            )
        return attributes
