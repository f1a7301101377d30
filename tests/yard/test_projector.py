"""Tests for RegistryProjector."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from open_gemdocs.errors import ObjectNotFoundError, PackageNotFoundError
from open_gemdocs.yard.models import dump_projection
from open_gemdocs.yard.projector import RegistryProjector

if TYPE_CHECKING:
    from conftest import FakeGenerator, FakePackages, TrackingRegistry


class TestProjectOverview:
    async def test_summary_from_package_manager(self, projector: RegistryProjector) -> None:
        overview = await projector.project_overview("widgetry")

        assert overview.gem == "widgetry"
        assert overview.summary.version == "2.1.0"
        assert overview.summary.summary == "Widgets for Ruby"
        assert overview.summary.homepage == "https://example.org/widgetry"

    async def test_root_namespaces_only(self, projector: RegistryProjector) -> None:
        overview = await projector.project_overview("widgetry")

        assert [(ns.path, ns.type) for ns in overview.namespaces] == [("Widgetry", "module")]

    async def test_classes_and_modules(self, projector: RegistryProjector) -> None:
        overview = await projector.project_overview("widgetry")

        assert [c.path for c in overview.classes] == ["Widgetry::Gadget"]
        gadget = overview.classes[0]
        assert gadget.superclass == "Object"
        assert gadget.namespace == "Widgetry"
        assert gadget.methods_count == 5

        assert [m.path for m in overview.modules] == ["Widgetry", "Widgetry::Registry"]
        assert overview.modules[0].namespace is None
        assert overview.modules[0].methods_count == 1

    async def test_blank_docstring_is_absent(self, projector: RegistryProjector) -> None:
        overview = await projector.project_overview("widgetry")

        registry_module = overview.modules[1]
        assert registry_module.docstring is None
        assert "docstring" not in dump_projection(overview)["modules"][1]

    async def test_registry_released(self, projector: RegistryProjector, generator: FakeGenerator) -> None:
        await projector.project_overview("widgetry")

        assert len(generator.loaded) == 1
        assert generator.loaded[0].released

    async def test_unknown_gem(self, projector: RegistryProjector) -> None:
        with pytest.raises(PackageNotFoundError, match="not found"):
            await projector.project_overview("nope")


class TestProjectObject:
    async def test_class(self, projector: RegistryProjector) -> None:
        obj = await projector.project_object("widgetry", "Widgetry::Gadget")

        assert obj.type == "class"
        assert obj.superclass == "Object"
        assert obj.includes == ["Comparable"]
        assert obj.extends == ["Widgetry::Registry"]
        assert obj.source is not None
        assert obj.source.file == "lib/widgetry/gadget.rb"
        assert obj.source.line == 3
        assert [t.tag_name for t in obj.tags] == ["example"]

    async def test_methods_skip_unresolved(self, projector: RegistryProjector) -> None:
        obj = await projector.project_object("widgetry", "Widgetry::Gadget")

        assert obj.methods is not None
        names = [m.name for m in obj.methods]
        assert names == ["spin", "secret", "name", "name="]

    async def test_method_info(self, projector: RegistryProjector) -> None:
        obj = await projector.project_object("widgetry", "Widgetry::Gadget")

        assert obj.methods is not None
        spin = obj.methods[0]
        assert spin.signature == "def spin(speed = 1)"
        assert spin.return_type == ["Boolean"]
        assert [(p.name, p.default) for p in spin.parameters] == [("speed", "1")]
        secret = obj.methods[1]
        assert secret.visibility == "private"
        assert secret.docstring is None

    async def test_attributes(self, projector: RegistryProjector) -> None:
        obj = await projector.project_object("widgetry", "Widgetry::Gadget")

        assert obj.attributes is not None
        assert len(obj.attributes) == 1
        attr = obj.attributes[0]
        assert attr.name == "name"
        assert attr.read
        assert attr.write
        assert attr.docstring == "The gadget name."

    async def test_module_has_no_superclass(self, projector: RegistryProjector) -> None:
        obj = await projector.project_object("widgetry", "Widgetry")

        assert obj.type == "module"
        assert obj.superclass is None
        assert obj.methods is not None
        assert obj.methods[0].scope == "class"

    async def test_method(self, projector: RegistryProjector) -> None:
        obj = await projector.project_object("widgetry", "Widgetry::Gadget#spin")

        assert obj.type == "method"
        assert obj.visibility == "public"
        assert obj.scope == "instance"
        assert obj.aliases == ["twirl"]
        assert obj.parameters is not None
        assert obj.parameters[0].default == "1"
        assert obj.methods is None

    async def test_method_projection_omits_container_fields(self, projector: RegistryProjector) -> None:
        obj = await projector.project_object("widgetry", "Widgetry::Gadget#spin")
        data = dump_projection(obj)

        assert "methods" not in data
        assert "superclass" not in data
        assert data["signature"] == "def spin(speed = 1)"

    async def test_unknown_path(self, projector: RegistryProjector, generator: FakeGenerator) -> None:
        with pytest.raises(ObjectNotFoundError, match="Object 'Widgetry::Nope' not found in widgetry"):
            await projector.project_object("widgetry", "Widgetry::Nope")

        assert generator.loaded[0].released


class TestResolveDatabase:
    async def test_generates_private_database_once(
        self, projector: RegistryProjector, generator: FakeGenerator, tmp_path: Path
    ) -> None:
        first = await projector.resolve_database("widgetry")
        second = await projector.resolve_database("widgetry")

        assert first == second
        assert first.name == ".yardoc"
        assert first.parent.parent == tmp_path
        assert first.parent.name.startswith("yard_widgetry_")
        assert len(generator.built) == 1
        assert generator.built[0][0] == Path("/gems/widgetry-2.1.0")

    async def test_prefers_existing_database(
        self, packages: FakePackages, generator: FakeGenerator, tmp_path: Path
    ) -> None:
        existing = tmp_path / "cache" / "widgetry-2.1.0" / ".yardoc"
        existing.mkdir(parents=True)
        projector = RegistryProjector(
            packages,
            generator,
            db_patterns=[str(tmp_path / "cache" / "{name}-*" / ".yardoc")],
            temp_dir=tmp_path,
        )

        assert await projector.resolve_database("widgetry") == existing
        assert generator.built == []

    async def test_ignores_gems_sharing_a_prefix(
        self, packages: FakePackages, generator: FakeGenerator, tmp_path: Path
    ) -> None:
        (tmp_path / "cache" / "widgetry-extras-1.0.0" / ".yardoc").mkdir(parents=True)
        projector = RegistryProjector(
            packages,
            generator,
            db_patterns=[str(tmp_path / "cache" / "{name}-*" / ".yardoc")],
            temp_dir=tmp_path,
        )

        database = await projector.resolve_database("widgetry")

        assert "widgetry-extras" not in str(database)
        assert len(generator.built) == 1

    async def test_gem_dir_doc_database(
        self, packages: FakePackages, generator: FakeGenerator, tmp_path: Path
    ) -> None:
        doc = tmp_path / "gemhome" / "doc" / "widgetry-2.1.0" / ".yardoc"
        doc.mkdir(parents=True)
        packages.gem_home = tmp_path / "gemhome"
        projector = RegistryProjector(
            packages,
            generator,
            temp_dir=tmp_path,
        )

        assert await projector.resolve_database("widgetry") == doc

    async def test_glob_characters_in_name_are_literal(
        self, packages: FakePackages, generator: FakeGenerator, tmp_path: Path
    ) -> None:
        (tmp_path / "cache" / "widgetry-1.0" / ".yardoc").mkdir(parents=True)
        (tmp_path / "gemhome" / "doc" / "widgetry-1.0" / ".yardoc").mkdir(parents=True)
        packages.gem_home = tmp_path / "gemhome"
        projector = RegistryProjector(
            packages,
            generator,
            db_patterns=[str(tmp_path / "cache" / "{name}-*" / ".yardoc")],
            temp_dir=tmp_path,
        )

        with pytest.raises(PackageNotFoundError):
            await projector.resolve_database("w*")
        assert generator.built == []


class TestGemLocks:
    async def test_lock_dropped_after_use(self, projector: RegistryProjector) -> None:
        await projector.project_overview("widgetry")

        assert projector._locks == {}
        assert not projector._lock_users

    async def test_lock_dropped_after_failure(self, projector: RegistryProjector) -> None:
        with pytest.raises(PackageNotFoundError):
            await projector.project_overview("nope")

        assert projector._locks == {}

    async def test_same_gem_loads_are_serialized(
        self, projector: RegistryProjector, generator: FakeGenerator
    ) -> None:
        active = 0
        peak = 0
        load = generator.load

        async def slow_load(database: Path) -> TrackingRegistry:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return await load(database)

        generator.load = slow_load  # type: ignore[method-assign]

        await asyncio.gather(*(projector.project_overview("widgetry") for _ in range(3)))

        assert peak == 1
        assert len(generator.loaded) == 3
        assert projector._locks == {}
