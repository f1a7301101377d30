"""Shared in-memory collaborators for open-gemdocs tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from open_gemdocs.errors import DocServerError, PackageNotFoundError
from open_gemdocs.gems.models import GemSpec, InstalledGem
from open_gemdocs.yard.models import AttributeFacts, ObjectFacts, TagFacts
from open_gemdocs.yard.projector import RegistryProjector
from open_gemdocs.yard.registry import YardRegistry


class FakePackages:
    """A :class:`PackageManager` over a fixed set of installed gems."""

    def __init__(self, specs: list[GemSpec] | None = None, gem_dir: Path | None = None) -> None:
        self.specs = {spec.name: spec for spec in specs or []}
        self.gem_home = gem_dir

    async def list_installed(self) -> list[InstalledGem]:
        return [InstalledGem(name=s.name, versions=s.version) for s in self.specs.values()]

    async def find(self, name: str) -> GemSpec:
        if name not in self.specs:
            raise PackageNotFoundError(name, "not installed")
        return self.specs[name]

    async def locate_source(self, name: str) -> Path:
        if name not in self.specs:
            raise PackageNotFoundError(name, "not installed")
        return Path("/gems") / f"{name}-{self.specs[name].version}"

    async def gem_dir(self) -> Path | None:
        return self.gem_home


class TrackingRegistry(YardRegistry):
    def __init__(self, objects: list[ObjectFacts]) -> None:
        super().__init__(objects)
        self.released = False

    def release(self) -> None:
        self.released = True
        super().release()


class FakeGenerator:
    """A :class:`DocumentationGenerator` that serves canned registry facts."""

    def __init__(self, objects: list[ObjectFacts]) -> None:
        self.objects = objects
        self.built: list[tuple[Path, Path]] = []
        self.loaded: list[TrackingRegistry] = []

    async def build_database(self, source: Path, output: Path) -> None:
        self.built.append((source, output))
        output.mkdir(parents=True, exist_ok=True)

    async def load(self, database: Path) -> TrackingRegistry:
        registry = TrackingRegistry(list(self.objects))
        self.loaded.append(registry)
        return registry


class FakeDocServer:
    """A :class:`DocServer` whose process table is a couple of attributes."""

    def __init__(self, port: int = 8808, *, fail_start: bool = False, comes_up: bool = True) -> None:
        self._port = port
        self.listening = False
        self.pids: list[int] = []
        self.cwd: Path | None = None
        self.fail_start = fail_start
        self.comes_up = comes_up
        self.started_in: list[Path] = []
        self.stopped: list[list[int]] = []

    @property
    def port(self) -> int:
        return self._port

    async def is_listening(self) -> bool:
        return self.listening

    def owning_pids(self) -> list[int]:
        return list(self.pids)

    def working_directory(self, pid: int) -> Path | None:
        return self.cwd

    async def start(self, directory: Path) -> None:
        self.started_in.append(directory)
        if self.fail_start:
            raise DocServerError("yard: command not found")
        if self.comes_up:
            self.listening = True
            self.pids = [4242]
            self.cwd = directory

    async def wait_until_listening(self) -> bool:
        return self.listening

    async def stop(self, pids: list[int]) -> None:
        self.stopped.append(pids)
        self.listening = False
        self.pids = []
        self.cwd = None

    def docs_url(self, gem_name: str, object_path: str | None = None) -> str:
        url = f"http://localhost:{self._port}/docs/{gem_name}"
        if object_path:
            url += "/" + object_path.replace("::", "/")
        return url


WIDGETRY_SPEC = GemSpec(
    name="widgetry",
    version="2.1.0",
    summary="Widgets for Ruby",
    description="A toolkit of widgets and gadgets.",
    homepage="https://example.org/widgetry",
    licenses=["MIT"],
    authors=["Ada", "Grace"],
)


def widgetry_objects() -> list[ObjectFacts]:
    return [
        ObjectFacts(
            path="Widgetry",
            name="Widgetry",
            type="module",
            namespace="",
            docstring="Widgets for everyone.",
            file="lib/widgetry.rb",
            line=1,
            meths=["Widgetry.configure"],
        ),
        ObjectFacts(
            path="Widgetry.configure",
            name="configure",
            type="method",
            namespace="Widgetry",
            docstring="Configure the library.",
            signature="def self.configure(&block)",
            parameters=[("&block", None)],
            visibility="public",
            scope="class",
        ),
        ObjectFacts(
            path="Widgetry::Gadget",
            name="Gadget",
            type="class",
            namespace="Widgetry",
            docstring="A spinning gadget.\n\nGadgets spin  at   configurable speeds. " + "x" * 120,
            file="lib/widgetry/gadget.rb",
            line=3,
            superclass="Object",
            instance_mixins=["Comparable"],
            class_mixins=["Widgetry::Registry"],
            meths=[
                "Widgetry::Gadget#spin",
                "Widgetry::Gadget#secret",
                "Widgetry::Gadget#name",
                "Widgetry::Gadget#name=",
                "Widgetry::Gadget#vanished",
            ],
            attributes=[
                AttributeFacts(name="name", read="Widgetry::Gadget#name", write="Widgetry::Gadget#name="),
                AttributeFacts(name="ghost"),
            ],
            tags=[
                TagFacts(tag_name="example", name="Spinning", text="Widgetry::Gadget.new.spin(3)"),
            ],
        ),
        ObjectFacts(
            path="Widgetry::Gadget#spin",
            name="spin",
            type="method",
            namespace="Widgetry::Gadget",
            docstring="Spin the gadget.",
            file="lib/widgetry/gadget.rb",
            line=10,
            signature="def spin(speed = 1)",
            parameters=[("speed", "1")],
            visibility="public",
            scope="instance",
            aliases=["twirl"],
            tags=[
                TagFacts(tag_name="param", name="speed", types=["Integer"], text="revolutions per second"),
                TagFacts(tag_name="return", types=["Boolean"], text="whether it spun"),
            ],
        ),
        ObjectFacts(
            path="Widgetry::Gadget#secret",
            name="secret",
            type="method",
            namespace="Widgetry::Gadget",
            docstring="",
            signature="def secret",
            visibility="private",
            scope="instance",
        ),
        ObjectFacts(
            path="Widgetry::Gadget#name",
            name="name",
            type="method",
            namespace="Widgetry::Gadget",
            docstring="The gadget name.",
            signature="def name",
            visibility="public",
            scope="instance",
        ),
        ObjectFacts(
            path="Widgetry::Gadget#name=",
            name="name=",
            type="method",
            namespace="Widgetry::Gadget",
            signature="def name=(value)",
            parameters=[("value", None)],
            visibility="public",
            scope="instance",
        ),
        ObjectFacts(
            path="Widgetry::Registry",
            name="Registry",
            type="module",
            namespace="Widgetry",
            docstring="   ",
        ),
    ]


@pytest.fixture
def packages() -> FakePackages:
    return FakePackages([WIDGETRY_SPEC])


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator(widgetry_objects())


@pytest.fixture
def projector(packages: FakePackages, generator: FakeGenerator, tmp_path: Path) -> RegistryProjector:
    return RegistryProjector(
        packages,
        generator,
        db_patterns=[str(tmp_path / "no-such-dir" / "{name}-*" / ".yardoc")],
        temp_dir=tmp_path,
    )


@pytest.fixture
def doc_server() -> FakeDocServer:
    return FakeDocServer()
