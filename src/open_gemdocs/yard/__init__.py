"""YARD integration — registry access, projection, rendering and the doc server."""

from open_gemdocs.yard.models import GemOverview, ObjectFacts, ObjectProjection, dump_projection
from open_gemdocs.yard.projector import RegistryProjector
from open_gemdocs.yard.registry import DocumentationGenerator, RegistryHandle, YardGenerator, YardRegistry
from open_gemdocs.yard.render import render_object, render_overview
from open_gemdocs.yard.server import DocServer, YardServer

__all__ = [
    "DocServer",
    "DocumentationGenerator",
    "GemOverview",
    "ObjectFacts",
    "ObjectProjection",
    "RegistryHandle",
    "RegistryProjector",
    "YardGenerator",
    "YardRegistry",
    "YardServer",
    "dump_projection",
    "render_object",
    "render_overview",
]
