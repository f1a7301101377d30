"""Tests for Markdown rendering of projections."""

from __future__ import annotations

from open_gemdocs.yard.models import (
    AttributeInfo,
    ClassEntry,
    GemOverview,
    GemSummary,
    MethodInfo,
    ModuleEntry,
    NamespaceEntry,
    ObjectProjection,
    ParameterInfo,
    TagInfo,
)
from open_gemdocs.yard.render import render_object, render_overview


def _overview() -> GemOverview:
    return GemOverview(
        gem="widgetry",
        summary=GemSummary(version="2.1.0", homepage="https://example.org/widgetry", description="Widgets."),
        namespaces=[NamespaceEntry(name="Widgetry", path="Widgetry", type="module")],
        classes=[
            ClassEntry(
                name="Gadget",
                path="Widgetry::Gadget",
                namespace="Widgetry",
                superclass="Object",
                docstring="Spins.\n\n  Fast   and " + "y" * 150,
                methods_count=4,
            )
        ],
        modules=[ModuleEntry(name="Widgetry", path="Widgetry", methods_count=1)],
    )


class TestRenderOverview:
    def test_header_and_metadata(self) -> None:
        text = render_overview(_overview())

        assert text.startswith("# widgetry\n")
        assert "**Version:** 2.1.0" in text
        assert "**Homepage:** https://example.org/widgetry" in text
        assert "Widgets." in text

    def test_sections(self) -> None:
        text = render_overview(_overview())

        assert "## Top-level Namespaces" in text
        assert "- `Widgetry` (module)" in text
        assert "## Classes" in text
        assert "- `Widgetry::Gadget < Object` (4 methods)" in text
        assert "## Modules" in text
        assert "- `Widgetry` (1 methods)" in text

    def test_docstring_collapsed_and_truncated(self) -> None:
        text = render_overview(_overview())

        line = next(line for line in text.splitlines() if line.startswith("  Spins."))
        assert line.startswith("  Spins. Fast and yyy")
        assert line.endswith("...")
        assert len(line.strip()) == 103

    def test_short_docstring_untouched(self) -> None:
        overview = GemOverview(
            gem="tiny",
            modules=[ModuleEntry(name="Tiny", path="Tiny", docstring="Small.", methods_count=0)],
        )

        assert "  Small.\n" in render_overview(overview)

    def test_empty_sections_omitted(self) -> None:
        text = render_overview(GemOverview(gem="empty"))

        assert text == "# empty"


class TestRenderObject:
    def test_class(self) -> None:
        obj = ObjectProjection(
            name="Gadget",
            path="Widgetry::Gadget",
            type="class",
            namespace="Widgetry",
            docstring="A spinning gadget.",
            superclass="Object",
            includes=["Comparable"],
            extends=["Widgetry::Registry"],
            methods=[
                MethodInfo(name="secret", path="Widgetry::Gadget#secret", signature="def secret", visibility="private"),
                MethodInfo(
                    name="spin",
                    path="Widgetry::Gadget#spin",
                    signature="def spin(speed = 1)",
                    docstring="Spin it.",
                    return_type=["Boolean"],
                ),
                MethodInfo(name="guard", path="Widgetry::Gadget#guard", visibility="protected"),
            ],
            attributes=[
                AttributeInfo(name="name", read=True, write=True, docstring="The name."),
                AttributeInfo(name="size", read=True, write=False),
            ],
            tags=[TagInfo(tag_name="example", name="Spinning", text="Gadget.new.spin")],
        )

        text = render_object(obj)

        assert text.startswith("# Widgetry::Gadget\n")
        assert "**Type:** class" in text
        assert "**Namespace:** Widgetry" in text
        assert "## Description\nA spinning gadget." in text
        assert "**Inherits from:** Object" in text
        assert "**Includes:** Comparable" in text
        assert "**Extends:** Widgetry::Registry" in text
        assert "- `def spin(speed = 1)` → Boolean" in text
        assert "  Spin it." in text
        assert "- `name` (read/write)" in text
        assert "- `size` (read)" in text
        assert "**Spinning**\n```ruby\nGadget.new.spin\n```" in text

    def test_methods_grouped_by_visibility(self) -> None:
        obj = ObjectProjection(
            name="Gadget",
            path="Gadget",
            type="class",
            methods=[
                MethodInfo(name="c", path="Gadget#c", visibility="private"),
                MethodInfo(name="b", path="Gadget#b", visibility="protected"),
                MethodInfo(name="a", path="Gadget#a"),
            ],
        )

        text = render_object(obj)

        public = text.index("### Public Methods")
        protected = text.index("### Protected Methods")
        private = text.index("### Private Methods")
        assert public < protected < private
        assert text.index("- `a`") < protected

    def test_method(self) -> None:
        obj = ObjectProjection(
            name="spin",
            path="Widgetry::Gadget#spin",
            type="method",
            signature="def spin(speed = 1, force)",
            parameters=[ParameterInfo(name="speed", default="1"), ParameterInfo(name="force")],
            visibility="public",
            scope="instance",
        )

        text = render_object(obj)

        assert "## Signature\n`def spin(speed = 1, force)`" in text
        assert "## Parameters\n- `speed = 1`\n- `force`" in text
        assert "## Methods" not in text
        assert "## Description" not in text
