"""Render registry projections as Markdown for ``fetch_gem_docs``."""

from __future__ import annotations

from open_gemdocs.yard.models import GemOverview, MethodInfo, ObjectProjection

VISIBILITY_ORDER = ("public", "protected", "private")
SUMMARY_LENGTH = 100


def _truncate(text: str, max_len: int = SUMMARY_LENGTH) -> str:
    flat = " ".join(text.split())
    if len(flat) <= max_len:
        return flat
    return flat[:max_len] + "..."


def render_overview(overview: GemOverview) -> str:
    """Markdown summary of a gem: metadata, namespaces, classes and modules."""
    lines = [f"# {overview.gem}"]

    summary = overview.summary
    if summary.version or summary.homepage or summary.description:
        lines.append("")
        if summary.version:
            lines.append(f"**Version:** {summary.version}")
        if summary.homepage:
            lines.append(f"**Homepage:** {summary.homepage}")
        lines.append("")
        if summary.description:
            lines.append(summary.description)
            lines.append("")

    if overview.namespaces:
        lines.append("## Top-level Namespaces")
        for ns in overview.namespaces:
            lines.append(f"- `{ns.path}` ({ns.type})")
        lines.append("")

    if overview.classes:
        lines.append("## Classes")
        for cls in overview.classes:
            parent = f" < {cls.superclass}" if cls.superclass else ""
            lines.append(f"- `{cls.path}{parent}` ({cls.methods_count} methods)")
            if cls.docstring:
                lines.append(f"  {_truncate(cls.docstring)}")
        lines.append("")

    if overview.modules:
        lines.append("## Modules")
        for mod in overview.modules:
            lines.append(f"- `{mod.path}` ({mod.methods_count} methods)")
            if mod.docstring:
                lines.append(f"  {_truncate(mod.docstring)}")
        lines.append("")

    return "\n".join(lines)


def _method_line(method: MethodInfo) -> str:
    returns = f" → {', '.join(method.return_type)}" if method.return_type else ""
    return f"- `{method.signature or method.name}`{returns}"


def render_object(obj: ObjectProjection) -> str:
    """Markdown documentation of a single class, module or method."""
    lines = [f"# {obj.path}", "", f"**Type:** {obj.type}"]
    if obj.namespace:
        lines.append(f"**Namespace:** {obj.namespace}")
    lines.append("")

    if obj.docstring:
        lines.extend(["## Description", obj.docstring, ""])

    if obj.superclass:
        lines.extend([f"**Inherits from:** {obj.superclass}", ""])

    if obj.includes:
        lines.extend([f"**Includes:** {', '.join(obj.includes)}", ""])

    if obj.extends:
        lines.extend([f"**Extends:** {', '.join(obj.extends)}", ""])

    if obj.signature:
        lines.extend(["## Signature", f"`{obj.signature}`", ""])

    if obj.parameters:
        lines.append("## Parameters")
        for param in obj.parameters:
            default = f" = {param.default}" if param.default else ""
            lines.append(f"- `{param.name}{default}`")
        lines.append("")

    if obj.methods:
        lines.append("## Methods")
        for visibility in VISIBILITY_ORDER:
            group = [m for m in obj.methods if m.visibility == visibility]
            if not group:
                continue
            lines.append("")
            lines.append(f"### {visibility.capitalize()} Methods")
            for method in group:
                lines.append(_method_line(method))
                if method.docstring:
                    lines.append(f"  {method.docstring}")
        lines.append("")

    if obj.attributes:
        lines.append("## Attributes")
        for attr in obj.attributes:
            access = "/".join(mode for mode, on in (("read", attr.read), ("write", attr.write)) if on)
            lines.append(f"- `{attr.name}` ({access})")
            if attr.docstring:
                lines.append(f"  {attr.docstring}")
        lines.append("")

    examples = [tag for tag in obj.tags if tag.tag_name == "example"]
    if examples:
        lines.append("## Examples")
        for example in examples:
            if example.name:
                lines.append(f"**{example.name}**")
            lines.extend(["```ruby", example.text or "", "```"])
        lines.append("")

    return "\n".join(lines)
