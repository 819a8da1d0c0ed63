"""Render closure maps as text, DOT, DGML, Mermaid or JSON."""

from __future__ import annotations

import json
from xml.sax.saxutils import escape

from portgraph.core.closure import ClosureMap
from portgraph.core.registry import Registry

FORMATS = ("text", "dot", "dgml", "mermaid", "json")

DOT_HEADER = "digraph G{ rankdir=LR; edge [minlen=3]; overlap=false;"
DGML_HEADER = '<?xml version="1.0" encoding="utf-8"?>'
DGML_NAMESPACE = "http://schemas.microsoft.com/vs/2009/dgml"


def _sorted_items(closure: ClosureMap) -> list[tuple[str, list[str]]]:
    return sorted(closure.items())


def dot_id(name: str) -> str:
    """Bare DOT identifiers cannot contain dashes."""
    return name.replace("-", "_")


def mermaid_id(name: str) -> str:
    """Convert a package name to a valid Mermaid node ID."""
    return name.replace("-", "_").replace(".", "_")


def _xml_attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


def render_text(closure: ClosureMap) -> str:
    """One ``name: dep1, dep2`` line per package."""
    return "\n".join(f"{name}: {', '.join(deps)}" for name, deps in _sorted_items(closure))


def render_dot(closure: ClosureMap) -> str:
    """
    Render a left-to-right Graphviz digraph on a single line.

    Packages without dependencies are not drawn; they are counted into one
    trailing ``empty`` node labelled ``"<N> singletons..."``.
    """
    parts = [DOT_HEADER]
    singletons = 0
    for name, deps in _sorted_items(closure):
        if not deps:
            singletons += 1
            continue
        node = dot_id(name)
        parts.append(f"{node};")
        for dep in deps:
            parts.append(f"{node} -> {dot_id(dep)};")
    parts.append(f'empty [label="{singletons} singletons..."]; }}')
    return "".join(parts)


def render_dgml(closure: ClosureMap, registry: Registry) -> str:
    """
    Render a DGML DirectedGraph on a single line.

    Every package gets a node under its original name. Links cover core
    dependencies followed by each feature's dependencies, as listed in the
    registry; link targets are not checked against the node set.
    """
    nodes: list[str] = []
    links: list[str] = []
    for name, deps in _sorted_items(closure):
        source = _xml_attr(name)
        nodes.append(f'<Node Id="{source}" />')
        targets = list(deps)
        port = registry.find_by_name(name)
        if port is not None:
            targets.extend(port.feature_dependencies())
        for dep in targets:
            links.append(f'<Link Source="{source}" Target="{_xml_attr(dep)}" />')

    return "".join(
        [
            DGML_HEADER,
            f'<DirectedGraph xmlns="{DGML_NAMESPACE}">',
            "<Nodes>",
            *nodes,
            "</Nodes>",
            "<Links>",
            *links,
            "</Links>",
            "</DirectedGraph>",
        ]
    )


def render_mermaid(closure: ClosureMap) -> str:
    """Render a Mermaid left-to-right flowchart."""
    lines = ["graph LR"]
    for name in sorted(closure):
        lines.append(f"    {mermaid_id(name)}[{name}]")
    for name, deps in _sorted_items(closure):
        for dep in deps:
            lines.append(f"    {mermaid_id(name)} --> {mermaid_id(dep)}")
    return "\n".join(lines)


def render_json(closure: ClosureMap) -> str:
    return json.dumps(dict(_sorted_items(closure)), indent=2)


def render(closure: ClosureMap, registry: Registry, fmt: str = "text") -> str:
    """Render ``closure`` in one of FORMATS."""
    if fmt == "text":
        return render_text(closure)
    if fmt == "dot":
        return render_dot(closure)
    if fmt == "dgml":
        return render_dgml(closure, registry)
    if fmt == "mermaid":
        return render_mermaid(closure)
    if fmt == "json":
        return render_json(closure)
    raise ValueError(f"Unknown output format: {fmt!r} (expected one of {', '.join(FORMATS)})")
