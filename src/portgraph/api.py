"""Public API: use portgraph from Python or from other tools."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from portgraph.core.closure import ClosureMap, build_closure
from portgraph.core.finder import find_ports_root
from portgraph.core.parser import PortInfo
from portgraph.core.registry import Registry, load_registry
from portgraph.core.render import render


def open_registry(ports_root: Path | str | None = None) -> Registry | None:
    """
    Load every port of the ports tree.

    The tree is ``ports_root`` if given, otherwise it is looked up from
    PORTGRAPH_PORTS, $VCPKG_ROOT/ports or ./ports.
    Returns None if no ports tree is found.
    """
    root = find_ports_root(ports_root)
    if root is None:
        return None
    return load_registry(root)


def list_known_ports(ports_root: Path | str | None = None) -> dict[str, Path]:
    """
    List all ports of the ports tree.

    Returns a mapping from port name to the file it was parsed from
    (empty if no ports tree is found).
    """
    registry = open_registry(ports_root)
    if registry is None:
        return {}
    return {port.name: port.path for port in sorted(registry, key=lambda p: p.name)}


def get_port_info(
    name: str,
    *,
    ports_root: Path | str | None = None,
) -> PortInfo | None:
    """Get metadata and dependencies of a port, or None if it is unknown."""
    registry = open_registry(ports_root)
    if registry is None:
        return None
    return registry.find_by_name(name)


def get_closure(
    roots: Sequence[str] = (),
    *,
    ports_root: Path | str | None = None,
    strict: bool = False,
) -> ClosureMap | None:
    """
    Build the dependency closure of ``roots`` (all ports if empty).

    Returns None if no ports tree is found. Raises UnknownPackageError only
    when ``strict`` is set.
    """
    registry = open_registry(ports_root)
    if registry is None:
        return None
    return build_closure(roots, registry, strict=strict)


def depend_info(
    roots: Sequence[str],
    registry: Registry,
    *,
    fmt: str = "text",
    strict: bool = False,
) -> str:
    """
    Build the closure of ``roots`` over ``registry`` and render it.

    Args:
        roots: Package names to start from; empty lists the whole registry.
        registry: Loaded ports.
        fmt: One of "text", "dot", "dgml", "mermaid", "json".
        strict: If True, unknown names raise UnknownPackageError.

    Returns:
        The rendered graph or listing.
    """
    closure = build_closure(roots, registry, strict=strict)
    return render(closure, registry, fmt)
