"""Core library: port parsing, registry loading, closure building, rendering."""

from portgraph.core.closure import (
    ClosureMap,
    PortGraphError,
    UnknownPackageError,
    build_closure,
)
from portgraph.core.finder import find_ports_root, list_port_dirs
from portgraph.core.parser import PortInfo, parse_port
from portgraph.core.registry import Registry, load_registry
from portgraph.core.render import FORMATS, render

__all__ = [
    "ClosureMap",
    "PortGraphError",
    "UnknownPackageError",
    "build_closure",
    "find_ports_root",
    "list_port_dirs",
    "PortInfo",
    "parse_port",
    "Registry",
    "load_registry",
    "FORMATS",
    "render",
]
