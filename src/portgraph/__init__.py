"""portgraph: list and graph port dependency closures (library, CLI, TUI, HTTP)."""

from importlib.metadata import version, PackageNotFoundError

from portgraph.api import (
    depend_info,
    get_closure,
    get_port_info,
    list_known_ports,
    open_registry,
)
from portgraph.core.closure import PortGraphError, UnknownPackageError

__all__ = [
    "depend_info",
    "get_closure",
    "get_port_info",
    "list_known_ports",
    "open_registry",
    "PortGraphError",
    "UnknownPackageError",
    "__version__",
]

try:
    __version__ = version("portgraph")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed as package
