"""Read-only, name-indexed view of all known ports."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from portgraph.core.finder import list_port_dirs
from portgraph.core.parser import PortInfo, parse_port

logger = logging.getLogger(__name__)


class Registry:
    """
    All ports loaded for one command.

    Lookups go through a dict keyed by port name. When two ports share a
    name the first one wins and the duplicate is logged.
    """

    def __init__(self, ports: Iterable[PortInfo] = ()) -> None:
        self._ports: list[PortInfo] = []
        self._by_name: dict[str, PortInfo] = {}
        for port in ports:
            if port.name in self._by_name:
                logger.warning(
                    "Duplicate port %s at %s (keeping %s)",
                    port.name,
                    port.path,
                    self._by_name[port.name].path,
                )
                continue
            self._by_name[port.name] = port
            self._ports.append(port)

    def find_by_name(self, name: str) -> PortInfo | None:
        """Return the port called ``name``, or None if it is unknown."""
        return self._by_name.get(name)

    def all_packages(self) -> list[PortInfo]:
        """All ports in load order."""
        return list(self._ports)

    def names(self) -> list[str]:
        """Sorted port names."""
        return sorted(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._ports)

    def __iter__(self) -> Iterator[PortInfo]:
        return iter(self._ports)


def load_registry(ports_root: Path) -> Registry:
    """
    Parse every port under ``ports_root`` into a Registry.

    Ports that cannot be parsed are logged and skipped.
    """
    ports: list[PortInfo] = []
    for port_dir in list_port_dirs(ports_root):
        info = parse_port(port_dir)
        if info is None:
            logger.warning("Skipping unreadable port: %s", port_dir)
            continue
        ports.append(info)
    logger.debug("Loaded %d port(s) from %s", len(ports), ports_root)
    return Registry(ports)
