"""Build dependency closures over a Registry."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence

from portgraph.core.registry import Registry

logger = logging.getLogger(__name__)

ClosureMap = dict[str, list[str]]


class PortGraphError(Exception):
    """Base class for portgraph errors."""


class UnknownPackageError(PortGraphError):
    """Raised in strict mode when roots or dependencies are not in the registry."""

    def __init__(self, names: Sequence[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Unknown package(s): {', '.join(self.names)}")


def build_closure(
    roots: Sequence[str],
    registry: Registry,
    *,
    strict: bool = False,
) -> ClosureMap:
    """
    Map package names to their direct dependencies.

    With no roots every package in the registry is listed. With roots, only
    the packages reachable from them are listed. A name is marked seen before
    it is queued, so each name is looked up once and cycles terminate.
    Names missing from the registry get no key.

    Args:
        roots: Names to start from; empty means the whole registry.
        registry: Ports to resolve names against.
        strict: If True, raise UnknownPackageError when any reached name is
            not in the registry instead of skipping it.

    Returns:
        Mapping ordered by name; dependency lists keep declaration order.
    """
    if not roots:
        ports = sorted(registry, key=lambda p: p.name)
        return {port.name: list(port.dependencies) for port in ports}

    closure: ClosureMap = {}
    unknown: list[str] = []
    seen: set[str] = set()
    pending: deque[str] = deque()

    for name in roots:
        if name not in seen:
            seen.add(name)
            pending.append(name)

    while pending:
        name = pending.popleft()
        port = registry.find_by_name(name)
        if port is None:
            logger.debug("Not in registry, skipping: %s", name)
            unknown.append(name)
            continue
        closure[name] = list(port.dependencies)
        for dep in port.dependencies:
            if dep not in seen:
                seen.add(dep)
                pending.append(dep)

    if strict and unknown:
        raise UnknownPackageError(unknown)

    return dict(sorted(closure.items()))
