"""Locate the ports tree and the port directories inside it."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from portgraph.core.parser import CONTROL_FILE, MANIFEST_FILE

logger = logging.getLogger(__name__)

# Environment variables consulted, in order, when no ports root is given.
PORTS_ENV = "PORTGRAPH_PORTS"
VCPKG_ROOT_ENV = "VCPKG_ROOT"


def _env_path(env_var: str) -> Path | None:
    """Return the directory named by an environment variable, if it exists."""
    value = os.environ.get(env_var, "").strip()
    if not value:
        return None
    p = Path(value).expanduser()
    return p.resolve() if p.is_dir() else None


def find_ports_root(explicit: Path | str | None = None) -> Path | None:
    """
    Find the directory holding one sub-directory per port.

    Searches in order:
    1. ``explicit`` (e.g. the ``--ports`` command-line option).
    2. ``PORTGRAPH_PORTS``.
    3. ``$VCPKG_ROOT/ports``.
    4. ``./ports`` in the current working directory.

    Only existing directories are accepted. An explicit path that does not
    exist is not replaced by a fallback. Returns None if nothing matches.
    """
    if explicit is not None:
        p = Path(explicit).expanduser()
        return p.resolve() if p.is_dir() else None

    env_root = _env_path(PORTS_ENV)
    if env_root is not None:
        return env_root

    vcpkg_root = _env_path(VCPKG_ROOT_ENV)
    if vcpkg_root is not None and (vcpkg_root / "ports").is_dir():
        return (vcpkg_root / "ports").resolve()

    local = Path.cwd() / "ports"
    if local.is_dir():
        return local.resolve()
    return None


def is_port_dir(path: Path) -> bool:
    """True if ``path`` contains a CONTROL file or a vcpkg.json manifest."""
    return (path / MANIFEST_FILE).is_file() or (path / CONTROL_FILE).is_file()


def list_port_dirs(ports_root: Path) -> list[Path]:
    """List port directories under ``ports_root``, sorted by directory name."""
    if not ports_root.exists() or not ports_root.is_dir():
        return []
    dirs = []
    try:
        children = list(ports_root.iterdir())
    except PermissionError as e:
        logger.warning("Cannot list ports directory %s: %s", ports_root, e)
        return []
    for child in children:
        if child.name.startswith("."):
            continue
        try:
            if child.is_dir() and is_port_dir(child):
                dirs.append(child)
        except PermissionError as e:
            logger.warning("Skipping unreadable port directory %s: %s", child, e)
    return sorted(dirs, key=lambda p: p.name)
