"""Shared fixtures: small ports trees on disk and in memory."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from portgraph.core.parser import PortInfo
from portgraph.core.registry import Registry


def make_port(name: str, deps: list[str] | None = None, **features: list[str]) -> PortInfo:
    """Build an in-memory PortInfo."""
    return PortInfo(
        name=name,
        version="1.0",
        description="",
        path=Path(f"/ports/{name}/CONTROL"),
        dependencies=deps or [],
        features=dict(features),
    )


def make_registry(deps_by_name: dict[str, list[str]]) -> Registry:
    """Registry from a ``{name: [deps]}`` mapping."""
    return Registry(make_port(name, deps) for name, deps in deps_by_name.items())


@pytest.fixture
def write_control(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``<tmp>/ports/<dir>/CONTROL`` and return the ports root."""
    root = tmp_path / "ports"
    root.mkdir(exist_ok=True)

    def _write(port_dir: str, text: str) -> Path:
        d = root / port_dir
        d.mkdir(exist_ok=True)
        (d / "CONTROL").write_text(text)
        return root

    return _write


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[[str, dict], Path]:
    """Write ``<tmp>/ports/<dir>/vcpkg.json`` and return the ports root."""
    root = tmp_path / "ports"
    root.mkdir(exist_ok=True)

    def _write(port_dir: str, data: dict) -> Path:
        d = root / port_dir
        d.mkdir(exist_ok=True)
        (d / "vcpkg.json").write_text(json.dumps(data))
        return root

    return _write


@pytest.fixture
def ports_root(write_control: Callable[[str, str], Path]) -> Path:
    """A ports tree with a feature, a cycle, a dangling dependency and a singleton."""
    write_control(
        "curl",
        "Source: curl\n"
        "Version: 7.61.1\n"
        "Build-Depends: zlib\n"
        "Description: A library for transferring data with URLs\n"
        "\n"
        "Feature: ssl\n"
        "Build-Depends: openssl (!uwp)\n"
        "Description: SSL support\n",
    )
    write_control("zlib", "Source: zlib\nVersion: 1.2.11\n")
    write_control("openssl", "Source: openssl\nVersion: 1.1.1\n")
    write_control("ping", "Source: ping\nVersion: 1\nBuild-Depends: pong\n")
    write_control("pong", "Source: pong\nVersion: 1\nBuild-Depends: ping\n")
    return write_control("app-core", "Source: app-core\nVersion: 2\nBuild-Depends: curl, ghost\n")


@pytest.fixture
def port_factory() -> Callable[..., PortInfo]:
    return make_port


@pytest.fixture
def registry_factory() -> Callable[[dict[str, list[str]]], Registry]:
    return make_registry
