"""Tests for portgraph.api module."""

from __future__ import annotations

import os
import re
from pathlib import Path
from unittest import mock

import pytest

import portgraph
from portgraph.api import (
    depend_info,
    get_closure,
    get_port_info,
    list_known_ports,
    open_registry,
)
from portgraph.core.closure import UnknownPackageError


class TestModuleExports:
    """Tests for portgraph module-level exports."""

    def test_version_is_string(self) -> None:
        assert isinstance(portgraph.__version__, str)

    def test_version_format(self) -> None:
        pattern = r"^\d+\.\d+\.\d+(\+.+)?$"
        assert re.match(pattern, portgraph.__version__), f"Invalid version: {portgraph.__version__}"

    def test_all_exports(self) -> None:
        for name in portgraph.__all__:
            assert hasattr(portgraph, name)


class TestOpenRegistry:
    def test_explicit_root(self, ports_root: Path) -> None:
        registry = open_registry(ports_root)
        assert registry is not None
        assert "curl" in registry

    def test_env_root(self, ports_root: Path) -> None:
        with mock.patch.dict(os.environ, {"PORTGRAPH_PORTS": str(ports_root)}):
            registry = open_registry()
        assert registry is not None
        assert len(registry) == 6

    def test_no_ports_tree(self, tmp_path: Path) -> None:
        assert open_registry(tmp_path / "missing") is None


class TestListKnownPorts:
    def test_names_to_paths(self, ports_root: Path) -> None:
        ports = list_known_ports(ports_root)
        assert list(ports) == ["app-core", "curl", "openssl", "ping", "pong", "zlib"]
        assert ports["zlib"] == (ports_root / "zlib" / "CONTROL").resolve()

    def test_no_ports_tree(self, tmp_path: Path) -> None:
        assert list_known_ports(tmp_path / "missing") == {}


class TestGetPortInfo:
    def test_found(self, ports_root: Path) -> None:
        info = get_port_info("curl", ports_root=ports_root)
        assert info is not None
        assert info.version == "7.61.1"

    def test_unknown(self, ports_root: Path) -> None:
        assert get_port_info("ghost", ports_root=ports_root) is None

    def test_no_ports_tree(self, tmp_path: Path) -> None:
        assert get_port_info("curl", ports_root=tmp_path / "missing") is None


class TestGetClosure:
    def test_from_root(self, ports_root: Path) -> None:
        closure = get_closure(["app-core"], ports_root=ports_root)
        assert closure == {"app-core": ["curl", "ghost"], "curl": ["zlib"], "zlib": []}

    def test_cycle(self, ports_root: Path) -> None:
        assert get_closure(["ping"], ports_root=ports_root) == {"ping": ["pong"], "pong": ["ping"]}

    def test_all(self, ports_root: Path) -> None:
        closure = get_closure(ports_root=ports_root)
        assert closure is not None
        assert len(closure) == 6

    def test_strict(self, ports_root: Path) -> None:
        with pytest.raises(UnknownPackageError):
            get_closure(["app-core"], ports_root=ports_root, strict=True)

    def test_no_ports_tree(self, tmp_path: Path) -> None:
        assert get_closure(["a"], ports_root=tmp_path / "missing") is None


class TestDependInfo:
    def test_text(self, ports_root: Path) -> None:
        registry = open_registry(ports_root)
        assert depend_info(["curl"], registry) == "curl: zlib\nzlib: "

    def test_dgml_includes_feature_edges(self, ports_root: Path) -> None:
        registry = open_registry(ports_root)
        output = depend_info(["curl"], registry, fmt="dgml")
        assert '<Link Source="curl" Target="zlib" />' in output
        assert '<Link Source="curl" Target="openssl" />' in output
        assert '<Node Id="openssl" />' not in output

    def test_dot(self, ports_root: Path) -> None:
        registry = open_registry(ports_root)
        output = depend_info(["app-core"], registry, fmt="dot")
        assert "app_core;app_core -> curl;app_core -> ghost;" in output
        assert '"1 singletons..."' in output
