"""Parse port definitions (CONTROL paragraphs or vcpkg.json manifests)."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CONTROL_FILE = "CONTROL"
MANIFEST_FILE = "vcpkg.json"

# Leading name of a dependency declaration, e.g. "curl" in "curl[ssl] (!uwp)".
_DEPENDENCY_NAME = re.compile(r"^\s*([^\s\[(,]+)")


@dataclass
class PortInfo:
    """Metadata and dependencies of one port."""

    name: str
    version: str
    description: str
    path: Path
    dependencies: list[str]  # core dependencies, declaration order
    features: dict[str, list[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Drop repeated names, keep the first occurrence
        self.dependencies = list(dict.fromkeys(self.dependencies))
        self.features = {
            feature: list(dict.fromkeys(deps)) for feature, deps in self.features.items()
        }

    def feature_dependencies(self) -> list[str]:
        """All feature-scoped dependency names, features in declaration order."""
        return [dep for deps in self.features.values() for dep in deps]

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dict."""
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "path": str(self.path),
            "dependencies": list(self.dependencies),
            "features": {k: list(v) for k, v in self.features.items()},
        }


def dependency_name(declaration: str) -> str | None:
    """
    Extract the port name from a dependency declaration.

    The feature list and the platform qualifier are dropped:
    ``"curl[ssl]"`` -> ``"curl"``, ``"openssl (!windows)"`` -> ``"openssl"``.
    Returns None for an empty declaration.
    """
    match = _DEPENDENCY_NAME.match(declaration)
    if match is None:
        return None
    return match.group(1)


def _split_dependency_list(value: str) -> list[str]:
    """Split a comma-separated Build-Depends value into port names."""
    names = []
    # Commas inside a platform qualifier or feature list are not separators
    depth = 0
    current = []
    for ch in value:
        if ch in "[(":
            depth += 1
        elif ch in "])":
            depth = max(depth - 1, 0)
        if ch == "," and depth == 0:
            names.append("".join(current))
            current = []
        else:
            current.append(ch)
    names.append("".join(current))
    return [n for n in (dependency_name(d) for d in names) if n]


def parse_paragraphs(text: str) -> list[dict[str, str]]:
    """
    Split CONTROL text into paragraphs of ``Field: value`` pairs.

    Paragraphs are separated by blank lines, lines starting with ``#`` are
    comments and lines starting with whitespace continue the previous field.
    """
    paragraphs: list[dict[str, str]] = []
    current: dict[str, str] = {}
    last_field: str | None = None

    for raw in text.splitlines():
        if raw.startswith("#"):
            continue
        if not raw.strip():
            if current:
                paragraphs.append(current)
            current = {}
            last_field = None
            continue
        if raw[0] in " \t":
            if last_field is None:
                raise ValueError(f"continuation line without a field: {raw!r}")
            current[last_field] = f"{current[last_field]}\n{raw.strip()}".strip()
            continue
        key, sep, value = raw.partition(":")
        if not sep:
            raise ValueError(f"expected 'Field: value', got {raw!r}")
        last_field = key.strip()
        current[last_field] = value.strip()

    if current:
        paragraphs.append(current)
    return paragraphs


def parse_control_file(path: Path) -> PortInfo | None:
    """
    Parse a CONTROL file.

    The first paragraph describes the port (``Source``, ``Version``,
    ``Description``, ``Build-Depends``); every following paragraph with a
    ``Feature`` field declares an optional feature and its ``Build-Depends``.
    Returns None if the file cannot be read or has no ``Source`` field.
    """
    if not path.exists() or not path.is_file():
        return None
    try:
        paragraphs = parse_paragraphs(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning("Cannot parse %s: %s", path, e)
        return None
    if not paragraphs:
        return None

    core = paragraphs[0]
    name = core.get("Source", "").strip()
    if not name:
        return None

    features: dict[str, list[str]] = {}
    for paragraph in paragraphs[1:]:
        feature = paragraph.get("Feature", "").strip()
        if not feature:
            continue
        features[feature] = _split_dependency_list(paragraph.get("Build-Depends", ""))

    return PortInfo(
        name=name,
        version=core.get("Version", ""),
        description=core.get("Description", ""),
        path=path.resolve(),
        dependencies=_split_dependency_list(core.get("Build-Depends", "")),
        features=features,
    )


def _manifest_dependencies(entries: object) -> list[str]:
    """
    Names from a manifest "dependencies" array (strings or objects).

    Raises ValueError if the array or one of its entries has the wrong shape.
    """
    if not isinstance(entries, list):
        raise ValueError(f"\"dependencies\" must be a list, got {type(entries).__name__}")
    names = []
    for entry in entries:
        if isinstance(entry, dict):
            entry = entry.get("name")
        if not isinstance(entry, str):
            raise ValueError(f"dependency name must be a string, got {entry!r}")
        name = dependency_name(entry)
        if name:
            names.append(name)
    return names


def parse_manifest_file(path: Path) -> PortInfo | None:
    """
    Parse a vcpkg.json manifest.

    Returns None if the file cannot be read, is not a JSON object, has no
    ``name`` or declares dependencies or features with the wrong shape.
    """
    if not path.exists() or not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Cannot parse %s: %s", path, e)
        return None
    if not isinstance(data, dict) or not data.get("name"):
        return None
    try:
        return _port_from_manifest(path, data)
    except ValueError as e:
        logger.warning("Cannot parse %s: %s", path, e)
        return None


def _port_from_manifest(path: Path, data: dict) -> PortInfo:
    if not isinstance(data["name"], str):
        raise ValueError(f"\"name\" must be a string, got {data['name']!r}")

    version = ""
    for key in ("version", "version-string", "version-semver", "version-date"):
        if data.get(key):
            version = str(data[key])
            break
    description = data.get("description", "")
    if isinstance(description, list):
        description = "\n".join(str(line) for line in description)

    raw_features = data.get("features") or {}
    if not isinstance(raw_features, dict):
        raise ValueError(f"\"features\" must be an object, got {type(raw_features).__name__}")
    features: dict[str, list[str]] = {}
    for feature, body in raw_features.items():
        deps = body.get("dependencies", []) if isinstance(body, dict) else []
        features[feature] = _manifest_dependencies(deps)

    return PortInfo(
        name=data["name"],
        version=version,
        description=str(description),
        path=path.resolve(),
        dependencies=_manifest_dependencies(data.get("dependencies", [])),
        features=features,
    )


def parse_port(port_dir: Path) -> PortInfo | None:
    """Parse the port in ``port_dir``; vcpkg.json is preferred over CONTROL."""
    manifest = port_dir / MANIFEST_FILE
    if manifest.is_file():
        return parse_manifest_file(manifest)
    return parse_control_file(port_dir / CONTROL_FILE)
