"""Reading package.json manifests.

Manifests are read fresh on every call. Two directories may hold different
versions of a same-named package, and a directory may change between runs.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from .errors import ManifestError
from .models import Manifest

MANIFEST_FILENAME = "package.json"


def manifest_path(directory: Union[str, Path]) -> Path:
    return Path(directory) / MANIFEST_FILENAME


def read_manifest(directory: Union[str, Path]) -> Manifest:
    """
    Read the manifest of a package directory.

    Args:
        directory: Package directory containing package.json

    Returns:
        Parsed Manifest

    Raises:
        ManifestError: If the file is missing, unreadable or malformed
    """
    path = manifest_path(directory)
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        raise ManifestError(path, "file not found") from None
    except json.JSONDecodeError as e:
        raise ManifestError(path, f"invalid JSON ({e.msg} at line {e.lineno})") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(path, f"cannot read file ({e})") from e

    return parse_manifest(data, directory)


def parse_manifest(data: Any, directory: Union[str, Path]) -> Manifest:
    """Validate decoded package.json content and build a Manifest."""
    path = manifest_path(directory)
    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value is not an object")

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ManifestError(path, "missing package name")

    version = data.get("version")
    if version is not None and not isinstance(version, str):
        raise ManifestError(path, "version is not a string")

    dependencies = data.get("dependencies") or {}
    if not isinstance(dependencies, dict):
        raise ManifestError(path, "dependencies is not an object")
    for dep_name, dep_range in dependencies.items():
        if not isinstance(dep_range, str):
            raise ManifestError(path, f"dependency {dep_name!r} has a non-string range")

    return Manifest(
        name=name,
        path=Path(directory),
        version=version,
        dependencies=dict(dependencies),
    )
