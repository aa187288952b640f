"""Nearest-ancestor node_modules lookup.

Mirrors the host runtime's module resolution for package directories:
starting at a directory, each ancestor's ``node_modules`` is searched in turn
and the first one holding ``<name>/package.json`` wins. The result is the
real path of the package directory, so a workspace package reached through a
root ``node_modules`` symlink resolves to its own location.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, Optional, Union

from .manifest import MANIFEST_FILENAME

DEPS_DIRNAME = "node_modules"


def lookup_paths(start_dir: Union[str, Path]) -> Iterator[Path]:
    """Yield candidate node_modules directories from ``start_dir`` upwards."""
    current = Path(os.path.abspath(start_dir))
    while True:
        if current.name != DEPS_DIRNAME:
            yield current / DEPS_DIRNAME
        if current.parent == current:
            return
        current = current.parent


def resolve_package_dir(name: str, start_dir: Union[str, Path]) -> Optional[Path]:
    """
    Resolve the installed directory of a dependency.

    Args:
        name: Dependency name, possibly scoped (``@scope/pkg``)
        start_dir: Directory the lookup starts from

    Returns:
        Real path of the package directory, or None when it is not installed
    """
    for deps_dir in lookup_paths(start_dir):
        candidate = deps_dir / name
        if (candidate / MANIFEST_FILENAME).is_file():
            return Path(os.path.realpath(candidate))
    return None
