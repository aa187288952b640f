"""
Workspace dependency materialization.

This package handles:
1. Discovering the workspace packages of a monorepo
2. Linking hoisted dependencies into each workspace package
3. Copying local (sibling workspace) dependencies in place of links
4. Cleaning up links and copies afterwards
"""

from .cleaner import Cleaner
from .errors import (
    ConfigError,
    DiscoveryError,
    LinkCollisionError,
    ManifestError,
    MonopackError,
    UnknownHookError,
)
from .linker import DependencyLinker
from .manifest import read_manifest
from .materializer import MARKER_FILENAME, WorkspaceMaterializer
from .models import CleanupReport, Manifest, Workspace
from .registry import WorkspaceRegistry
from .resolution import resolve_package_dir

__all__ = [
    "Cleaner",
    "CleanupReport",
    "ConfigError",
    "DependencyLinker",
    "DiscoveryError",
    "LinkCollisionError",
    "MARKER_FILENAME",
    "Manifest",
    "ManifestError",
    "MonopackError",
    "UnknownHookError",
    "Workspace",
    "WorkspaceMaterializer",
    "WorkspaceRegistry",
    "read_manifest",
    "resolve_package_dir",
]
