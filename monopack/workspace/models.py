"""
Workspace dataclasses for monopack.

This module contains dataclasses that are shared by the registry, the
linker, the materializer and the cleaner to avoid circular import issues.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Workspace:
    """A workspace package as reported by the package manager."""
    name: str
    location: str  # Relative to the service root


@dataclass
class Manifest:
    """Declared metadata of a package directory (package.json)."""
    name: str
    path: Path                   # Directory holding the manifest
    version: Optional[str] = None
    dependencies: Dict[str, str] = field(default_factory=dict)  # name -> range, never interpreted

    @property
    def identifier(self) -> str:
        """Return the ``name@version`` identifier used by the link walk."""
        return f"{self.name}@{self.version if self.version is not None else ''}"

    def dependency_names(self) -> List[str]:
        return list(self.dependencies.keys())


@dataclass
class CleanupReport:
    """What a cleanup pass removed from one workspace."""
    workspace: str
    unlinked: List[str] = field(default_factory=list)  # Symlink paths
    removed: List[str] = field(default_factory=list)   # Marker-tagged copy roots

    @property
    def empty(self) -> bool:
        return not self.unlinked and not self.removed
