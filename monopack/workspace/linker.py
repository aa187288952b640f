"""
Dependency linker.

Walks the dependency manifests of a workspace package recursively and links
every dependency hoisted at the root ``node_modules`` into the package's own
``node_modules``, so the package can be packaged on its own.
"""
import logging
import os
from pathlib import Path
from typing import Dict, List, Set, Union

from .errors import ConfigError, LinkCollisionError
from .manifest import read_manifest
from .models import Workspace
from .parallel import for_each_workspace
from .resolution import DEPS_DIRNAME, resolve_package_dir

logger = logging.getLogger(__name__)

ON_COLLISION_ABORT = "abort"
ON_COLLISION_CONTINUE = "continue"
ON_COLLISION_IGNORE = "ignore"
LINK_COLLISION_POLICIES = (ON_COLLISION_ABORT, ON_COLLISION_CONTINUE, ON_COLLISION_IGNORE)


class DependencyLinker:
    """Links hoisted dependencies into workspace packages."""

    def __init__(self, service_root: Union[str, Path], on_collision: str = ON_COLLISION_ABORT):
        """
        Initialize the linker.

        Args:
            service_root: Monorepo root holding the hoisted node_modules
            on_collision: What to do when a link path is already taken:
                'abort' raises, 'continue' gives up on the current workspace,
                'ignore' keeps walking
        """
        if on_collision not in LINK_COLLISION_POLICIES:
            raise ConfigError(
                f"Unknown link collision policy {on_collision!r} "
                f"(expected one of: {', '.join(LINK_COLLISION_POLICIES)})"
            )
        self.service_root = Path(os.path.realpath(service_root))
        self.root_deps_dir = self.service_root / DEPS_DIRNAME
        self.on_collision = on_collision
        self.linked: List[Path] = []

    def link_workspaces(self, workspaces: Dict[str, Workspace],
                        max_jobs: int = 1) -> Dict[str, Set[str]]:
        """Link every workspace; returns the visited identifiers per workspace."""
        return for_each_workspace(workspaces, self.link_workspace, max_jobs)

    def link_workspace(self, workspace: Workspace) -> Set[str]:
        """
        Link the full dependency closure of one workspace package.

        Each call starts with its own empty visited set; walks of different
        workspaces never share one.

        Args:
            workspace: Workspace to link

        Returns:
            The ``name@version`` identifiers visited by the walk
        """
        workspace_root = self.service_root / workspace.location
        resolved: Set[str] = set()
        logger.info("link: iterating over workspace %s", workspace.name)
        try:
            self.link_package(workspace_root, workspace_root, resolved)
        except LinkCollisionError as e:
            if self.on_collision != ON_COLLISION_CONTINUE:
                raise
            logger.warning("link: skipping rest of workspace %s: %s", workspace.name, e)
        return resolved

    def link_package(self, workspace_root: Path, directory: Path, resolved: Set[str]) -> None:
        """
        Link the dependencies of ``directory`` into ``workspace_root``, recursively.

        Args:
            workspace_root: Workspace package receiving the links
            directory: Package directory whose manifest is walked
            resolved: Identifiers already visited in this walk; updated in place
        """
        manifest = read_manifest(directory)
        if manifest.identifier in resolved:
            return
        resolved.add(manifest.identifier)

        for name in manifest.dependency_names():
            location = resolve_package_dir(name, directory)
            if location is None:
                logger.debug("link: %s not installed for %s, skipping", name, manifest.identifier)
                continue

            if location == self.root_deps_dir / name:
                self._link(location, Path(workspace_root) / DEPS_DIRNAME / name)

            self.link_package(workspace_root, location, resolved)

    def _link(self, target: Path, link_path: Path) -> None:
        link_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            os.symlink(target, link_path, target_is_directory=True)
        except FileExistsError:
            if _links_to(link_path, target):
                return
            if self.on_collision == ON_COLLISION_IGNORE:
                logger.warning("link: %s already exists, not linking %s", link_path, target)
                return
            raise LinkCollisionError(link_path, target) from None

        self.linked.append(link_path)
        logger.debug("link: %s -> %s", link_path, target)


def _links_to(link_path: Path, target: Path) -> bool:
    if not link_path.is_symlink():
        return False
    return Path(os.readlink(link_path)) == target
