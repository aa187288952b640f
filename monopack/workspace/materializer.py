"""
Workspace materializer.

Replaces local (sibling workspace) dependencies that linking could not
provide with physical copies, so each package can be packaged on its own.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Dict, List, Set, Union

from .fsprobe import collect_symlinks, path_exists, unlink_quietly
from .manifest import read_manifest
from .models import Workspace
from .parallel import for_each_workspace
from .resolution import DEPS_DIRNAME

logger = logging.getLogger(__name__)

MARKER_FILENAME = ".monopack-copied"


class WorkspaceMaterializer:
    """Copies local workspace dependencies into dependent packages."""

    def __init__(self, service_root: Union[str, Path]):
        self.service_root = Path(os.path.realpath(service_root))

    def copy_workspaces(self, workspaces: Dict[str, Workspace],
                        max_jobs: int = 1) -> Dict[str, List[str]]:
        """
        Materialize the local dependencies of every workspace.

        Must only run once every workspace has been linked. All copies of the
        pass are planned before the first one is made, and a copy never
        carries another copy of the same pass along, so the resulting tree
        does not depend on the order workspaces are processed in.

        Args:
            workspaces: All workspaces of the monorepo
            max_jobs: Maximum number of workspaces processed at once

        Returns:
            Dictionary mapping workspace names to the local dependencies copied
        """
        plans = for_each_workspace(
            workspaces,
            lambda workspace: self.plan_workspace(workspace, workspaces),
            max_jobs,
        )
        planned = {
            self._deps_dir(workspaces[owner]) / name
            for owner, names in plans.items()
            for name in names
        }
        return for_each_workspace(
            workspaces,
            lambda workspace: self._copy_locals(workspace, workspaces, plans[workspace.name], planned),
            max_jobs,
        )

    def copy_workspace(self, workspace: Workspace, workspaces: Dict[str, Workspace]) -> List[str]:
        """
        Copy the missing local dependencies of one workspace package.

        Args:
            workspace: Package receiving the copies
            workspaces: All workspaces of the monorepo

        Returns:
            Names of the local dependencies that were copied
        """
        locals_ = self.plan_workspace(workspace, workspaces)
        planned = {self._deps_dir(workspace) / name for name in locals_}
        return self._copy_locals(workspace, workspaces, locals_, planned)

    def plan_workspace(self, workspace: Workspace, workspaces: Dict[str, Workspace]) -> List[str]:
        """Return the local dependencies of a workspace that are not present yet."""
        manifest = read_manifest(self.service_root / workspace.location)
        deps_dir = self._deps_dir(workspace)
        return [
            name for name in manifest.dependency_names()
            if name in workspaces and not path_exists(deps_dir / name)
        ]

    def _deps_dir(self, workspace: Workspace) -> Path:
        return self.service_root / workspace.location / DEPS_DIRNAME

    def _copy_locals(self, workspace: Workspace, workspaces: Dict[str, Workspace],
                     locals_: List[str], planned: Set[Path]) -> List[str]:
        logger.info("materialize: iterating over workspace %s", workspace.name)
        deps_dir = self._deps_dir(workspace)
        ignore = _skip_copies(planned)

        for name in locals_:
            source = self.service_root / workspaces[name].location
            destination = deps_dir / name
            shutil.copytree(source, destination, symlinks=True, ignore=ignore)
            (destination / MARKER_FILENAME).touch()
            logger.debug("materialize: copied %s to %s", source, destination)

        for name in locals_:
            self._strip_nested_links(deps_dir / name / DEPS_DIRNAME)

        return locals_

    def _strip_nested_links(self, nested_deps_dir: Path) -> None:
        # Links in a copied package point at the monorepo root, which the
        # standalone package will not contain.
        for link in collect_symlinks(nested_deps_dir):
            if unlink_quietly(link):
                logger.debug("materialize: removed nested link %s", link)


def _skip_copies(planned: Set[Path]) -> Callable[[str, List[str]], List[str]]:
    """Build a copytree ignore callback leaving out materialized copies."""

    def ignore(directory: str, names: List[str]) -> List[str]:
        skipped = []
        for name in names:
            entry = Path(directory) / name
            if entry in planned or path_exists(entry / MARKER_FILENAME):
                skipped.append(name)
        return skipped

    return ignore
