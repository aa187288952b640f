"""
Cleaner.

Reverts what linking and materialization did to the workspace packages:
removes the symlinks under each package's node_modules and deletes every
directory tree that carries the materializer's marker file.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import Dict, List, Union

from .fsprobe import SCOPE_PREFIX, collect_symlinks, is_directory, list_entries, unlink_quietly
from .materializer import MARKER_FILENAME
from .models import CleanupReport, Workspace
from .parallel import for_each_workspace
from .resolution import DEPS_DIRNAME

logger = logging.getLogger(__name__)


class Cleaner:
    """Removes links and marker-tagged copies from workspace packages."""

    def __init__(self, service_root: Union[str, Path]):
        self.service_root = Path(os.path.realpath(service_root))

    def cleanup(self, workspaces: Dict[str, Workspace],
                max_jobs: int = 1) -> Dict[str, CleanupReport]:
        """Clean every workspace and return one report per workspace."""
        return for_each_workspace(workspaces, self.clean_workspace, max_jobs)

    def clean_workspace(self, workspace: Workspace) -> CleanupReport:
        """
        Clean the node_modules directory of one workspace package.

        A package without a node_modules directory is left alone.

        Args:
            workspace: Workspace to clean

        Returns:
            CleanupReport listing the removed links and copies
        """
        logger.info("cleanup: iterating over workspace %s", workspace.name)
        report = CleanupReport(workspace=workspace.name)
        deps_dir = self.service_root / workspace.location / DEPS_DIRNAME

        if not is_directory(deps_dir):
            return report

        for link in collect_symlinks(deps_dir):
            if unlink_quietly(link):
                report.unlinked.append(str(link))
                logger.debug("cleanup: unlinked %s", link)

        for copy_root in find_marked_directories(deps_dir):
            shutil.rmtree(copy_root)
            report.removed.append(str(copy_root))
            logger.debug("cleanup: removed copy %s", copy_root)

        _prune_empty_scopes(deps_dir, report.unlinked + report.removed)
        return report


def find_marked_directories(root: Union[str, Path]) -> List[Path]:
    """
    Find directories below ``root`` that contain the marker file.

    Symlinks are not followed, and a marked directory is not searched any
    further since it is removed as a whole.

    Args:
        root: Directory to search

    Returns:
        Marked directories, outermost first
    """
    marked: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        if MARKER_FILENAME in filenames:
            marked.append(Path(dirpath))
            dirnames[:] = []
            continue
        dirnames.sort()
    return marked


def _prune_empty_scopes(deps_dir: Path, removed_paths: List[str]) -> None:
    # Scope directories emptied by this pass go too; others are left as found.
    scopes = {
        Path(path).parent for path in removed_paths
        if Path(path).parent != deps_dir and Path(path).parent.name.startswith(SCOPE_PREFIX)
    }
    for scope in sorted(scopes):
        if is_directory(scope) and not list_entries(scope):
            os.rmdir(scope)
            logger.debug("cleanup: removed empty scope %s", scope)
