"""
Packaging lifecycle for a host build tool.

The host calls four named hooks in order:

  package:cleanup          -> cleanup()          reset stale links and copies
  package:initialize       -> initialize()       link every workspace
  after:package:initialize -> copy_workspaces()  materialize local dependencies
  after:package:finalize   -> cleanup()          restore the source tree

Each phase finishes for every workspace before it returns, which gives the
barrier the materializer relies on: it copies other workspaces' directories
together with their freshly created links.
"""
import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Union

from .config import GlobalConfig
from .workspace.cleaner import Cleaner
from .workspace.errors import UnknownHookError
from .workspace.linker import DependencyLinker
from .workspace.materializer import WorkspaceMaterializer
from .workspace.models import CleanupReport, Workspace
from .workspace.registry import WorkspaceRegistry

logger = logging.getLogger(__name__)


class PackagingLifecycle:
    """Runs the cleanup, link and materialize phases over a monorepo."""

    def __init__(self, service_root: Union[str, Path],
                 config: Optional[GlobalConfig] = None,
                 registry: Optional[WorkspaceRegistry] = None):
        """
        Initialize the lifecycle.

        Args:
            service_root: Monorepo root directory
            config: Configuration (defaults apply when omitted)
            registry: Workspace registry; one running the configured command
                is created when omitted
        """
        self.service_root = Path(os.path.realpath(service_root))
        self.config = config or GlobalConfig()
        self.registry = registry or WorkspaceRegistry(
            self.service_root, command=self.config.workspaces.command
        )
        self.hooks: Dict[str, Callable[[], object]] = {
            'package:cleanup': self.cleanup,
            'package:initialize': self.initialize,
            'after:package:initialize': self.copy_workspaces,
            'after:package:finalize': self.cleanup,
        }

    def get_workspaces(self) -> Dict[str, Workspace]:
        return self.registry.get_workspaces()

    def run_hook(self, name: str):
        """Run the phase registered under a host hook name."""
        try:
            hook = self.hooks[name]
        except KeyError:
            raise UnknownHookError(
                f"Unknown hook '{name}' (expected one of: {', '.join(self.hooks)})"
            ) from None
        logger.debug("Running hook %s", name)
        return hook()

    def cleanup(self) -> Dict[str, CleanupReport]:
        """Remove links and marker-tagged copies from every workspace."""
        cleaner = Cleaner(self.service_root)
        return cleaner.cleanup(self.get_workspaces(), self.config.parallel_jobs)

    def initialize(self) -> Dict[str, Set[str]]:
        """Link the hoisted dependency closure of every workspace."""
        linker = DependencyLinker(self.service_root, on_collision=self.config.link.on_collision)
        return linker.link_workspaces(self.get_workspaces(), self.config.parallel_jobs)

    def copy_workspaces(self) -> Dict[str, List[str]]:
        """Copy local workspace dependencies; call after initialize()."""
        materializer = WorkspaceMaterializer(self.service_root)
        return materializer.copy_workspaces(self.get_workspaces(), self.config.parallel_jobs)

    def prepare(self) -> Dict[str, List[str]]:
        """Reset, link and materialize in one go, ready for packaging."""
        self.cleanup()
        self.initialize()
        return self.copy_workspaces()
