"""
Workspace registry.

Runs the package manager's workspace enumeration command once and caches the
parsed ``name -> Workspace`` mapping for the remaining phases of a run.
"""
import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import DiscoveryError
from .models import Workspace

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ["yarn", "workspaces", "info", "--json"]


class WorkspaceRegistry:
    """Lazily discovers and caches the workspaces of a service root."""

    def __init__(self, service_root: Union[str, Path],
                 command: Optional[Sequence[str]] = None):
        """
        Initialize the registry.

        Args:
            service_root: Monorepo directory the command runs in
            command: Enumeration command (default: ``yarn workspaces info --json``)
        """
        self.service_root = Path(service_root)
        self.command: List[str] = list(command) if command else list(DEFAULT_COMMAND)
        self._workspaces: Optional[Dict[str, Workspace]] = None

    def get_workspaces(self) -> Dict[str, Workspace]:
        """
        Return the workspace mapping, running the command on first use.

        Returns:
            Dictionary mapping workspace names to Workspace objects

        Raises:
            DiscoveryError: If the command fails or its output is malformed
        """
        if self._workspaces is not None:
            return self._workspaces

        stdout = self._run_command()
        self._workspaces = parse_workspaces_output(stdout)
        logger.info("Discovered %d workspaces in %s", len(self._workspaces), self.service_root)
        return self._workspaces

    def reset(self) -> None:
        """Drop the cached mapping so the next call runs the command again."""
        self._workspaces = None

    def _run_command(self) -> str:
        cmd_text = " ".join(self.command)
        logger.debug("Running %s in %s", cmd_text, self.service_root)
        try:
            result = subprocess.run(
                self.command,
                cwd=str(self.service_root),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            raise DiscoveryError(f"Could not run '{cmd_text}': {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise DiscoveryError(
                f"'{cmd_text}' exited with code {result.returncode}"
                + (f": {detail}" if detail else "")
            )
        return result.stdout


def parse_workspaces_output(stdout: str) -> Dict[str, Workspace]:
    """
    Parse the two-level JSON printed by the enumeration command.

    The outer envelope is an object whose ``data`` field is a JSON string;
    decoded, that string maps workspace names to ``{"location": ...}``.
    Some package manager versions print log lines before the envelope, so
    the last line carrying a ``data`` envelope is preferred over the whole
    output.

    Args:
        stdout: Raw command output

    Returns:
        Dictionary mapping workspace names to Workspace objects

    Raises:
        DiscoveryError: If the output does not have the expected shape
    """
    envelope = _find_envelope(stdout)

    data = envelope.get("data")
    if not isinstance(data, str):
        raise DiscoveryError("Workspace envelope has no string 'data' field")

    try:
        mapping = json.loads(data)
    except json.JSONDecodeError as e:
        raise DiscoveryError(f"Workspace data is not valid JSON: {e}") from e

    if not isinstance(mapping, dict):
        raise DiscoveryError("Workspace data is not an object")

    workspaces: Dict[str, Workspace] = {}
    for name, info in mapping.items():
        location = info.get("location") if isinstance(info, dict) else None
        if not isinstance(location, str) or not location:
            raise DiscoveryError(f"Workspace '{name}' has no location")
        workspaces[name] = Workspace(name=name, location=location)
    return workspaces


def _find_envelope(stdout: str) -> Dict[str, Any]:
    for line in reversed(stdout.strip().splitlines()):
        try:
            candidate = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(candidate, dict) and "data" in candidate:
            return candidate

    try:
        envelope = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise DiscoveryError(f"Workspace output is not valid JSON: {e}") from e
    if not isinstance(envelope, dict):
        raise DiscoveryError("Workspace output is not a JSON object")
    return envelope
