import json
import os
from pathlib import Path
from typing import Dict, Optional

import pytest

from monopack.config import GlobalConfig
from monopack.hooks import PackagingLifecycle
from monopack.workspace.registry import WorkspaceRegistry


@pytest.fixture(autouse=True)
def ensure_valid_cwd():
    try:
        os.getcwd()
    except FileNotFoundError:
        os.chdir(Path(__file__).resolve().parents[1])
    yield


@pytest.fixture(autouse=True)
def isolate_config_env(monkeypatch):
    """Keep a developer's MONOPACK_CONFIG from leaking into tests."""
    monkeypatch.delenv("MONOPACK_CONFIG", raising=False)
    yield


def write_package(directory: Path, name: str, version: Optional[str] = "1.0.0",
                  dependencies: Optional[Dict[str, str]] = None) -> Path:
    """Create a package directory with a package.json and an index.js."""
    directory.mkdir(parents=True, exist_ok=True)
    manifest = {"name": name}
    if version is not None:
        manifest["version"] = version
    if dependencies:
        manifest["dependencies"] = dependencies
    (directory / "package.json").write_text(json.dumps(manifest, indent=2))
    (directory / "index.js").write_text(f"module.exports = '{name}';\n")
    return directory


def workspaces_output(mapping: Dict[str, str]) -> str:
    """Render what ``yarn workspaces info --json`` prints for a mapping."""
    data = {
        name: {"location": location, "workspaceDependencies": [], "mismatchedWorkspaceDependencies": []}
        for name, location in mapping.items()
    }
    return json.dumps({"type": "log", "data": json.dumps(data, indent=2)})


class StubRegistry(WorkspaceRegistry):
    """Registry answering from a fixed mapping instead of running yarn."""

    def __init__(self, service_root: Path, mapping: Dict[str, str]):
        super().__init__(service_root)
        self.mapping = mapping
        self.calls = 0

    def _run_command(self) -> str:
        self.calls += 1
        return workspaces_output(self.mapping)


class Monorepo:
    """Builder for a yarn-style monorepo with a hoisted root node_modules."""

    def __init__(self, root: Path):
        self.root = root
        self.root_deps = root / "node_modules"
        self.workspaces: Dict[str, str] = {}
        write_package(root, "monorepo-root")
        self.root_deps.mkdir(exist_ok=True)

    def add_workspace(self, name: str, location: str, dependencies: Optional[Dict[str, str]] = None,
                      version: str = "1.0.0", link_at_root: bool = True) -> Path:
        directory = write_package(self.root / location, name, version, dependencies)
        self.workspaces[name] = location
        if link_at_root:
            link = self.root_deps / name
            link.parent.mkdir(parents=True, exist_ok=True)
            link.symlink_to(directory, target_is_directory=True)
        return directory

    def add_hoisted(self, name: str, version: str = "1.0.0",
                    dependencies: Optional[Dict[str, str]] = None) -> Path:
        return write_package(self.root_deps / name, name, version, dependencies)

    def add_nested(self, parent: Path, name: str, version: str = "1.0.0",
                   dependencies: Optional[Dict[str, str]] = None) -> Path:
        return write_package(parent / "node_modules" / name, name, version, dependencies)

    def package_dir(self, workspace: str) -> Path:
        return self.root / self.workspaces[workspace]

    def deps(self, workspace: str) -> Path:
        return self.package_dir(workspace) / "node_modules"

    def registry(self) -> StubRegistry:
        return StubRegistry(self.root, dict(self.workspaces))

    def lifecycle(self, **config_kwargs) -> PackagingLifecycle:
        config_kwargs.setdefault("parallel_jobs", 1)
        return PackagingLifecycle(self.root, config=GlobalConfig(**config_kwargs),
                                  registry=self.registry())


@pytest.fixture
def monorepo(tmp_path) -> Monorepo:
    root = Path(os.path.realpath(tmp_path)) / "monorepo"
    root.mkdir()
    return Monorepo(root)


@pytest.fixture
def package_writer():
    """Return the helper that writes a package directory."""
    return write_package


@pytest.fixture
def render_workspaces():
    """Return the helper rendering enumeration command output."""
    return workspaces_output


@pytest.fixture
def monorepo_factory(tmp_path):
    """Return a builder creating independent monorepos under tmp_path."""
    def build(name: str) -> Monorepo:
        root = Path(os.path.realpath(tmp_path)) / name
        root.mkdir()
        return Monorepo(root)
    return build
