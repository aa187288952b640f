"""
Global configuration for monopack - handles settings for workspace
discovery, dependency linking and the run itself.
"""
import os
import toml
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .workspace.errors import ConfigError
from .workspace.linker import LINK_COLLISION_POLICIES, ON_COLLISION_ABORT
from .workspace.registry import DEFAULT_COMMAND

CONFIG_FILENAME = "monopack.toml"
CONFIG_ENV_VAR = "MONOPACK_CONFIG"


@dataclass
class WorkspacesConfig:
    """Configuration for workspace discovery."""
    command: List[str] = field(default_factory=lambda: list(DEFAULT_COMMAND))


@dataclass
class LinkConfig:
    """Configuration for the dependency linker."""
    on_collision: str = ON_COLLISION_ABORT  # abort, continue, ignore


@dataclass
class GlobalConfig:
    """Global monopack configuration."""
    verbose: bool = False
    parallel_jobs: int = 4
    workspaces: WorkspacesConfig = field(default_factory=WorkspacesConfig)
    link: LinkConfig = field(default_factory=LinkConfig)

    def __post_init__(self):
        self.validate()

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None,
             service_root: Optional[Union[str, Path]] = None) -> 'GlobalConfig':
        """
        Load configuration from a toml file.

        Lookup order: ``config_path``, the MONOPACK_CONFIG environment
        variable, then ``<service_root>/monopack.toml``. A file that does not
        exist yields the default configuration.

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR)
        if config_path is None:
            config_path = Path(service_root or Path.cwd()) / CONFIG_FILENAME
        config_path = Path(config_path)

        if not config_path.exists():
            # Return default configuration if file doesn't exist
            return cls()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = toml.load(f)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Could not load config from {config_path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'GlobalConfig':
        """Create GlobalConfig from dictionary data."""
        monopack_data = _table(data, 'monopack')
        workspaces_data = _table(data, 'workspaces')
        link_data = _table(data, 'link')

        return cls(
            verbose=monopack_data.get('verbose', False),
            parallel_jobs=monopack_data.get('parallel_jobs', 4),
            workspaces=WorkspacesConfig(
                command=workspaces_data.get('command', list(DEFAULT_COMMAND))
            ),
            link=LinkConfig(
                on_collision=link_data.get('on_collision', ON_COLLISION_ABORT)
            ),
        )

    def to_dict(self) -> dict:
        return {
            'monopack': {
                'verbose': self.verbose,
                'parallel_jobs': self.parallel_jobs,
            },
            'workspaces': {
                'command': list(self.workspaces.command),
            },
            'link': {
                'on_collision': self.link.on_collision,
            },
        }

    def save(self, config_path: Union[str, Path]) -> Path:
        """Save configuration to a toml file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            toml.dump(self.to_dict(), f)
        return config_path

    def validate(self) -> None:
        """Raise ConfigError if a value is out of range."""
        if not isinstance(self.verbose, bool):
            raise ConfigError(f"verbose must be true or false, got {self.verbose!r}")
        if isinstance(self.parallel_jobs, bool) or not isinstance(self.parallel_jobs, int) \
                or self.parallel_jobs < 1:
            raise ConfigError(f"parallel_jobs must be a positive integer, got {self.parallel_jobs!r}")
        command = self.workspaces.command
        if not isinstance(command, list) or not command \
                or not all(isinstance(part, str) and part for part in command):
            raise ConfigError(f"workspaces.command must be a non-empty list of strings, got {command!r}")
        if self.link.on_collision not in LINK_COLLISION_POLICIES:
            raise ConfigError(
                f"link.on_collision must be one of {', '.join(LINK_COLLISION_POLICIES)}, "
                f"got {self.link.on_collision!r}"
            )


def _table(data: dict, name: str) -> dict:
    """Return a toml table, or {} when it is absent."""
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] must be a table, got {table!r}")
    return table
