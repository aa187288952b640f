"""
Error taxonomy for workspace materialization.

A dependency that cannot be resolved is not an error and has no exception
here; resolution simply returns ``None``.
"""

from pathlib import Path
from typing import Union


class MonopackError(Exception):
    """Base class for every error raised by monopack."""
    pass


class DiscoveryError(MonopackError):
    """The workspace enumeration command failed or printed malformed output."""
    pass


class ManifestError(MonopackError):
    """A package directory has no readable, well-formed package.json."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid manifest {self.path}: {reason}")


class LinkCollisionError(MonopackError):
    """Something other than the expected symlink occupies a link path."""

    def __init__(self, link_path: Union[str, Path], target: Union[str, Path]):
        self.link_path = Path(link_path)
        self.target = Path(target)
        super().__init__(f"Cannot link {self.link_path} -> {self.target}: path already exists")


class ConfigError(MonopackError):
    """Exception raised when a configuration value fails validation."""
    pass


class UnknownHookError(MonopackError, KeyError):
    """A host asked for a lifecycle hook that does not exist."""

    def __str__(self) -> str:
        return Exception.__str__(self)
