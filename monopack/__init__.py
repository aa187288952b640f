"""
monopack - workspace dependency materialization for per-package packaging.

This package links hoisted dependencies into each workspace package of a
monorepo, copies local workspace dependencies in place, and cleans both up
again once packaging is done.
"""

__version__ = "1.0.0"


def main(*args, **kwargs):
    """Lazy import to avoid CLI startup side effects during help paths."""
    from .main import main as _main

    return _main(*args, **kwargs)


__all__ = ["main", "__version__"]
