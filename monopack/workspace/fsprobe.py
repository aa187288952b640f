"""Filesystem probes shared by the linker, materializer and cleaner.

A clean "not found" never raises here: a missing path is reported as absent
and the caller skips the step. Anything else (permission denied, I/O errors)
propagates.
"""
from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import List, Union

SCOPE_PREFIX = "@"

_ABSENT = (FileNotFoundError, NotADirectoryError)

PathLike = Union[str, Path]


def is_directory(path: PathLike) -> bool:
    """Return True if ``path`` exists as a directory (symlinks followed)."""
    try:
        return stat.S_ISDIR(os.stat(path).st_mode)
    except _ABSENT:
        return False


def path_exists(path: PathLike) -> bool:
    """Return True if anything, including a dangling symlink, sits at ``path``."""
    try:
        os.lstat(path)
    except _ABSENT:
        return False
    return True


def list_entries(path: PathLike) -> List[os.DirEntry]:
    """List direct entries of a directory sorted by name, or [] if it is absent."""
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda entry: entry.name)
    except _ABSENT:
        return []


def collect_symlinks(deps_dir: PathLike) -> List[Path]:
    """
    Collect the symlinks of a dependency directory.

    Direct entries that are symlinks are collected, and scoped entries
    (``@scope`` directories) are searched one level deeper since scoped
    packages nest one directory down. A scope that is itself a symlink is
    collected as a link and never descended into.

    Args:
        deps_dir: A ``node_modules`` directory

    Returns:
        Paths of the symlinks found, in a stable order
    """
    symlinks: List[Path] = []
    for entry in list_entries(deps_dir):
        if entry.is_symlink():
            symlinks.append(Path(entry.path))
            continue
        if entry.name.startswith(SCOPE_PREFIX) and entry.is_dir(follow_symlinks=False):
            symlinks.extend(
                Path(nested.path)
                for nested in list_entries(entry.path)
                if nested.is_symlink()
            )
    return symlinks


def unlink_quietly(path: PathLike) -> bool:
    """Remove a symlink; an already missing link counts as clean.

    Returns:
        True if something was removed, False if nothing was there
    """
    try:
        os.unlink(path)
    except FileNotFoundError:
        return False
    return True
