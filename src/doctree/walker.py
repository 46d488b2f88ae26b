"""Recursive source file discovery."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Iterable, Iterator


def is_ignored(rel_path: str, name: str, ignore: Iterable[str]) -> bool:
    """Check an entry against the ignore list.

    An entry is ignored when its name equals an ignore item, or its path
    relative to the walk root equals it, ends with it as a path suffix, or
    contains it as a complete path segment sequence.
    """
    rel_path = rel_path.replace(os.sep, "/")
    for pattern in ignore:
        pattern = pattern.replace(os.sep, "/").strip("/")
        if not pattern:
            continue
        if (
            name == pattern
            or rel_path == pattern
            or rel_path.endswith("/" + pattern)
            or f"/{pattern}/" in f"/{rel_path}/"
        ):
            return True
    return False


def has_allowed_extension(
    name: str, extensions: Iterable[str], exclude_extensions: Iterable[str] = ()
) -> bool:
    """Suffix match, so ``.test.js`` can exclude files that ``.js`` includes."""
    return any(name.endswith(ext) for ext in extensions) and not any(
        name.endswith(ext) for ext in exclude_extensions
    )


def _walk(
    directory: Path,
    root: Path,
    extensions: tuple[str, ...],
    exclude_extensions: tuple[str, ...],
    ignore: tuple[str, ...],
) -> Iterator[Path]:
    try:
        entries = sorted(os.listdir(directory))
    except OSError:
        return

    for name in entries:
        path = directory / name
        rel_path = os.path.relpath(path, root)
        if is_ignored(rel_path, name, ignore):
            continue

        try:
            mode = path.stat().st_mode
        except OSError:
            continue

        if stat.S_ISDIR(mode):
            yield from _walk(path, root, extensions, exclude_extensions, ignore)
        elif has_allowed_extension(name, extensions, exclude_extensions):
            yield path


def walk(
    root: str | Path,
    extensions: Iterable[str],
    exclude_extensions: Iterable[str] = (),
    ignore: Iterable[str] = (),
) -> list[Path]:
    """List matching files under ``root``, recursively.

    Unreadable directories contribute nothing; entries that cannot be
    stat'd are skipped. Symlinks are followed without loop detection.

    Args:
        root: Directory to scan.
        extensions: Filename suffixes to include.
        exclude_extensions: Filename suffixes to leave out.
        ignore: Names or relative path fragments to skip.

    Returns:
        Matching file paths (callers sort them).
    """
    root = Path(root)
    return list(
        _walk(root, root, tuple(extensions), tuple(exclude_extensions), tuple(ignore))
    )
