"""
walker.py
---------

Lazy directory traversal producing Candidates.

Usage:
    from kti.walker import walk

    for candidate in walk("/some/directory", max_depth=2):
        process(candidate)

Depth:
    max_depth counts directory levels below the root.
        None -> unlimited
        0    -> only files directly inside root
        1    -> also files one subdirectory down
"""

import os
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from .decision import Candidate
from .errors import RootPathError
from .path_utils import is_hidden


def walk(
    root: Union[str, Path],
    max_depth: Optional[int] = None,
    skip_hidden: bool = True,
    follow_links: bool = False,
    on_error: Optional[Callable[[str, OSError], None]] = None,
) -> Iterator[Candidate]:
    """
    Generator that yields one Candidate per regular file under root.

    A file root yields exactly one Candidate; skip_hidden and max_depth
    do not apply to it.

    Args:
        root: File or directory to scan
        max_depth: Directory levels to descend (None = unlimited)
        skip_hidden: Exclude dot-files and dot-directories
        follow_links: Descend into directory symlinks (cycle safe)
        on_error: Called with (path, error) when a subdirectory can't be listed

    Raises:
        RootPathError: root does not exist or is not a file/directory
        ValueError: max_depth is negative
    """
    if max_depth is not None and max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")

    root = os.path.abspath(os.fspath(root))

    if os.path.isfile(root):
        yield Candidate.from_path(root)
        return

    if not os.path.isdir(root):
        if not os.path.lexists(root):
            raise RootPathError(root, "no such file or directory")
        raise RootPathError(root, "not a regular file or directory")

    try:
        root_stat = os.stat(root)
    except OSError as e:
        raise RootPathError(root, e.strerror) from e

    visited = {(root_stat.st_dev, root_stat.st_ino)}

    try:
        root_entries = _list_dir(root)
    except OSError as e:
        raise RootPathError(root, e.strerror) from e

    yield from _walk_entries(
        root_entries, 0, max_depth, skip_hidden, follow_links, visited, on_error
    )


def _list_dir(path):
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)


def _walk_entries(entries, depth, max_depth, skip_hidden, follow_links, visited, on_error):
    subdirs = []

    for entry in entries:
        if skip_hidden and is_hidden(entry.name, entry.path):
            continue

        try:
            if entry.is_file(follow_symlinks=False):
                yield Candidate.from_path(entry.path)
                continue

            if entry.is_symlink():
                # Only symlinks to regular files are judged; directory links need follow_links
                if entry.is_file():
                    yield Candidate.from_path(entry.path)
                    continue
                if not (follow_links and entry.is_dir()):
                    continue
            elif not entry.is_dir(follow_symlinks=False):
                continue
        except OSError as e:
            _report(on_error, entry.path, e)
            continue

        subdirs.append(entry)

    if max_depth is not None and depth >= max_depth:
        return

    for entry in subdirs:
        try:
            st = entry.stat()
            key = (st.st_dev, st.st_ino)
            if key in visited:
                continue
            visited.add(key)
            children = _list_dir(entry.path)
        except OSError as e:
            _report(on_error, entry.path, e)
            continue

        yield from _walk_entries(
            children, depth + 1, max_depth, skip_hidden, follow_links, visited, on_error
        )


def _report(on_error, path, error):
    if on_error is not None:
        on_error(path, error)
