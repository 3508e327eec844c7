"""
path_utils.py
-------------

Path helpers shared by the walker, the decision engine and the
apply stage.

Features:
- Extension parsing and replacement
- Hidden-entry detection
- Rename that never overwrites an existing file
"""

import os
import stat


def get_extension(path):
    """
    Returns the lowercase extension without the dot.

    Example:
        get_extension('file.JPG') -> 'jpg'
        get_extension('archive.tar.gz') -> 'gz'
        get_extension('.bashrc') -> ''
    """
    _, ext = os.path.splitext(path)
    return ext[1:].lower()


def with_extension(path, new_ext):
    """
    Same path with its extension replaced (or appended when it has none).

    Example:
        with_extension('/a/image.txt', 'png') -> '/a/image.png'
        with_extension('/a/README', 'pdf')    -> '/a/README.pdf'
    """
    stem, _old_ext = os.path.splitext(path)
    return f"{stem}.{new_ext}"


def is_hidden(name, path=None):
    """
    Dot-prefixed names are hidden everywhere; on Windows the
    FILE_ATTRIBUTE_HIDDEN flag counts too when a path is given.
    """
    if name.startswith("."):
        return True
    if path is not None and os.name == "nt":
        try:
            attrs = os.lstat(path).st_file_attributes
        except (OSError, AttributeError):
            return False
        return bool(attrs & stat.FILE_ATTRIBUTE_HIDDEN)
    return False


def is_zero_byte(path):
    """
    Check if a file is zero bytes.

    Returns:
        True if file size is 0, False otherwise
    """
    try:
        return os.path.getsize(path) == 0
    except OSError:
        return False


def rename_no_clobber(old_path, new_path):
    """
    Rename old_path to new_path unless new_path is already taken.

    Returns:
        ("ok", new_path) on success
        ("conflict", new_path) if the destination exists
        ("permission", exception) if permission denied
        ("error", exception) for other OS errors
    """
    if os.path.lexists(new_path):
        return "conflict", new_path

    try:
        os.rename(old_path, new_path)
        return "ok", new_path

    except FileExistsError:
        # Windows refuses to replace an existing destination
        return "conflict", new_path

    except PermissionError as e:
        return "permission", e

    except OSError as e:
        return "error", e
