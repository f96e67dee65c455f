"""
Path normalization helpers shared by the resolver and project lookup.
"""

from __future__ import annotations

import os
from pathlib import Path

from coffeesense.constants import DEPTH_SEPARATOR


def normalize_file_name_to_fs_path(path: str | Path) -> str:
    """Return the canonical filesystem form of an absolute path.

    Collapses ``.`` and ``..`` segments and redundant separators without
    touching the filesystem, so symlinks are left as written. On Windows the
    drive letter is lower-cased.
    """
    normalized = os.path.normpath(os.fspath(path))
    if os.name == "nt" and len(normalized) >= 2 and normalized[1] == ":":
        normalized = normalized[0].lower() + normalized[1:]
    return normalized


def normalize_absolute_path(path: str | Path, root: str | Path) -> str:
    """Normalize ``path``, resolving it against ``root`` when it is relative."""
    raw_path = Path(path)
    if raw_path.is_absolute():
        return normalize_file_name_to_fs_path(raw_path)
    return normalize_file_name_to_fs_path(Path(root) / raw_path)


def get_path_depth(path: str | Path, sep: str = DEPTH_SEPARATOR) -> int:
    """Count the non-empty segments of ``path`` when split on ``sep``.

    The filesystem root has depth 0 and each nested directory adds one.

    Platform separators are converted first, so a path returned raw from a
    search and its normalized form measure the same unless normalization
    removed segments.
    """
    text = os.fspath(path)
    if os.sep != sep:
        text = text.replace(os.sep, sep)
    return len([segment for segment in text.split(sep) if segment])


def is_path_within(path: str | Path, root: str | Path) -> bool:
    target = Path(normalize_file_name_to_fs_path(path))
    root_path = Path(normalize_file_name_to_fs_path(root))
    return target == root_path or root_path in target.parents
