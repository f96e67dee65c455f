"""
Upward filesystem search for configuration files.
"""

from __future__ import annotations

import errno
import logging
import os
import stat
from pathlib import Path
from typing import Iterator

from coffeesense.errors import WorkspaceIOError

logger = logging.getLogger(__name__)

_ABSENT_ERRNOS = {errno.ENOENT, errno.ENOTDIR}


def iter_search_dirs(start_dir: str | Path) -> Iterator[Path]:
    """Yield ``start_dir`` and then each ancestor, nearest first."""
    start = Path(os.path.normpath(os.path.abspath(start_dir)))
    yield start
    yield from start.parents


def _is_regular_file(candidate: Path) -> bool:
    try:
        mode = os.stat(candidate).st_mode
    except OSError as exc:
        if exc.errno in _ABSENT_ERRNOS:
            return False
        raise WorkspaceIOError(
            f"Cannot inspect {candidate}: {exc.strerror or exc}",
            path=str(candidate),
        ) from exc
    return stat.S_ISREG(mode)


def find_config_file(start_dir: str | Path, file_name: str) -> str | None:
    """Find the nearest ``file_name`` in ``start_dir`` or one of its ancestors.

    Args:
        start_dir: Directory to start searching from
        file_name: Bare filename to look for (e.g. ``"tsconfig.json"``)

    Returns:
        Path of the first regular file found, or None when no directory in
        the chain contains one.

    Raises:
        WorkspaceIOError: when a candidate cannot be inspected for a reason
            other than not existing (e.g. permission denied).
    """
    for directory in iter_search_dirs(start_dir):
        candidate = directory / file_name
        if _is_regular_file(candidate):
            logger.debug("Found %s for %s at %s", file_name, start_dir, candidate)
            return str(candidate)
    return None
