"""
Lookup of the project that owns a given file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from coffeesense.config import CoffeeSenseProject
from coffeesense.utils.path_utils import is_path_within, normalize_file_name_to_fs_path


def find_project_for_file(
    projects: Sequence[CoffeeSenseProject],
    file_path: str | Path,
) -> CoffeeSenseProject | None:
    """Return the first project whose root contains ``file_path``.

    ``projects`` must be ordered deepest root first, as produced by the
    resolver, so the first match is the most specific project. Matching is by
    whole path components: ``/ws/pkg10/a.coffee`` is not inside ``/ws/pkg1``.
    """
    target = normalize_file_name_to_fs_path(file_path)
    for project in projects:
        if is_path_within(target, project.root):
            return project
    return None


def group_files_by_project(
    projects: Sequence[CoffeeSenseProject],
    file_paths: Iterable[str | Path],
) -> tuple[dict[str, list[str]], list[str]]:
    """Bucket files by owning project root.

    Returns:
        A mapping of project root to its files, keyed in project order (only
        roots that own at least one file), and the list of files no project owns.
    """
    owned: dict[str, list[str]] = {}
    unowned: list[str] = []
    for file_path in file_paths:
        normalized = normalize_file_name_to_fs_path(file_path)
        project = find_project_for_file(projects, normalized)
        if project is None:
            unowned.append(normalized)
        else:
            owned.setdefault(project.root, []).append(normalized)

    order = {project.root: index for index, project in enumerate(projects)}
    ordered = dict(sorted(owned.items(), key=lambda item: order[item[0]]))
    return ordered, unowned
