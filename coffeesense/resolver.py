"""
Project configuration resolver.

Turns the sparse project list a user writes into fully specified projects,
each carrying the package manifest and the tsconfig/jsconfig that govern it,
ordered deepest root first so that ownership lookups can stop at the first
matching root.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from coffeesense.config import (
    CoffeeSenseConfig,
    CoffeeSenseFullConfig,
    CoffeeSenseProject,
    ProjectDeclaration,
    RawProjectDeclaration,
)
from coffeesense.constants import (
    DEPTH_SEPARATOR,
    LOOSE_PROJECT_CONFIG_FILENAME,
    PACKAGE_MANIFEST_FILENAME,
    STRICT_PROJECT_CONFIG_FILENAME,
)
from coffeesense.errors import InvalidDeclarationError
from coffeesense.utils.path_utils import (
    get_path_depth,
    normalize_absolute_path,
    normalize_file_name_to_fs_path,
)
from coffeesense.utils.workspace import find_config_file

logger = logging.getLogger(__name__)

ConfigFinder = Callable[[str, str], Optional[str]]
UserConfig = Union[CoffeeSenseConfig, Mapping[str, Any], None]


def resolve_package_path(
    project_root: str,
    explicit: Optional[str] = None,
    finder: ConfigFinder = find_config_file,
) -> Optional[str]:
    """Explicit override relative to the root, else the nearest package.json."""
    if explicit:
        return normalize_absolute_path(explicit, project_root)
    found = finder(project_root, PACKAGE_MANIFEST_FILENAME)
    return normalize_file_name_to_fs_path(found) if found else None


def resolve_tsconfig_path(
    project_root: str,
    explicit: Optional[str] = None,
    finder: ConfigFinder = find_config_file,
) -> Optional[str]:
    """Explicit override relative to the root, else the most specific tsconfig/jsconfig.

    When both files are found the one in the deeper directory wins and
    tsconfig.json wins ties. Both candidates are normalized before their depths
    are compared.
    """
    if explicit:
        return normalize_absolute_path(explicit, project_root)

    loose = finder(project_root, LOOSE_PROJECT_CONFIG_FILENAME)
    strict = finder(project_root, STRICT_PROJECT_CONFIG_FILENAME)
    loose_fs_path = normalize_file_name_to_fs_path(loose) if loose else None
    strict_fs_path = normalize_file_name_to_fs_path(strict) if strict else None

    if loose_fs_path and strict_fs_path:
        strict_depth = get_path_depth(strict_fs_path, DEPTH_SEPARATOR)
        loose_depth = get_path_depth(loose_fs_path, DEPTH_SEPARATOR)
        return strict_fs_path if strict_depth >= loose_depth else loose_fs_path
    return strict_fs_path or loose_fs_path


def resolve_project(
    declaration: RawProjectDeclaration,
    root_path_for_config: str,
    finder: ConfigFinder = find_config_file,
) -> CoffeeSenseProject:
    if isinstance(declaration, str):
        root = declaration
        package = tsconfig = None
    elif isinstance(declaration, ProjectDeclaration):
        root = declaration.root
        package = declaration.package
        tsconfig = declaration.tsconfig
    else:
        raise InvalidDeclarationError(
            f"Project declaration must be a path or a mapping with 'root', got {declaration!r}"
        )

    project_root = normalize_absolute_path(root, root_path_for_config)
    return CoffeeSenseProject(
        root=project_root,
        package=resolve_package_path(project_root, package, finder),
        tsconfig=resolve_tsconfig_path(project_root, tsconfig, finder),
    )


def sort_projects_by_depth(projects: Iterable[CoffeeSenseProject]) -> list[CoffeeSenseProject]:
    # sorted() is stable, so equal depths keep declaration order
    return sorted(
        projects,
        key=lambda project: get_path_depth(project.root, DEPTH_SEPARATOR),
        reverse=True,
    )


def _coerce_config(user_config: UserConfig) -> CoffeeSenseConfig:
    if user_config is None:
        return CoffeeSenseConfig()
    if isinstance(user_config, CoffeeSenseConfig):
        return user_config
    if isinstance(user_config, Mapping):
        return CoffeeSenseConfig.from_raw(user_config)
    raise InvalidDeclarationError(
        f"CoffeeSense configuration must be a mapping, got {type(user_config).__name__}"
    )


def _warn_duplicate_roots(projects: Iterable[CoffeeSenseProject]) -> None:
    counts = Counter(project.root for project in projects)
    for root, count in counts.items():
        if count > 1:
            logger.warning("Project root %s is declared %d times; the first one wins", root, count)


def get_full_config(
    root_path_for_config: str | Path,
    workspace_path: str | Path,
    user_config: UserConfig = None,
    *,
    finder: ConfigFinder = find_config_file,
) -> CoffeeSenseFullConfig:
    """
    Resolve the user's project declarations into the full configuration.

    Args:
        root_path_for_config: Directory project roots are resolved against
        workspace_path: Root of the implicit project used when none are declared
        user_config: Raw settings/projects, as a model or plain mapping
        finder: Ancestor search used for fallback discovery

    Returns:
        Settings passed through unchanged and the resolved projects, deepest
        root first. Always contains at least one project.
    """
    config = _coerce_config(user_config)
    base_dir = str(root_path_for_config)
    declarations: list[RawProjectDeclaration] = list(config.projects or [])
    if not declarations:
        declarations = [normalize_file_name_to_fs_path(workspace_path)]

    logger.info("Resolving %d project(s) relative to %s", len(declarations), base_dir)
    resolved = [resolve_project(declaration, base_dir, finder) for declaration in declarations]
    for project in resolved:
        logger.debug(
            "Project %s: package=%s tsconfig=%s", project.root, project.package, project.tsconfig
        )
    _warn_duplicate_roots(resolved)

    return CoffeeSenseFullConfig(
        settings=dict(config.settings or {}),
        projects=tuple(sort_projects_by_depth(resolved)),
    )


async def aget_full_config(
    root_path_for_config: str | Path,
    workspace_path: str | Path,
    user_config: UserConfig = None,
    *,
    finder: ConfigFinder = find_config_file,
) -> CoffeeSenseFullConfig:
    """Async variant of get_full_config; the filesystem search runs in a worker thread."""
    return await asyncio.to_thread(
        get_full_config,
        root_path_for_config,
        workspace_path,
        user_config,
        finder=finder,
    )
