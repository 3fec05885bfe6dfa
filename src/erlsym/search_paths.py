"""Search paths for module sources and the lookup of a module among them.

The order of the search paths is the resolution priority: runtime library
applications first, then the project itself, then its built dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from erlsym.config import LayoutConfig
from erlsym.errors import (
    DependencyDirectoryMissing,
    LibraryRootMissing,
    ModuleNotFound,
    ProjectRootNotFound,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleLocation:
    source_path: Path
    include_path: Path


def _child_dirs(root: Path) -> list[Path]:
    """Immediate child directories of ``root``, sorted by name."""
    return sorted(p for p in root.iterdir() if p.is_dir())


def find_library_roots(lib_dir: Path) -> list[Path]:
    """Every application directory under the runtime library root."""
    try:
        return _child_dirs(lib_dir)
    except FileNotFoundError:
        raise LibraryRootMissing(lib_dir) from None
    except NotADirectoryError:
        raise LibraryRootMissing(lib_dir, "is not a directory") from None
    except PermissionError:
        raise LibraryRootMissing(lib_dir, "is not listable") from None


def find_project_root(start_dir: Path, marker: str = "_build") -> Path:
    """Nearest directory, from ``start_dir`` upwards, containing ``marker``."""
    start = start_dir.resolve()
    for candidate in (start, *start.parents):
        if (candidate / marker).is_dir():
            return candidate
    raise ProjectRootNotFound(start, marker)


def find_dependency_roots(project_root: Path, subpath: str = "_build/default/lib") -> list[Path]:
    """Every built dependency under ``<project_root>/<subpath>``."""
    lib_dir = project_root / subpath
    try:
        return _child_dirs(lib_dir)
    except FileNotFoundError:
        raise DependencyDirectoryMissing(lib_dir) from None
    except NotADirectoryError:
        raise DependencyDirectoryMissing(lib_dir, "is not a directory") from None
    except PermissionError:
        raise DependencyDirectoryMissing(lib_dir, "is not listable") from None


def build_search_paths(
    start_dir: Path, lib_dir: Path, layout: LayoutConfig | None = None
) -> list[Path]:
    """Library roots, then the project root, then dependency roots."""
    layout = layout or LayoutConfig()
    project_root = find_project_root(start_dir, layout.build_marker)
    paths = [
        *find_library_roots(lib_dir),
        project_root,
        *find_dependency_roots(project_root, layout.dependency_subpath),
    ]
    logger.debug("project root %s, %d search paths", project_root, len(paths))
    return paths


def find_module(
    search_paths: Sequence[Path], module: str, layout: LayoutConfig | None = None
) -> ModuleLocation | None:
    """First search path whose source directory holds ``module``, or None."""
    layout = layout or LayoutConfig()
    filename = f"{module}{layout.source_ext}"
    logger.debug("looking for file %s", filename)
    for path in search_paths:
        source = path / layout.source_dir / filename
        logger.debug("probing %s", source)
        if source.is_file():
            return ModuleLocation(source, path / layout.include_dir)
    return None


def locate_module(
    search_paths: Sequence[Path], module: str, layout: LayoutConfig | None = None
) -> ModuleLocation:
    """Like find_module, but raises ModuleNotFound listing every path searched."""
    location = find_module(search_paths, module, layout)
    if location is None:
        raise ModuleNotFound(module, search_paths)
    return location
