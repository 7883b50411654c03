"""
App detection — build the ``AppDir`` descriptor from a build directory.

Looks at what the developer pushed and determines:

- whether it is ``dotnet publish`` output (a ``*.runtimeconfig.json``
  at the root next to its entry point),
- which projects need restoring: the project named in ``.deployment``,
  else every MSBuild project file, else every legacy ``project.json``
  directory.

Pure logic over the filesystem — no side effects.
"""

from __future__ import annotations

import configparser
import logging
from pathlib import Path

from dotnet_buildpack.adapters.base import Filesystem
from dotnet_buildpack.adapters.shell.filesystem import LocalFilesystem
from dotnet_buildpack.core.models.app_dir import AppDir

logger = logging.getLogger(__name__)

DEPLOYMENT_FILE = ".deployment"
RUNTIME_CONFIG_SUFFIX = ".runtimeconfig.json"
MSBUILD_PROJECT_PATTERNS = ("**/*.csproj", "**/*.fsproj", "**/*.vbproj")
LEGACY_PROJECT_PATTERN = "**/project.json"

# Directories that never hold the app's own projects
_IGNORED_DIRS = {"node_modules", "bin", "obj", "packages"}


def detect_app_dir(build_dir: Path, fs: Filesystem | None = None) -> AppDir:
    """Describe the app in ``build_dir``."""
    fs = fs or LocalFilesystem()
    build_dir = Path(build_dir)

    published = detect_published_project(build_dir, fs)
    projects = [] if published else detect_project_paths(build_dir, fs)

    logger.info(
        "Detected app in %s: published=%s projects=%s",
        build_dir, published, projects,
    )
    return AppDir(build_dir=build_dir, published_project=published, project_paths=projects)


def detect_published_project(build_dir: Path, fs: Filesystem) -> str | None:
    """Name of the published entry point, if the app is publish output.

    ``App.runtimeconfig.json`` together with an ``App`` executable means
    a self-contained publish.
    """
    for config in fs.glob(build_dir, f"*{RUNTIME_CONFIG_SUFFIX}"):
        name = config.name[: -len(RUNTIME_CONFIG_SUFFIX)]
        if fs.is_file(build_dir / name):
            return name
    return None


def detect_project_paths(build_dir: Path, fs: Filesystem) -> list[str]:
    """Projects to restore, relative to ``build_dir``, in a stable order."""
    deployment_project = _deployment_project(build_dir, fs)
    if deployment_project:
        return [deployment_project]

    msbuild = _find(build_dir, fs, MSBUILD_PROJECT_PATTERNS)
    if msbuild:
        return msbuild

    legacy = _find(build_dir, fs, (LEGACY_PROJECT_PATTERN,))
    return [str(Path(p).parent) for p in legacy]


def _find(build_dir: Path, fs: Filesystem, patterns: tuple[str, ...]) -> list[str]:
    found: set[str] = set()
    for pattern in patterns:
        for path in fs.glob(build_dir, pattern):
            rel = path.relative_to(build_dir)
            if any(_ignored(part) for part in rel.parts[:-1]):
                continue
            found.add(rel.as_posix())
    return sorted(found)


def _ignored(part: str) -> bool:
    return part.startswith(".") or part in _IGNORED_DIRS


def _deployment_project(build_dir: Path, fs: Filesystem) -> str | None:
    """The ``project`` setting of a ``.deployment`` file, if present.

    Format::

        [config]
        project = src/App/App.csproj
    """
    path = build_dir / DEPLOYMENT_FILE
    if not fs.is_file(path):
        return None

    parser = configparser.ConfigParser()
    try:
        parser.read_string(fs.read_text(path))
    except (OSError, configparser.Error) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return None

    project = parser.get("config", "project", fallback="").strip()
    return project.strip("/") or None
