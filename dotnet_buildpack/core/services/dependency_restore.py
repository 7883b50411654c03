"""
Dependency restore — run ``dotnet restore`` and fix up lock documents.

Two project systems exist, decided once per build by the installed SDK:

    MSBUILD       *.csproj / *.fsproj files; restore writes
                  obj/project.assets.json with absolute package paths
    PROJECT_JSON  legacy project.json directories; no assets document

MSBuild projects are restored one at a time in descriptor order, and
the first failure stops the build. Legacy projects are restored with a
single combined invocation. Afterwards every MSBuild project's
``obj/project.assets.json`` has the staging package-cache path replaced
by the path the droplet will see at run time.
"""

from __future__ import annotations

import enum
import logging
import shlex
from pathlib import Path, PurePosixPath
from typing import TextIO

from dotnet_buildpack.adapters.base import Filesystem, Shell
from dotnet_buildpack.adapters.shell.filesystem import LocalFilesystem
from dotnet_buildpack.core.config.settings import BuildpackSettings
from dotnet_buildpack.core.models.app_dir import AppDir, is_self_contained
from dotnet_buildpack.core.services.sdk_cache import sdk_dir

logger = logging.getLogger(__name__)

PROJECT_ASSETS_JSON = PurePosixPath("obj") / "project.assets.json"

# Present in every MSBuild-based SDK: <build>/.dotnet/sdk/<version>/MSBuild.dll
_MSBUILD_MARKER = "sdk/*/MSBuild.dll"


class ProjectFormat(enum.Enum):
    """Project system of the installed SDK."""

    MSBUILD = "msbuild"
    PROJECT_JSON = "project.json"


class RestoreError(Exception):
    """Raised when ``dotnet restore`` exits non-zero.

    ``project`` names the failing project, or is None for the combined
    legacy invocation.
    """

    def __init__(self, message: str, return_code: int, project: str | None = None):
        super().__init__(message)
        self.return_code = return_code
        self.project = project


class DependencyRestorer:
    """Restore NuGet packages for the projects of one app."""

    def __init__(
        self,
        build_dir: Path,
        shell: Shell,
        *,
        settings: BuildpackSettings | None = None,
        fs: Filesystem | None = None,
    ):
        self.build_dir = Path(build_dir)
        self.shell = shell
        self.settings = settings or BuildpackSettings()
        self.fs = fs or LocalFilesystem()
        self.project_paths: list[str] = []
        self._format: ProjectFormat | None = None

    def should_restore(self, app: AppDir) -> bool:
        """False for self-contained apps, whose dependencies are already bundled.

        Otherwise remembers the app's projects for ``restore``.
        """
        if is_self_contained(app, self.fs):
            logger.info("App is self-contained (%s); skipping restore", app.published_project)
            return False
        self.project_paths = list(app.project_paths)
        return True

    def project_format(self) -> ProjectFormat:
        """Project system of the SDK installed in the build directory."""
        if self._format is None:
            markers = self.fs.glob(sdk_dir(self.build_dir), _MSBUILD_MARKER)
            self._format = ProjectFormat.MSBUILD if markers else ProjectFormat.PROJECT_JSON
            logger.debug("Installed SDK project format: %s", self._format.value)
        return self._format

    def msbuild(self) -> bool:
        return self.project_format() is ProjectFormat.MSBUILD

    def restore(self, out: TextIO) -> list[Path]:
        """Restore every project; return the assets documents that were rewritten.

        Raises:
            RestoreError: On the first non-zero ``dotnet restore``.
        """
        if not self.project_paths:
            logger.info("No projects to restore")
            return []

        match self.project_format():
            case ProjectFormat.MSBUILD:
                for project in self.project_paths:
                    self._run_restore([project], out, project=project)
                return self.rewrite_project_assets_json(self.project_paths)
            case ProjectFormat.PROJECT_JSON:
                self._run_restore(self.project_paths, out)
                return []

    def rewrite_project_assets_json(self, project_paths: list[str]) -> list[Path]:
        """Point package paths in each project's assets document at the runtime cache.

        Byte-level substitution of the staging package directory; every
        other byte of the document, line endings included, is kept.
        Projects without an assets document are skipped.
        """
        staging = self.settings.staging_packages_dir.encode("utf-8")
        runtime = self.settings.runtime_packages_dir.encode("utf-8")
        rewritten: list[Path] = []

        for project in project_paths:
            path = self.assets_json_path(project)
            if not self.fs.is_file(path):
                logger.debug("No %s for %s; skipping", PROJECT_ASSETS_JSON, project)
                continue

            content = self.fs.read_bytes(path)
            updated = content.replace(staging, runtime)
            if updated != content:
                self.fs.write_bytes(path, updated)
                rewritten.append(path)
                logger.info("Rewrote package paths in %s", path)

        return rewritten

    def assets_json_path(self, project: str) -> Path:
        """``<build>/<project dir>/obj/project.assets.json`` for an MSBuild project file."""
        project_dir = PurePosixPath(project).parent
        return self.build_dir / project_dir / PROJECT_ASSETS_JSON

    def _run_restore(self, targets: list[str], out: TextIO, project: str | None = None) -> None:
        command = "dotnet restore " + " ".join(shlex.quote(t) for t in targets)
        return_code = self.shell.exec(command, out, cwd=str(self.build_dir))
        if return_code != 0:
            subject = project or " ".join(targets)
            raise RestoreError(
                f"dotnet restore failed for {subject} (exit {return_code})",
                return_code,
                project=project,
            )
