"""
App directory model — the application being staged.

Built once per staging run (by ``detect_app_dir`` or by the caller)
and read-only afterwards.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from dotnet_buildpack.adapters.base import Filesystem


class AppDir(BaseModel):
    """Descriptor of an application inside the build directory.

    ``published_project`` is set only when the app was pushed as the
    output of ``dotnet publish`` (the name of the published entry point,
    relative to ``build_dir``). ``project_paths`` lists the projects to
    restore, relative to ``build_dir``: MSBuild project files
    (``src/App/App.csproj``) or legacy ``project.json`` directories.
    """

    model_config = ConfigDict(frozen=True)

    build_dir: Path
    published_project: str | None = None
    project_paths: list[str] = Field(default_factory=list)


def is_self_contained(app: AppDir, fs: Filesystem | None = None) -> bool:
    """Whether the app ships its own runtime and needs no SDK.

    True exactly when ``published_project`` is non-empty and that path
    exists under the build directory.
    """
    if not app.published_project:
        return False
    if fs is None:
        from dotnet_buildpack.adapters.shell.filesystem import LocalFilesystem

        fs = LocalFilesystem()
    return fs.exists(app.build_dir / app.published_project)
