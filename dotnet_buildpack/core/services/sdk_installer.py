"""
SDK installer — download, extract and activate the .NET SDK.

Flow for one build:

    1. Resolve the SDK version (fatal if the manifest cannot supply one)
    2. Print the version being installed
    3. Cache hit  → hand the cached SDK into the build directory
       Cache miss → download + extract through the shell, fail on non-zero
    4. Record <build>/.dotnet/VERSION
    5. Put the SDK on the shell's PATH for the restore step

A self-contained app (published with its own runtime) needs no SDK at
all; ``should_install`` answers that independently of the cache.
"""

from __future__ import annotations

import logging
import os
import shlex
import tempfile
from pathlib import Path
from typing import TextIO

from dotnet_buildpack.adapters.base import Filesystem, Shell
from dotnet_buildpack.adapters.shell.filesystem import LocalFilesystem
from dotnet_buildpack.core.config.settings import BuildpackSettings
from dotnet_buildpack.core.models.app_dir import AppDir, is_self_contained
from dotnet_buildpack.core.models.manifest import Manifest
from dotnet_buildpack.core.services.sdk_cache import (
    SdkCache,
    sdk_dir,
    write_version_file,
)
from dotnet_buildpack.core.services.sdk_version import SDK_DEPENDENCY, DotnetSdkVersion

logger = logging.getLogger(__name__)

# Used when the manifest lists the default version without a URI
DEFAULT_DOWNLOAD_URI = (
    "https://buildpacks.cloudfoundry.org/dependencies/dotnet/"
    "dotnet.{version}.linux-amd64.tar.gz"
)
ARCHIVE_FORMAT = "tar.gz"


class InstallError(Exception):
    """Raised when the SDK download or extraction exits non-zero."""

    def __init__(self, message: str, return_code: int):
        super().__init__(message)
        self.return_code = return_code


class DotnetSdkInstaller:
    """Install the .NET SDK into ``<build_dir>/.dotnet``."""

    def __init__(
        self,
        build_dir: Path,
        cache_dir: Path,
        manifest: Manifest,
        shell: Shell,
        *,
        settings: BuildpackSettings | None = None,
        fs: Filesystem | None = None,
        sdk_version: DotnetSdkVersion | None = None,
        out: TextIO | None = None,
    ):
        self.build_dir = Path(build_dir)
        self.cache_dir = Path(cache_dir)
        self.manifest = manifest
        self.shell = shell
        self.settings = settings or BuildpackSettings()
        self.fs = fs or LocalFilesystem()
        self.cache = SdkCache(self.cache_dir, self.fs)
        self._sdk_version = sdk_version or DotnetSdkVersion(
            self.build_dir, manifest, out=out, fs=self.fs,
        )

    @property
    def version(self) -> str:
        return self._sdk_version.version

    @property
    def sdk_dir(self) -> Path:
        return sdk_dir(self.build_dir)

    @property
    def cached(self) -> bool:
        """Whether the buildpack cache holds exactly the resolved version."""
        return self.cache.is_cached(self.version)

    def should_install(self, app: AppDir) -> bool:
        """False only for self-contained apps, which bring their own runtime."""
        if is_self_contained(app, self.fs):
            logger.info("App is self-contained (%s); no SDK needed", app.published_project)
            return False
        return True

    def install(self, out: TextIO) -> None:
        """Install and activate the resolved SDK.

        Raises:
            ManifestError: If no version can be resolved.
            InstallError: If the download/extract command fails.
        """
        version = self.version
        out.write(f"-----> Installing .NET SDK version: {version}\n")

        if self.cached:
            logger.info("SDK %s found in cache; skipping download", version)
            self.cache.restore_to(self.build_dir)
        else:
            command = self.download_command()
            return_code = self.shell.exec(command, out)
            if return_code != 0:
                raise InstallError(
                    f"Downloading .NET SDK {version} failed (exit {return_code})",
                    return_code,
                )

        self.write_version_file(version)
        self.activate()

    def download_uri(self) -> str:
        """Where the resolved SDK archive is fetched from."""
        dependency = self.manifest.find_dependency(SDK_DEPENDENCY, self.version)
        if dependency is not None and dependency.uri:
            return dependency.uri
        return DEFAULT_DOWNLOAD_URI.format(version=self.version)

    def download_command(self) -> str:
        """Shell command that downloads the archive and extracts it into the SDK dir."""
        archive = Path(tempfile.gettempdir()) / f"dotnet.{self.version}.{ARCHIVE_FORMAT}"
        target = shlex.quote(str(self.sdk_dir))
        archive_arg = shlex.quote(str(archive))
        return (
            f"{shlex.quote(str(self.settings.download_script))} "
            f"{shlex.quote(self.download_uri())} {archive_arg}"
            f" && mkdir -p {target}"
            f" && tar xzf {archive_arg} -C {target}"
            f" && rm -f {archive_arg}"
        )

    def write_version_file(self, version: str) -> Path:
        """Record ``version`` in ``<build_dir>/.dotnet/VERSION``."""
        return write_version_file(self.sdk_dir, version, self.fs)

    def sdk_env(self) -> dict[str, str]:
        """Environment that puts the installed SDK in front for later commands."""
        path = self.shell.env.get("PATH") or os.environ.get("PATH", "")
        return {
            "PATH": f"{self.sdk_dir}:{path}" if path else str(self.sdk_dir),
            "HOME": str(self.build_dir),
            "DOTNET_SKIP_FIRST_TIME_EXPERIENCE": "true",
            "NUGET_XMLDOC_MODE": "skip",
        }

    def activate(self) -> None:
        """Apply ``sdk_env`` to the shell shared with the restore step."""
        if str(self.sdk_dir) in self.shell.env.get("PATH", "").split(":"):
            return
        self.shell.env.update(self.sdk_env())

