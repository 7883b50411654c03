"""
SDK version resolution — which .NET SDK this build installs.

The app may pin an SDK in ``global.json``::

    {"sdk": {"version": "1.0.0-preview2-003121"}}

A pin the manifest can satisfy (exactly or through a wildcard) wins.
No pin, or a pin the manifest cannot satisfy, means the manifest's
default. A manifest that has no default is a configuration error:
resolution never yields an empty version.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TextIO

from dotnet_buildpack.adapters.base import Filesystem
from dotnet_buildpack.adapters.shell.filesystem import LocalFilesystem
from dotnet_buildpack.core.config.manifest_loader import ManifestError
from dotnet_buildpack.core.models.manifest import Manifest

logger = logging.getLogger(__name__)

SDK_DEPENDENCY = "dotnet"
GLOBAL_JSON = "global.json"


class DotnetSdkVersion:
    """Resolve the SDK version for one build directory.

    The result is computed on first use and memoised: every later
    caller in the same build sees the same string.
    """

    def __init__(
        self,
        build_dir: Path,
        manifest: Manifest,
        out: TextIO | None = None,
        fs: Filesystem | None = None,
    ):
        self.build_dir = Path(build_dir)
        self.manifest = manifest
        self.out = out
        self.fs = fs or LocalFilesystem()
        self._resolved: str | None = None

    @property
    def version(self) -> str:
        return self.resolve()

    def resolve(self) -> str:
        """Return the exact SDK version to install.

        Raises:
            ManifestError: If the manifest declares no default SDK.
        """
        if self._resolved is not None:
            return self._resolved

        default = self.manifest.default_version(SDK_DEPENDENCY)
        if not default:
            raise ManifestError(
                f"Manifest declares no default version for '{SDK_DEPENDENCY}'"
            )

        pinned = self.pinned_version()
        if pinned is None:
            logger.debug("No SDK pinned in %s; using default %s", GLOBAL_JSON, default)
            self._resolved = default
            return default

        matched = self.manifest.match_version(SDK_DEPENDENCY, pinned)
        if matched is None:
            message = (
                f"SDK {pinned} in {GLOBAL_JSON} is not available from this buildpack; "
                f"using {default}"
            )
            logger.warning(message)
            if self.out is not None:
                self.out.write(f"       WARNING: {message}\n")
            self._resolved = default
            return default

        logger.info("Resolved pinned SDK %s to %s", pinned, matched)
        self._resolved = matched
        return matched

    def pinned_version(self) -> str | None:
        """The SDK version requested by ``global.json``, if any."""
        path = self.build_dir / GLOBAL_JSON
        if not self.fs.is_file(path):
            return None

        try:
            # Visual Studio writes global.json with a BOM
            data = json.loads(self.fs.read_text(path).lstrip("\ufeff"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable %s: %s", path, e)
            return None

        sdk = data.get("sdk") if isinstance(data, dict) else None
        version = sdk.get("version") if isinstance(sdk, dict) else None
        if isinstance(version, str) and version.strip():
            return version.strip()
        return None
