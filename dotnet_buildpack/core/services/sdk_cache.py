"""
SDK cache — decide whether a previously installed SDK can be reused.

Both the buildpack cache and the build directory use the same layout::

    <root>/.dotnet/VERSION     single line: the exact installed version
    <root>/.dotnet/...         SDK payload

The marker directory alone proves nothing. A cache hit requires the
recorded version to equal the resolved version exactly: any
difference, pre-release suffixes included, forces a reinstall.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotnet_buildpack.adapters.base import Filesystem
from dotnet_buildpack.adapters.shell.filesystem import LocalFilesystem

logger = logging.getLogger(__name__)

SDK_DIRNAME = ".dotnet"
VERSION_FILENAME = "VERSION"


def sdk_dir(root: Path) -> Path:
    """The SDK directory inside a build or cache root."""
    return Path(root) / SDK_DIRNAME


def read_version_file(sdk_root: Path, fs: Filesystem) -> str | None:
    """Read ``<sdk_root>/VERSION``; None when missing or unreadable.

    At most one trailing ``\\n`` is dropped; everything else, further
    lines and carriage returns included, is returned as written.
    """
    path = sdk_root / VERSION_FILENAME
    if not fs.is_file(path):
        return None
    try:
        content = fs.read_bytes(path).decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None
    return content[:-1] if content.endswith("\n") else content


def write_version_file(sdk_root: Path, version: str, fs: Filesystem) -> Path:
    """Record ``version`` in ``<sdk_root>/VERSION``, creating the directory."""
    fs.mkdir(sdk_root)
    path = sdk_root / VERSION_FILENAME
    fs.write_text(path, version)
    logger.debug("Wrote %s (%s)", path, version)
    return path


class SdkCache:
    """The SDK copy kept in the buildpack cache between builds."""

    def __init__(self, cache_dir: Path, fs: Filesystem | None = None):
        self.cache_dir = Path(cache_dir)
        self.fs = fs or LocalFilesystem()

    @property
    def sdk_dir(self) -> Path:
        return sdk_dir(self.cache_dir)

    def cached_version(self) -> str | None:
        """The version recorded in the cache, or None if there is no usable record."""
        if not self.fs.is_dir(self.sdk_dir):
            return None
        return read_version_file(self.sdk_dir, self.fs)

    def is_cached(self, version: str) -> bool:
        """Whether the cache holds exactly ``version``."""
        cached = self.cached_version()
        hit = cached is not None and cached == version
        logger.debug("Cache check for %s: cached=%r hit=%s", version, cached, hit)
        return hit

    def restore_to(self, build_dir: Path) -> bool:
        """Make the cached SDK visible in ``build_dir``.

        Returns False (and copies nothing) when the cache has no SDK or
        the build directory already holds the same version. A different
        SDK in the build directory is replaced.
        """
        target = sdk_dir(build_dir)
        cached = self.cached_version()
        if cached is None:
            return False
        if self.fs.is_dir(target):
            if read_version_file(target, self.fs) == cached:
                logger.debug("Build directory already has SDK %s", cached)
                return False
            self.fs.remove_tree(target)
        logger.info("Restoring cached SDK %s -> %s", self.sdk_dir, target)
        self.fs.copy_tree(self.sdk_dir, target)
        return True

    def save_from(self, build_dir: Path) -> bool:
        """Replace the cached SDK with the one installed in ``build_dir``."""
        source = sdk_dir(build_dir)
        if not self.fs.is_dir(source):
            logger.debug("Nothing to cache: %s does not exist", source)
            return False
        logger.info("Saving SDK %s -> %s", source, self.sdk_dir)
        self.fs.remove_tree(self.sdk_dir)
        self.fs.copy_tree(source, self.sdk_dir)
        return True
