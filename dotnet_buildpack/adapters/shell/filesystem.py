"""
Filesystem adapter — local disk operations for the staging services.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from dotnet_buildpack.adapters.base import Filesystem

logger = logging.getLogger(__name__)


class LocalFilesystem(Filesystem):
    """``Filesystem`` backed by ``pathlib`` and ``shutil``."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_bytes(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def mkdir(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def glob(self, root: Path, pattern: str) -> list[Path]:
        if not root.is_dir():
            return []
        return sorted(root.glob(pattern))

    def copy_tree(self, source: Path, target: Path) -> None:
        logger.debug("Copying %s -> %s", source, target)
        shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)

    def remove_tree(self, path: Path) -> None:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
