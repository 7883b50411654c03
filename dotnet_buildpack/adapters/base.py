"""
Adapter base — the contracts between the staging services and the outside world.

The installer and restorer never spawn processes or touch the disk
directly: they go through a ``Shell`` and a ``Filesystem``. Production
code wires in the subprocess and local-disk implementations; tests wire
in ``MockShell`` and temporary directories.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TextIO


class Shell(ABC):
    """Abstract command runner.

    Commands are plain strings run through a POSIX shell. The result is
    the process exit status: 0 is success, anything else is failure.
    Callers decide whether a non-zero status is fatal.

    ``env`` holds variables merged into the environment of every command
    this shell runs (e.g. a PATH that puts the installed SDK first).
    """

    def __init__(self, env: dict[str, str] | None = None):
        self.env: dict[str, str] = dict(env or {})

    @property
    @abstractmethod
    def name(self) -> str:
        """The shell identifier (e.g., 'bash', 'mock-shell')."""

    @abstractmethod
    def exec(
        self,
        command: str,
        out: TextIO | None = None,
        *,
        cwd: str | None = None,
    ) -> int:
        """Run ``command`` to completion and return its exit status.

        Combined stdout/stderr is forwarded line by line to ``out``
        when given. Blocks until the process exits; there is no timeout.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class Filesystem(ABC):
    """Abstract filesystem access used by the staging services."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Whether anything exists at ``path``."""

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Whether ``path`` is a directory."""

    @abstractmethod
    def is_file(self, path: Path) -> bool:
        """Whether ``path`` is a regular file."""

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file. Raises ``OSError`` when unreadable."""

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """Write a UTF-8 text file, creating parent directories."""

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """Read a file verbatim. Raises ``OSError`` when unreadable."""

    @abstractmethod
    def write_bytes(self, path: Path, content: bytes) -> None:
        """Write a file verbatim, creating parent directories."""

    @abstractmethod
    def mkdir(self, path: Path) -> None:
        """Create a directory and its parents; no-op if present."""

    @abstractmethod
    def glob(self, root: Path, pattern: str) -> list[Path]:
        """Sorted paths under ``root`` matching ``pattern``."""

    @abstractmethod
    def copy_tree(self, source: Path, target: Path) -> None:
        """Recursively copy ``source`` into ``target``."""

    @abstractmethod
    def remove_tree(self, path: Path) -> None:
        """Recursively delete ``path``; no-op if absent."""
