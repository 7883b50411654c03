"""
Shell command adapter — run command strings through bash.

Used for the download/extract step and for ``dotnet restore``. Output
is streamed to the caller's progress sink as it arrives so long-running
restores show progress in the staging log.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from typing import TextIO

from dotnet_buildpack.adapters.base import Shell

logger = logging.getLogger(__name__)

# Exit status reported when the command could not be started at all
EXIT_NOT_STARTED = 127


class SubprocessShell(Shell):
    """Execute commands with ``bash -c`` and return the exit status.

    The process environment is ``os.environ`` overlaid with ``self.env``.
    """

    def __init__(self, env: dict[str, str] | None = None, executable: str = "bash"):
        super().__init__(env)
        self._executable = executable

    @property
    def name(self) -> str:
        return self._executable

    def exec(
        self,
        command: str,
        out: TextIO | None = None,
        *,
        cwd: str | None = None,
    ) -> int:
        env = os.environ.copy()
        env.update(self.env)

        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        start = time.monotonic()

        try:
            proc = subprocess.Popen(
                [self._executable, "-c", command],
                cwd=cwd,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            logger.error("Cannot start %r: %s", command, e)
            if out is not None:
                out.write(f"Command could not be started: {e}\n")
            return EXIT_NOT_STARTED

        assert proc.stdout is not None
        with proc.stdout:
            for line in proc.stdout:
                if out is not None:
                    out.write(line)
        return_code = proc.wait()

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if return_code == 0:
            logger.debug("Command succeeded in %dms: %s", elapsed_ms, command)
        else:
            logger.warning(
                "Command exited with code %d after %dms: %s",
                return_code, elapsed_ms, command,
            )
        return return_code
