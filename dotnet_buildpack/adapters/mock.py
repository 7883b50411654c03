"""
Mock shell — test double for every command the staging services run.

Records each command instead of running it. By default every command
succeeds; individual commands can be configured to fail or print
output by matching a regular expression against the command string.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TextIO

from dotnet_buildpack.adapters.base import Shell


@dataclass
class MockCall:
    """One recorded ``exec`` invocation."""

    command: str
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)


@dataclass
class _Response:
    pattern: re.Pattern[str]
    return_code: int
    output: str


class MockShell(Shell):
    """Universal mock shell for testing.

    Responses are checked in registration order; the first whose
    pattern matches the command wins. Unmatched commands return
    ``default_return_code``.
    """

    def __init__(
        self,
        shell_name: str = "mock-shell",
        default_return_code: int = 0,
        default_output: str = "",
        env: dict[str, str] | None = None,
    ):
        super().__init__(env)
        self._name = shell_name
        self._default_return_code = default_return_code
        self._default_output = default_output
        self._responses: list[_Response] = []
        self._call_log: list[MockCall] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[MockCall]:
        """All invocations this mock has received."""
        return self._call_log

    @property
    def commands(self) -> list[str]:
        """Command strings in the order they were run."""
        return [call.command for call in self._call_log]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_response(self, pattern: str, return_code: int = 0, output: str = "") -> None:
        """Configure commands matching ``pattern`` to print and exit."""
        self._responses.append(_Response(re.compile(pattern), return_code, output))

    def set_failure(self, pattern: str, return_code: int = 1, output: str = "") -> None:
        """Configure commands matching ``pattern`` to fail."""
        self.set_response(pattern, return_code=return_code, output=output)

    def exec(
        self,
        command: str,
        out: TextIO | None = None,
        *,
        cwd: str | None = None,
    ) -> int:
        self._call_log.append(MockCall(command=command, cwd=cwd, env=dict(self.env)))

        return_code, output = self._default_return_code, self._default_output
        for response in self._responses:
            if response.pattern.search(command):
                return_code, output = response.return_code, response.output
                break

        if output and out is not None:
            out.write(output)
        return return_code

