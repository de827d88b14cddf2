from __future__ import annotations
"""Process runtime for delegated build/removal commands.

Commands inherit the terminal so package-manager prompts and progress reach
the user; only the exit status is reported back.
"""

import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Callable, Protocol

from package_source_tool.domain.errors import ExternalActionError


class CommandRunner(Protocol):
    """Contract for executing one external command."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        """Execute command and return its exit status."""
        ...


class ShellCommandRunner:
    """Run a command as a child process attached to the current terminal."""

    def __init__(
        self,
        *,
        runner: Callable[..., subprocess.CompletedProcess[bytes]] = subprocess.run,
    ) -> None:
        self._runner = runner

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        try:
            completed = self._runner(
                list(command),
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
                check=False,
            )
        except FileNotFoundError as error:
            raise ExternalActionError(
                f"Cannot run '{command[0]}': executable or working directory not found"
                + (f" ({cwd})" if cwd is not None else "")
            ) from error
        except OSError as error:
            raise ExternalActionError(f"Cannot run '{command[0]}': {error}") from error

        return completed.returncode
