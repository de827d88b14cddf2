from __future__ import annotations
"""Rule action removing an installed package through the system package manager."""

import logging
import os
from collections.abc import Mapping

from package_source_tool.actions.command_runtime import CommandRunner
from package_source_tool.domain.actions import Action
from package_source_tool.domain.entities import ActionResult, LocalRepository


LOGGER = logging.getLogger(__name__)


class UninstallPackageAction(Action):
    """Run `pacman -Rns <name>`, through `sudo` unless already running as root."""

    def __init__(
        self,
        runner: CommandRunner,
        *,
        executable: str = "pacman",
        interactive: bool = False,
        sudo_executable: str = "sudo",
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._runner = runner
        self._executable = executable
        self._interactive = interactive
        self._sudo_executable = sudo_executable
        self._env = env

    def execute(self, repository: LocalRepository) -> ActionResult:
        command = self._build_command(repository.name)

        LOGGER.debug(
            "> %s",
            " ".join(command),
            extra={"event": "action.uninstall.command", "package": repository.name},
        )
        exit_code = self._runner.run(command)

        if exit_code != 0:
            return ActionResult(
                action_name=self.name,
                success=False,
                message=f"failed to uninstall '{repository.name}' [{exit_code}]",
                metadata={"exit_code": exit_code, "command": command},
            )

        return ActionResult(
            action_name=self.name,
            success=True,
            message=f"uninstalled '{repository.name}'",
            metadata={"exit_code": exit_code, "command": command},
        )

    def _build_command(self, name: str) -> list[str]:
        command = [self._executable, "-Rns", name]
        if not self._interactive:
            command.append("--noconfirm")

        env = os.environ if self._env is None else self._env
        if env.get("USER") != "root":
            command.insert(0, self._sudo_executable)
        return command
