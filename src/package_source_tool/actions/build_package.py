from __future__ import annotations
"""Rule action building and installing a package from its working copy."""

import logging
import os
from collections.abc import Mapping

from package_source_tool.actions.command_runtime import CommandRunner
from package_source_tool.domain.actions import Action
from package_source_tool.domain.entities import ActionResult, LocalRepository


LOGGER = logging.getLogger(__name__)


class BuildPackageAction(Action):
    """Run `makepkg -sirc <name>` inside the working copy.

    `--noconfirm` is appended unless the user asked for an interactive run.
    """

    def __init__(
        self,
        runner: CommandRunner,
        *,
        executable: str = "makepkg",
        interactive: bool = False,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._runner = runner
        self._executable = executable
        self._interactive = interactive
        self._env = env

    def execute(self, repository: LocalRepository) -> ActionResult:
        command = [self._executable, "-sirc", repository.name]
        if not self._interactive:
            command.append("--noconfirm")

        env = dict(os.environ if self._env is None else self._env)
        env["PWD"] = str(repository.path)

        LOGGER.debug(
            "> %s",
            " ".join(command),
            extra={"event": "action.build.command", "package": repository.name, "cwd": str(repository.path)},
        )
        exit_code = self._runner.run(command, cwd=repository.path, env=env)

        if exit_code != 0:
            return ActionResult(
                action_name=self.name,
                success=False,
                message=f"failed to install '{repository.name}' [{exit_code}]",
                metadata={"exit_code": exit_code, "command": command},
            )

        return ActionResult(
            action_name=self.name,
            success=True,
            message=f"installed '{repository.name}'",
            metadata={"exit_code": exit_code, "command": command},
        )
