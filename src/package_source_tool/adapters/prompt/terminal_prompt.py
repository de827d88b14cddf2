from __future__ import annotations
"""Interactive terminal collaborators: yes/no confirmation and credential entry."""

import getpass
import sys
from typing import Callable, TextIO

from package_source_tool.domain.auth import Credentials
from package_source_tool.domain.ports import ConfirmationPort


_YES_ANSWERS = {"y", "yes"}


class TerminalConfirmationPrompt(ConfirmationPort):
    """Ask `question [y/N]` on the terminal; anything but yes means no."""

    def __init__(self, *, input_fn: Callable[[str], str] = input) -> None:
        self._input_fn = input_fn

    def confirm(self, question: str) -> bool:
        try:
            answer = self._input_fn(f"{question} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in _YES_ANSWERS


class TerminalCredentialProvider:
    """Prompt for a username and password when a remote asks for them."""

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] = input,
        password_fn: Callable[[str], str] = getpass.getpass,
        stdin: TextIO | None = None,
    ) -> None:
        self._input_fn = input_fn
        self._password_fn = password_fn
        self._stdin = stdin

    def request(self, host: str) -> Credentials | None:
        stdin = self._stdin or sys.stdin
        if not stdin.isatty():
            return None
        try:
            username = self._input_fn(f"Username for '{host}': ").strip()
            if not username:
                return None
            password = self._password_fn(f"Password for '{username}@{host}': ")
        except EOFError:
            return None
        return Credentials(username=username, password=password)
