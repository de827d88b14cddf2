"""Tests for the interactive terminal collaborators."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from package_source_tool.adapters.prompt.terminal_prompt import (
    TerminalConfirmationPrompt,
    TerminalCredentialProvider,
)
from package_source_tool.domain.auth import Credentials


@pytest.mark.parametrize(
    "answer, expected",
    [("y", True), ("YES", True), (" yes ", True), ("n", False), ("", False), ("maybe", False)],
)
def test_confirmation_answers(answer: str, expected: bool) -> None:
    input_fn = MagicMock(return_value=answer)

    assert TerminalConfirmationPrompt(input_fn=input_fn).confirm("remove 'yay'?") is expected
    input_fn.assert_called_once_with("remove 'yay'? [y/N] ")


def test_confirmation_eof_means_no() -> None:
    prompt = TerminalConfirmationPrompt(input_fn=MagicMock(side_effect=EOFError))

    assert prompt.confirm("remove 'yay'?") is False


def tty(is_tty: bool = True) -> MagicMock:
    stream = MagicMock()
    stream.isatty.return_value = is_tty
    return stream


def test_credentials_are_prompted_on_a_terminal() -> None:
    password_fn = MagicMock(return_value="s3cret")
    provider = TerminalCredentialProvider(
        input_fn=MagicMock(return_value="alice"),
        password_fn=password_fn,
        stdin=tty(),
    )

    assert provider.request("aur.archlinux.org") == Credentials("alice", "s3cret")
    password_fn.assert_called_once_with("Password for 'alice@aur.archlinux.org': ")


def test_no_prompt_without_terminal() -> None:
    input_fn = MagicMock()
    provider = TerminalCredentialProvider(input_fn=input_fn, password_fn=MagicMock(), stdin=tty(False))

    assert provider.request("aur.archlinux.org") is None
    input_fn.assert_not_called()


def test_empty_username_means_no_credentials() -> None:
    password_fn = MagicMock()
    provider = TerminalCredentialProvider(input_fn=MagicMock(return_value="  "), password_fn=password_fn, stdin=tty())

    assert provider.request("github.com") is None
    password_fn.assert_not_called()
