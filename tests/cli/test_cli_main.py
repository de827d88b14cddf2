"""End-to-end tests for the command line entry point with external processes faked."""
from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from package_source_tool.cli import main as cli_main
from package_source_tool.domain.entities import PackageSummary
from package_source_tool.domain.errors import SearchError


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host environment and global logging setup out of CLI runs."""
    for name in [
        "PKGSRC_ROOT",
        "PKGSRC_BASE_URL",
        "PKGSRC_GIT_USERNAME",
        "PKGSRC_GIT_PASSWORD",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli_main, "configure_logging", lambda *args, **kwargs: None)


@pytest.fixture
def command_runner(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace the process runner used for makepkg/pacman."""
    runner = MagicMock()
    runner.run.return_value = 0
    monkeypatch.setattr(cli_main, "ShellCommandRunner", lambda: runner)
    return runner


def test_list_prints_installed_names(source_root: Path, make_installed, capsys) -> None:
    make_installed("yay", "paru")

    exit_code = cli_main.main(["list", "--root", str(source_root)])

    assert exit_code == 0
    assert capsys.readouterr().out == "paru\nyay\n"


def test_list_with_bad_pattern_exits_non_zero(source_root: Path, make_installed, capsys) -> None:
    make_installed("yay")

    assert cli_main.main(["list", "-r", "--root", str(source_root), "y(ay"]) == 1
    assert capsys.readouterr().out == ""


def test_install_reports_per_target_outcome(
    source_root: Path, fake_git_client_cls, command_runner: MagicMock, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    git_client = fake_git_client_cls(failing_ids={"broken"})
    monkeypatch.setattr(cli_main, "ShellGitClientAdapter", lambda **kwargs: git_client)

    exit_code = cli_main.main(["install", "--root", str(source_root), "alpha", "broken"])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "  cloned alpha" in out
    assert "  failed broken: Failed to clone https://aur.archlinux.org/broken" in out
    assert "install: 1 error(s)" in out
    assert command_runner.run.call_count == 1
    assert command_runner.run.call_args[0][0][:3] == ["makepkg", "-sirc", "alpha"]
    assert not (source_root / "broken").exists()


def test_forced_remove(source_root: Path, make_installed, command_runner: MagicMock, capsys) -> None:
    make_installed("yay")
    command_runner.run.return_value = 1

    exit_code = cli_main.main(["rm", "-f", "--root", str(source_root), "yay"])

    assert exit_code == 1
    assert not (source_root / "yay").exists()
    assert " removed yay" in capsys.readouterr().out


def test_exit_code_is_clamped(source_root: Path, capsys) -> None:
    targets = [f"bad target {index}" for index in range(300)]

    exit_code = cli_main.main(["install", "--root", str(source_root), *targets])

    assert exit_code == 255
    assert "install: 300 error(s)" in capsys.readouterr().out


def test_search_prints_ranked_entries(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    index = MagicMock()
    index.search.return_value = [
        PackageSummary(name="paru", version="2.0", maintainer="morganamilo", popularity=10.0),
        PackageSummary(name="yay", version="12", description="AUR helper", maintainer="jguer", popularity=20.0),
    ]
    monkeypatch.setattr(cli_main, "AurRpcSearchAdapter", lambda **kwargs: index)
    monkeypatch.setattr(cli_main.shutil, "get_terminal_size", lambda *args, **kwargs: os.terminal_size((0, 24)))

    assert cli_main.main(["search", "aur", "helper"]) == 0

    assert capsys.readouterr().out == "jguer/yay 12 [20.0]\n    AUR helper\nmorganamilo/paru 2.0 [10.0]\n"
    index.search.assert_called_once_with(["aur", "helper"])


def test_search_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    index = MagicMock()
    index.search.side_effect = SearchError("AUR RPC request failed")
    monkeypatch.setattr(cli_main, "AurRpcSearchAdapter", lambda **kwargs: index)

    assert cli_main.main(["s", "x"]) == 1


def test_missing_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli_main.main([])

    assert exc_info.value.code == 2


def test_bad_environment_is_a_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FORMAT", "xml")

    with pytest.raises(SystemExit) as exc_info:
        cli_main.main(["list"])

    assert exc_info.value.code == 2


def test_format_entry_without_description() -> None:
    package = PackageSummary(name="orphan", popularity=0.0)

    assert cli_main.format_search_entry(package) == "orphan [0.0]"


def test_format_entry_wraps_description() -> None:
    package = PackageSummary(name="tool", description="one two three four five six", popularity=1.5)

    entry = cli_main.format_search_entry(package, columns=16)

    assert entry.splitlines() == ["tool [1.5]", "    one two", "    three four", "    five six"]
