"""Shared fakes for the package source tool tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from package_source_tool.adapters.filesystem.local_filesystem import LocalFileSystemAdapter
from package_source_tool.domain.actions import Action
from package_source_tool.domain.auth import AuthCache
from package_source_tool.domain.entities import ActionResult, LocalRepository
from package_source_tool.domain.errors import CloneError
from package_source_tool.domain.location import LocationResolver
from package_source_tool.domain.ports import ConfirmationPort, GitClientPort


class FakeGitClient(GitClientPort):
    """Creates the destination on success; leaves a partial one behind on failure."""

    def __init__(self, failing_ids: set[str] | None = None) -> None:
        self.failing_ids = failing_ids or set()
        self.calls: list[tuple[Path, str, str, AuthCache]] = []

    def clone(self, dest_path: Path, package_id: str, remote_url: str, auth_cache: AuthCache) -> None:
        self.calls.append((dest_path, package_id, remote_url, auth_cache))
        dest_path.mkdir(parents=True)
        if package_id in self.failing_ids:
            (dest_path / ".git").mkdir()
            raise CloneError(package_id, remote_url, "fatal: the remote end hung up unexpectedly")
        (dest_path / "PKGBUILD").write_text("pkgname=test\n")


class RecordingAction(Action):
    """Succeeds unless the repository name is mapped to a non-zero exit code."""

    def __init__(self, exit_codes: dict[str, int] | None = None, errors: dict[str, Exception] | None = None) -> None:
        self.exit_codes = exit_codes or {}
        self.errors = errors or {}
        self.executed: list[str] = []

    def execute(self, repository: LocalRepository) -> ActionResult:
        self.executed.append(repository.name)
        if repository.name in self.errors:
            raise self.errors[repository.name]
        exit_code = self.exit_codes.get(repository.name, 0)
        return ActionResult(
            action_name=self.name,
            success=exit_code == 0,
            message=f"{repository.name} [{exit_code}]",
            metadata={"exit_code": exit_code},
        )


class ScriptedConfirmation(ConfirmationPort):
    """Answers from a name -> bool mapping, defaulting to yes."""

    def __init__(self, answers: dict[str, bool] | None = None) -> None:
        self.answers = answers or {}
        self.questions: list[str] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        for name, answer in self.answers.items():
            if f"'{name}'" in question:
                return answer
        return True


@pytest.fixture
def resolver() -> LocationResolver:
    """Resolver bound to the default AUR base."""
    return LocationResolver()


@pytest.fixture
def filesystem() -> LocalFileSystemAdapter:
    return LocalFileSystemAdapter()


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Managed source root inside the pytest temporary directory."""
    return tmp_path / "aur"


@pytest.fixture
def make_installed(source_root: Path):
    """Create installed working copies by name."""

    def _make(*names: str) -> list[Path]:
        paths = []
        for name in names:
            path = source_root / name
            path.mkdir(parents=True)
            (path / "PKGBUILD").write_text(f"pkgname={name}\n")
            paths.append(path)
        return paths

    return _make


@pytest.fixture
def fake_git_client_cls():
    return FakeGitClient


@pytest.fixture
def recording_action_cls():
    return RecordingAction


@pytest.fixture
def scripted_confirmation_cls():
    return ScriptedConfirmation
