from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Sequence

from package_source_tool.domain.auth import AuthCache, Credentials
from package_source_tool.domain.errors import CloneError
from package_source_tool.domain.location import remote_host
from package_source_tool.domain.ports import GitClientPort


_AUTH_FAILURE_MARKERS = (
    "authentication failed",
    "could not read username",
    "could not read password",
    "terminal prompts disabled",
    "http basic: access denied",
    "the requested url returned error: 401",
    "the requested url returned error: 403",
)


class ShellGitClientAdapter(GitClientPort):
    def __init__(
        self,
        *,
        git_executable: str = "git",
        timeout_seconds: float = 300.0,
        env: Mapping[str, str] | None = None,
        runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    ) -> None:
        self._git_executable = git_executable
        self._timeout_seconds = timeout_seconds
        self._env = env
        self._runner = runner
        self._logger = logging.getLogger(__name__)

    def clone(self, dest_path: Path, package_id: str, remote_url: str, auth_cache: AuthCache) -> None:
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise CloneError(package_id, remote_url, f"cannot create {dest_path.parent}: {error}") from error

        host = remote_host(remote_url)
        credentials = auth_cache.get(host) if host else None
        self._logger.info(
            "cloning repository",
            extra={
                "event": "git.clone.start",
                "package_id": package_id,
                "clone_url": remote_url,
                "local_path": str(dest_path),
                "cached_credentials": credentials is not None,
            },
        )

        completed = self._run_clone(dest_path, package_id, remote_url, credentials)

        if completed.returncode != 0 and self._should_negotiate(remote_url, host, credentials, completed, auth_cache):
            self._logger.info(
                "remote requires credentials",
                extra={"event": "git.clone.auth_required", "package_id": package_id, "host": host},
            )
            credentials = auth_cache.negotiate(host)
            if credentials is not None:
                shutil.rmtree(dest_path, ignore_errors=True)
                completed = self._run_clone(dest_path, package_id, remote_url, credentials)

        if completed.returncode != 0:
            details = _command_details(completed)
            self._logger.error(
                "git clone failed",
                extra={
                    "event": "git.clone.error",
                    "package_id": package_id,
                    "clone_url": remote_url,
                    "return_code": completed.returncode,
                    "details": details,
                },
            )
            raise CloneError(package_id, remote_url, details)

        self._logger.info(
            "clone completed",
            extra={"event": "git.clone.success", "package_id": package_id, "local_path": str(dest_path)},
        )

    @staticmethod
    def _should_negotiate(
        remote_url: str,
        host: str,
        credentials: Credentials | None,
        completed: subprocess.CompletedProcess[str],
        auth_cache: AuthCache,
    ) -> bool:
        if credentials is not None or not host or auth_cache.has_negotiated(host):
            return False
        if not remote_url.lower().startswith(("http://", "https://")):
            return False
        output = f"{completed.stderr or ''}\n{completed.stdout or ''}".lower()
        return any(marker in output for marker in _AUTH_FAILURE_MARKERS)

    def _run_clone(
        self,
        dest_path: Path,
        package_id: str,
        remote_url: str,
        credentials: Credentials | None,
    ) -> subprocess.CompletedProcess[str]:
        command = [self._git_executable, "clone", remote_url, str(dest_path)]
        try:
            return self._run_git(command, cwd=dest_path.parent, env=self._build_env(credentials))
        except FileNotFoundError as error:
            raise CloneError(
                package_id, remote_url, f"Git executable '{self._git_executable}' was not found in PATH"
            ) from error
        except subprocess.TimeoutExpired as error:
            raise CloneError(
                package_id, remote_url, f"Git command timed out after {self._timeout_seconds}s: {' '.join(command)}"
            ) from error

    def _build_env(self, credentials: Credentials | None) -> dict[str, str]:
        env = dict(os.environ if self._env is None else self._env)
        env["GIT_TERMINAL_PROMPT"] = "0"
        if credentials is not None:
            # passed through the environment so secrets stay out of argv
            env["GIT_CONFIG_COUNT"] = "1"
            env["GIT_CONFIG_KEY_0"] = "http.extraHeader"
            env["GIT_CONFIG_VALUE_0"] = f"Authorization: {credentials.basic_authorization()}"
        return env

    def _run_git(self, command: Sequence[str], cwd: Path, env: dict[str, str]) -> subprocess.CompletedProcess[str]:
        return self._runner(
            list(command),
            cwd=str(cwd),
            env=env,
            check=False,
            text=True,
            capture_output=True,
            timeout=self._timeout_seconds,
        )


def _command_details(completed: subprocess.CompletedProcess[str]) -> str:
    stderr = (completed.stderr or "").strip()
    stdout = (completed.stdout or "").strip()
    return stderr or stdout or f"git exited with status {completed.returncode}"
