from __future__ import annotations
"""Hexagonal architecture port interfaces.

Use cases depend only on these abstractions. Adapters provide the concrete
shell, filesystem, HTTP and terminal implementations.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .auth import AuthCache
from .entities import PackageSummary


class GitClientPort(ABC):
    """Clone capability used by the install workflow."""

    @abstractmethod
    def clone(self, dest_path: Path, package_id: str, remote_url: str, auth_cache: AuthCache) -> None:
        """Materialize `remote_url` at `dest_path`.

        Raises:
            CloneError: On transport, authentication or disk failure. The
                caller is responsible for removing any partial `dest_path`.
        """
        raise NotImplementedError


class FileSystemPort(ABC):
    """Filesystem operations abstracted for testability and portability."""

    @abstractmethod
    def ensure_directory(self, path: Path) -> None:
        """Ensure target directory exists (create recursively if needed)."""
        raise NotImplementedError

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Return whether a path exists."""
        raise NotImplementedError

    @abstractmethod
    def list_directories(self, path: Path) -> list[Path]:
        """Return immediate sub-directories sorted by name.

        A missing `path` yields an empty list; an unreadable one raises
        `FilesystemError`.
        """
        raise NotImplementedError

    @abstractmethod
    def force_remove(self, path: Path) -> None:
        """Recursively delete `path`; a missing path is not an error."""
        raise NotImplementedError


class ConfirmationPort(ABC):
    """Interactive yes/no question."""

    @abstractmethod
    def confirm(self, question: str) -> bool:
        raise NotImplementedError


class PackageSearchPort(ABC):
    """Remote package index lookup."""

    @abstractmethod
    def search(self, keywords: list[str]) -> list[PackageSummary]:
        """Return index entries matching all keywords."""
        raise NotImplementedError
