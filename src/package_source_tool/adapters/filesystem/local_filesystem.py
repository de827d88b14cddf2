from __future__ import annotations

import shutil
from pathlib import Path

from package_source_tool.domain.errors import FilesystemError
from package_source_tool.domain.ports import FileSystemPort


class LocalFileSystemAdapter(FileSystemPort):
    def ensure_directory(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise FilesystemError(f"Cannot create directory {path}: {error}") from error

    def path_exists(self, path: Path) -> bool:
        return path.exists()

    def list_directories(self, path: Path) -> list[Path]:
        if not path.exists():
            return []
        try:
            entries = [entry for entry in path.iterdir() if entry.is_dir()]
        except OSError as error:
            raise FilesystemError(f"Cannot read directory {path}: {error}") from error
        return sorted(entries, key=lambda entry: entry.name)

    def force_remove(self, path: Path) -> None:
        if not path.exists() and not path.is_symlink():
            return
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as error:
            raise FilesystemError(f"Cannot remove {path}: {error}") from error
