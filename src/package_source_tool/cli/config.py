from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Union

from package_source_tool.domain.location import DEFAULT_BASE_URL, LocationResolver
from package_source_tool.logging_utils import LOG_FORMATS


DEFAULT_SOURCE_ROOT = "~/.pkgsrc/aur"
SUPPORTED_COMMANDS = {"install", "list", "remove", "search"}


@dataclass(frozen=True, slots=True)
class InstallOptions:
    targets: tuple[str, ...]
    interactive: bool = False
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class ListOptions:
    targets: tuple[str, ...]
    use_regex: bool = False
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class RemoveOptions:
    targets: tuple[str, ...]
    use_regex: bool = False
    force: bool = False
    interactive: bool = False
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class SearchOptions:
    keywords: tuple[str, ...]
    verbose: bool = False


Command = Union[InstallOptions, ListOptions, RemoveOptions, SearchOptions]


@dataclass(slots=True)
class AppConfig:
    command: Command
    source_root: Path
    base_url: str
    log_level: str
    log_format: str
    git_executable: str
    git_timeout_seconds: float
    git_username: str | None
    git_password: str | None
    search_timeout_seconds: float
    makepkg_executable: str
    pacman_executable: str


def load_config(args, env: Mapping[str, str]) -> AppConfig:
    command = _build_command(args)

    source_root_raw = (
        _normalize_empty(getattr(args, "root", None))
        or _normalize_empty(env.get("PKGSRC_ROOT"))
        or DEFAULT_SOURCE_ROOT
    )
    base_url = _normalize_empty(env.get("PKGSRC_BASE_URL")) or DEFAULT_BASE_URL
    LocationResolver(base_url)

    log_level = "DEBUG" if command.verbose else (_normalize_empty(env.get("LOG_LEVEL")) or "INFO").upper()
    log_format = (_normalize_empty(env.get("LOG_FORMAT")) or "text").lower()
    if log_format not in LOG_FORMATS:
        valid = ", ".join(sorted(LOG_FORMATS))
        raise ValueError(f"Unsupported LOG_FORMAT '{log_format}'. Allowed values: {valid}")

    git_username = _normalize_empty(env.get("PKGSRC_GIT_USERNAME"))
    git_password = _normalize_empty(env.get("PKGSRC_GIT_PASSWORD"))
    if bool(git_username) != bool(git_password):
        raise ValueError("PKGSRC_GIT_USERNAME and PKGSRC_GIT_PASSWORD must be set together")

    return AppConfig(
        command=command,
        source_root=Path(source_root_raw).expanduser(),
        base_url=base_url,
        log_level=log_level,
        log_format=log_format,
        git_executable=_normalize_empty(env.get("PKGSRC_GIT_EXECUTABLE")) or "git",
        git_timeout_seconds=_parse_seconds(env.get("PKGSRC_GIT_TIMEOUT_SECONDS"), "PKGSRC_GIT_TIMEOUT_SECONDS", 300.0),
        git_username=git_username,
        git_password=git_password,
        search_timeout_seconds=_parse_seconds(
            env.get("PKGSRC_SEARCH_TIMEOUT_SECONDS"), "PKGSRC_SEARCH_TIMEOUT_SECONDS", 30.0
        ),
        makepkg_executable=_normalize_empty(env.get("PKGSRC_MAKEPKG_EXECUTABLE")) or "makepkg",
        pacman_executable=_normalize_empty(env.get("PKGSRC_PACMAN_EXECUTABLE")) or "pacman",
    )


def _build_command(args) -> Command:
    name = getattr(args, "command", None)
    if name not in SUPPORTED_COMMANDS:
        valid = ", ".join(sorted(SUPPORTED_COMMANDS))
        raise ValueError(f"Unknown command '{name}'. Allowed values: {valid}")

    verbose = bool(getattr(args, "verbose", False))
    if name == "search":
        keywords = tuple(item for item in (_normalize_empty(k) for k in args.keywords) if item)
        if not keywords:
            raise ValueError("search requires at least one keyword")
        return SearchOptions(keywords=keywords, verbose=verbose)

    targets = tuple(args.targets or ())
    if name == "install":
        return InstallOptions(targets=targets, interactive=args.interactive, verbose=verbose)
    if name == "list":
        return ListOptions(targets=targets, use_regex=args.regex, verbose=verbose)
    return RemoveOptions(
        targets=targets,
        use_regex=args.regex,
        force=args.force,
        interactive=args.interactive,
        verbose=verbose,
    )


def _parse_seconds(value: str | None, name: str, default: float) -> float:
    raw = _normalize_empty(value)
    if raw is None:
        return default
    try:
        parsed = float(raw)
    except ValueError as error:
        raise ValueError(f"{name} must be a number") from error
    if parsed <= 0:
        raise ValueError(f"{name} must be greater than 0")
    return parsed


def _normalize_empty(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None
