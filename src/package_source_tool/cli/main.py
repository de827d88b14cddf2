from __future__ import annotations

import argparse
import logging
import os
import shutil
import textwrap
from collections.abc import Sequence
from typing import Callable

from package_source_tool.actions import BuildPackageAction, ShellCommandRunner, UninstallPackageAction
from package_source_tool.adapters.filesystem.local_filesystem import LocalFileSystemAdapter
from package_source_tool.adapters.git_client.shell_git_client import ShellGitClientAdapter
from package_source_tool.adapters.package_index.aur_rpc import AurRpcSearchAdapter
from package_source_tool.adapters.prompt.terminal_prompt import (
    TerminalConfirmationPrompt,
    TerminalCredentialProvider,
)
from package_source_tool.application.use_cases.install_packages import InstallPackages
from package_source_tool.application.use_cases.list_packages import ListPackages
from package_source_tool.application.use_cases.remove_packages import RemovePackages
from package_source_tool.application.use_cases.repository_matcher import RepositoryMatcher
from package_source_tool.application.use_cases.search_packages import SearchPackages
from package_source_tool.cli.config import (
    AppConfig,
    InstallOptions,
    ListOptions,
    RemoveOptions,
    SearchOptions,
    load_config,
)
from package_source_tool.domain.auth import AuthCache, Credentials
from package_source_tool.domain.entities import BatchOutcome, PackageSummary
from package_source_tool.domain.errors import SearchError
from package_source_tool.domain.location import LocationResolver, remote_host
from package_source_tool.logging_utils import configure_logging


TAB_SIZE = 4
LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pkgsrc",
        description="Search, install and remove packages built from AUR-style git sources.",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Show commands and full error output.")
    common.add_argument(
        "--root",
        required=False,
        help="Directory holding one working copy per package. Falls back to PKGSRC_ROOT.",
    )

    subparsers = parser.add_subparsers(dest="subcommand", required=True, metavar="COMMAND")
    target_help = "Package name relative to the package index, or a full git URL."

    install = subparsers.add_parser("install", aliases=["i"], parents=[common], help="Install packages")
    install.add_argument("targets", nargs="*", help=target_help)
    install.add_argument("-i", "--interactive", action="store_true", help="Run makepkg interactively")
    install.set_defaults(command="install")

    listing = subparsers.add_parser("list", parents=[common], help="List installed packages")
    listing.add_argument("targets", nargs="*", help=target_help)
    listing.add_argument("-r", "--regex", action="store_true", help="Treat targets as regular expressions")
    listing.set_defaults(command="list")

    remove = subparsers.add_parser(
        "remove",
        aliases=["rm", "uninstall"],
        parents=[common],
        help="Uninstall packages",
    )
    remove.add_argument("targets", nargs="*", help=target_help)
    remove.add_argument("-r", "--regex", action="store_true", help="Treat targets as regular expressions")
    remove.add_argument("-f", "--force", action="store_true", help="Skip confirmation and always delete sources")
    remove.add_argument("-i", "--interactive", action="store_true", help="Run pacman interactively")
    remove.set_defaults(command="remove")

    search = subparsers.add_parser("search", aliases=["s"], parents=[common], help="Search for packages")
    search.add_argument("keywords", nargs="+", help="Search keywords")
    search.set_defaults(command="search")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = load_config(args=args, env=os.environ)
    except ValueError as error:
        parser.error(str(error))

    configure_logging(config.log_level, config.log_format)
    LOGGER.debug(
        "cli configuration resolved",
        extra={
            "event": "cli.config.resolved",
            "command": type(config.command).__name__,
            "source_root": str(config.source_root),
            "base_url": config.base_url,
        },
    )

    handler = _HANDLERS[type(config.command)]
    return handler(config.command, config)


def _run_install(options: InstallOptions, config: AppConfig) -> int:
    use_case = InstallPackages(
        resolver=LocationResolver(config.base_url),
        git_client=ShellGitClientAdapter(
            git_executable=config.git_executable,
            timeout_seconds=config.git_timeout_seconds,
        ),
        filesystem=LocalFileSystemAdapter(),
        build_action=BuildPackageAction(
            ShellCommandRunner(),
            executable=config.makepkg_executable,
            interactive=options.interactive,
        ),
    )
    outcome = use_case.execute(list(options.targets), config.source_root, _build_auth_cache(config))
    _print_outcome(outcome, verbose=options.verbose)
    return outcome.exit_code


def _run_list(options: ListOptions, config: AppConfig) -> int:
    use_case = ListPackages(
        resolver=LocationResolver(config.base_url),
        matcher=RepositoryMatcher(LocalFileSystemAdapter()),
    )
    outcome = use_case.execute(list(options.targets), config.source_root, use_regex=options.use_regex)
    for item in outcome.targets:
        if item.status == "listed":
            print(item.target)
    return outcome.exit_code


def _run_remove(options: RemoveOptions, config: AppConfig) -> int:
    filesystem = LocalFileSystemAdapter()
    use_case = RemovePackages(
        resolver=LocationResolver(config.base_url),
        filesystem=filesystem,
        matcher=RepositoryMatcher(filesystem),
        uninstall_action=UninstallPackageAction(
            ShellCommandRunner(),
            executable=config.pacman_executable,
            interactive=options.interactive,
        ),
        confirmation=TerminalConfirmationPrompt(),
    )
    outcome = use_case.execute(
        list(options.targets),
        config.source_root,
        use_regex=options.use_regex,
        force=options.force,
    )
    _print_outcome(outcome, verbose=options.verbose)
    return outcome.exit_code


def _run_search(options: SearchOptions, config: AppConfig) -> int:
    use_case = SearchPackages(
        AurRpcSearchAdapter(base_url=config.base_url, timeout_seconds=config.search_timeout_seconds)
    )
    try:
        packages = use_case.execute(list(options.keywords))
    except SearchError as error:
        LOGGER.error("search failed", extra={"event": "cli.search.failed", "error": str(error)})
        return 1

    columns = shutil.get_terminal_size(fallback=(0, 0)).columns or None
    for package in packages:
        print(format_search_entry(package, columns))
    return 0


_HANDLERS: dict[type, Callable[..., int]] = {
    InstallOptions: _run_install,
    ListOptions: _run_list,
    RemoveOptions: _run_remove,
    SearchOptions: _run_search,
}


def _build_auth_cache(config: AppConfig) -> AuthCache:
    seed: dict[str, Credentials] = {}
    if config.git_username and config.git_password:
        seed[remote_host(config.base_url)] = Credentials(config.git_username, config.git_password)
    return AuthCache(TerminalCredentialProvider(), seed=seed)


def format_search_entry(package: PackageSummary, columns: int | None = None) -> str:
    header = "".join(
        [
            f"{package.maintainer}/" if package.maintainer else "",
            package.name,
            f" {package.version}" if package.version else "",
            f" [{package.popularity}]",
        ]
    )
    if not package.description:
        return header

    indent = " " * TAB_SIZE
    if columns and columns > TAB_SIZE + 1:
        description = textwrap.fill(
            package.description,
            width=columns,
            initial_indent=indent,
            subsequent_indent=indent,
        )
    else:
        description = f"{indent}{package.description}"
    return f"{header}\n{description}"


def _print_outcome(outcome: BatchOutcome, *, verbose: bool) -> None:
    for item in outcome.targets:
        line = f"{item.status:>8} {item.target}"
        if item.message and (item.failed or verbose):
            message = item.message if verbose else item.message.splitlines()[0]
            line = f"{line}: {message}"
        print(line)

    if outcome.error_count:
        print(f"{outcome.command}: {outcome.error_count} error(s)")
