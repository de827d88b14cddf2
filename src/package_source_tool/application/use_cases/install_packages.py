from __future__ import annotations
"""Application use case: clone (or reuse) working copies, then build them."""

from dataclasses import dataclass
import logging
from pathlib import Path
from collections.abc import Sequence

from package_source_tool.application.use_cases.batch import for_each_target, resolve_targets, unique_by_id
from package_source_tool.domain.actions import Action
from package_source_tool.domain.auth import AuthCache
from package_source_tool.domain.entities import BatchOutcome, LocalRepository, Location
from package_source_tool.domain.errors import CloneError, ExternalActionError, FilesystemError
from package_source_tool.domain.location import LocationResolver
from package_source_tool.domain.ports import FileSystemPort, GitClientPort


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class InstallPackages:
    """Two-phase install orchestration.

    Responsibilities:
    - resolve every target to a `Location`, once per id
    - phase 1: reuse `<source_root>/<id>` when present, otherwise clone it;
      a failed clone is cleaned up and dropped from phase 2
    - phase 2: run the build action for every materialized working copy
    - never stop early; every failure is one increment of `error_count`
    """

    resolver: LocationResolver
    git_client: GitClientPort
    filesystem: FileSystemPort
    build_action: Action

    def execute(
        self,
        raw_targets: Sequence[str],
        source_root: Path,
        auth_cache: AuthCache,
    ) -> BatchOutcome:
        """Install every target.

        Args:
            raw_targets: Shorthand names or remote URLs, in processing order.
            source_root: Managed directory holding one working copy per id.
            auth_cache: Credential cache shared by every clone of this batch.

        Returns:
            `BatchOutcome` with one record per stage reached by each target.
        """
        outcome = BatchOutcome(command="install")
        locations = unique_by_id(resolve_targets(self.resolver, raw_targets, outcome))
        if not locations:
            LOGGER.info(
                "nothing to install",
                extra={"event": "install.empty", "error_count": outcome.error_count},
            )
            return outcome

        try:
            self.filesystem.ensure_directory(source_root)
        except FilesystemError as error:
            LOGGER.error(
                "source root unavailable",
                extra={"event": "install.source_root.failed", "root": str(source_root), "error": str(error)},
            )
            outcome.record_failure(str(source_root), "setup", error)
            return outcome

        repositories = for_each_target(
            locations,
            lambda location: self._materialize(location, source_root, auth_cache, outcome),
            outcome,
            stage="clone",
            name=lambda location: location.id,
        )

        LOGGER.info(
            "installing...",
            extra={"event": "install.build.start", "count": len(repositories)},
        )
        for_each_target(
            repositories,
            lambda repository: self._build(repository, outcome),
            outcome,
            stage="build",
            name=lambda repository: repository.name,
        )

        LOGGER.info(
            "install batch completed",
            extra={
                "event": "install.completed",
                "target_count": len(raw_targets),
                "error_count": outcome.error_count,
            },
        )
        return outcome

    def _materialize(
        self,
        location: Location,
        source_root: Path,
        auth_cache: AuthCache,
        outcome: BatchOutcome,
    ) -> LocalRepository:
        path = source_root / location.id
        if self.filesystem.path_exists(path):
            LOGGER.info(
                "working copy already present",
                extra={"event": "install.clone.reused", "package_id": location.id, "local_path": str(path)},
            )
            outcome.record(location.id, "clone", "reused")
            return LocalRepository(path)

        try:
            self.git_client.clone(path, location.id, location.remote_url, auth_cache)
        except CloneError:
            self._discard_partial(path)
            raise

        outcome.record(location.id, "clone", "cloned")
        return LocalRepository(path)

    def _discard_partial(self, path: Path) -> None:
        try:
            self.filesystem.force_remove(path)
        except FilesystemError as error:
            LOGGER.error(
                "could not clean up partial clone",
                extra={"event": "install.clone.cleanup_failed", "local_path": str(path), "error": str(error)},
            )

    def _build(self, repository: LocalRepository, outcome: BatchOutcome) -> LocalRepository:
        result = self.build_action.execute(repository)
        if not result.success:
            raise ExternalActionError(result.message)
        outcome.record(repository.name, "build", "built", result.message)
        return repository
