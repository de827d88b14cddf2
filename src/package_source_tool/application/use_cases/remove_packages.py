from __future__ import annotations
"""Application use case: uninstall packages and delete their working copies."""

from dataclasses import dataclass
import logging
from pathlib import Path
from collections.abc import Sequence

from package_source_tool.application.use_cases.batch import for_each_target, resolve_targets
from package_source_tool.application.use_cases.repository_matcher import RepositoryMatcher
from package_source_tool.domain.actions import Action
from package_source_tool.domain.entities import ActionResult, BatchOutcome, LocalRepository
from package_source_tool.domain.errors import ExternalActionError, FilesystemError, PatternError
from package_source_tool.domain.location import LocationResolver
from package_source_tool.domain.ports import ConfirmationPort, FileSystemPort


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RemovePackages:
    """Single-phase removal over the installed repositories matching targets.

    For each match: confirm (unless forced), run the uninstall action, then
    delete the working copy when the uninstall succeeded or `force` is set.
    """

    resolver: LocationResolver
    filesystem: FileSystemPort
    matcher: RepositoryMatcher
    uninstall_action: Action
    confirmation: ConfirmationPort

    def execute(
        self,
        raw_targets: Sequence[str],
        source_root: Path,
        *,
        use_regex: bool = False,
        force: bool = False,
    ) -> BatchOutcome:
        outcome = BatchOutcome(command="remove")
        locations = resolve_targets(self.resolver, raw_targets, outcome, use_regex=use_regex)
        if not locations:
            return outcome

        try:
            matches = self.matcher.matching_existing(source_root, locations, use_regex)
        except (PatternError, FilesystemError) as error:
            LOGGER.error(
                "cannot select repositories",
                extra={"event": "remove.match.failed", "root": str(source_root), "error": str(error)},
            )
            outcome.record_failure(str(source_root), "match", error)
            return outcome

        for_each_target(
            (LocalRepository(path) for path in matches),
            lambda repository: self._remove(repository, outcome, force),
            outcome,
            stage="uninstall",
            name=lambda repository: repository.name,
        )

        LOGGER.info(
            "remove batch completed",
            extra={"event": "remove.completed", "force": force, "error_count": outcome.error_count},
        )
        return outcome

    def _remove(self, repository: LocalRepository, outcome: BatchOutcome, force: bool) -> None:
        name = repository.name
        if not force and not self.confirmation.confirm(f"remove '{name}'?"):
            LOGGER.info("removal declined", extra={"event": "remove.confirm.declined", "package": name})
            outcome.record(name, "confirm", "skipped")
            return

        result = self._uninstall(repository, outcome)
        if not (result.success or force):
            outcome.record(name, "delete", "kept", "working copy kept until uninstall succeeds")
            return

        try:
            self.filesystem.force_remove(repository.path)
        except FilesystemError as error:
            LOGGER.error(
                "failed to remove working copy",
                extra={"event": "remove.delete.failed", "local_path": str(repository.path), "error": str(error)},
            )
            outcome.record_failure(name, "delete", error)
            return

        LOGGER.debug("removed working copy", extra={"event": "remove.delete.done", "package": name})
        outcome.record(name, "delete", "removed")

    def _uninstall(self, repository: LocalRepository, outcome: BatchOutcome) -> ActionResult:
        try:
            result = self.uninstall_action.execute(repository)
        except ExternalActionError as error:
            result = ActionResult(action_name=self.uninstall_action.name, success=False, message=str(error))

        if not result.success:
            LOGGER.error(
                "uninstall failed",
                extra={"event": "remove.uninstall.failed", "package": repository.name, "error": result.message},
            )
            outcome.record_failure(repository.name, "uninstall", result.message)
        return result
