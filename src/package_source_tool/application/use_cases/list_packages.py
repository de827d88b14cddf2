from __future__ import annotations
"""Application use case: list installed working copies."""

from dataclasses import dataclass
import logging
from pathlib import Path
from collections.abc import Sequence

from package_source_tool.application.use_cases.batch import resolve_targets
from package_source_tool.application.use_cases.repository_matcher import RepositoryMatcher
from package_source_tool.domain.entities import BatchOutcome
from package_source_tool.domain.errors import FilesystemError, PatternError
from package_source_tool.domain.location import LocationResolver


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ListPackages:
    """List matching repositories; no targets means every installed one."""

    resolver: LocationResolver
    matcher: RepositoryMatcher

    def execute(self, raw_targets: Sequence[str], source_root: Path, *, use_regex: bool = False) -> BatchOutcome:
        outcome = BatchOutcome(command="list")
        locations = resolve_targets(self.resolver, raw_targets, outcome, fill_empty=True, use_regex=use_regex)

        try:
            matches = self.matcher.matching_existing(source_root, locations, use_regex)
        except (PatternError, FilesystemError) as error:
            LOGGER.error(
                "cannot select repositories",
                extra={"event": "list.match.failed", "root": str(source_root), "error": str(error)},
            )
            outcome.record_failure(str(source_root), "match", error)
            return outcome

        for path in matches:
            outcome.record(path.name, "list", "listed", str(path))

        LOGGER.debug(
            "list completed",
            extra={"event": "list.completed", "count": len(outcome.with_status("listed"))},
        )
        return outcome
