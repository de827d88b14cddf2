from __future__ import annotations
"""Selection of already-materialized local repositories by target."""

import logging
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from package_source_tool.domain.entities import Location
from package_source_tool.domain.errors import PatternError
from package_source_tool.domain.ports import FileSystemPort


LOGGER = logging.getLogger(__name__)

Matcher = Callable[[str], bool]


@dataclass(slots=True)
class RepositoryMatcher:
    """Match directory names under a source root against target locations.

    Used identically by listing and removal. Each call re-scans the root.
    """

    filesystem: FileSystemPort

    def matching_existing(
        self,
        root: Path,
        targets: Sequence[Location],
        use_regex: bool = False,
    ) -> Iterator[Path]:
        """Return a generator over existing directories matching `targets`.

        Patterns are compiled and the root is listed before this returns, so
        structural failures surface at call time rather than mid-iteration.
        Each directory is yielded at most once, in name order, even when
        several targets match it.

        Raises:
            PatternError: If `use_regex` is set and any target id is not a
                valid regular expression.
            FilesystemError: If `root` exists but cannot be read.
        """
        matchers = [_build_matcher(location, use_regex) for location in targets]
        if not matchers:
            return iter(())

        entries = self.filesystem.list_directories(root)
        LOGGER.debug(
            "source root scanned",
            extra={
                "event": "matcher.root.scanned",
                "root": str(root),
                "entry_count": len(entries),
                "target_count": len(matchers),
                "use_regex": use_regex,
            },
        )
        return _iter_matches(entries, matchers)


def _iter_matches(entries: list[Path], matchers: list[Matcher]) -> Iterator[Path]:
    for entry in entries:
        if any(matches(entry.name) for matches in matchers):
            yield entry


def _build_matcher(location: Location, use_regex: bool) -> Matcher:
    if location.is_base:
        return lambda name: True

    if not use_regex:
        package_id = location.id
        return lambda name: name == package_id

    try:
        pattern = re.compile(location.id)
    except re.error as error:
        raise PatternError(location.id, str(error)) from error
    return lambda name: pattern.fullmatch(name) is not None
