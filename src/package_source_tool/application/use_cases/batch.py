from __future__ import annotations
"""Shared batch contract used by every command handler.

Per-target failures become a log line plus one increment of
`BatchOutcome.error_count`; only `PatternError` escapes, since it concerns the
whole matching call rather than one target.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Callable, TypeVar

from package_source_tool.domain.entities import BatchOutcome, Location
from package_source_tool.domain.errors import PackageSourceError, PatternError
from package_source_tool.domain.location import LocationResolver


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def for_each_target(
    items: Iterable[T],
    step: Callable[[T], R | None],
    outcome: BatchOutcome,
    *,
    stage: str,
    name: Callable[[T], str] = str,
) -> list[R]:
    """Apply `step` to every item, isolating failures.

    Returns the non-`None` results of the items that succeeded, in order.
    """
    results: list[R] = []
    for item in items:
        try:
            result = step(item)
        except PatternError:
            raise
        except PackageSourceError as error:
            target = name(item)
            LOGGER.error(
                "target failed",
                extra={
                    "event": f"{outcome.command}.{stage}.failed",
                    "target": target,
                    "error": str(error),
                    "error_type": type(error).__name__,
                },
            )
            outcome.record_failure(target, stage, error)
            continue
        if result is not None:
            results.append(result)
    return results


def resolve_targets(
    resolver: LocationResolver,
    raw_targets: Sequence[str],
    outcome: BatchOutcome,
    *,
    fill_empty: bool = False,
    use_regex: bool = False,
) -> list[Location]:
    """Resolve raw target strings for a batch.

    With `fill_empty`, an empty target list becomes the single base sentinel
    ("everything"). Without it, an empty list stays empty and the sentinel is
    rejected, so install/remove never act on the bare base. With `use_regex`,
    ids are left as patterns for the matcher.
    """
    if not raw_targets:
        return [resolver.base_location()] if fill_empty else []

    resolve = resolver.resolve if fill_empty else resolver.resolve_package
    return for_each_target(
        raw_targets,
        lambda raw: resolve(raw, as_pattern=use_regex),
        outcome,
        stage="resolve",
    )


def unique_by_id(locations: Iterable[Location]) -> list[Location]:
    """Drop repeated targets, keeping the first occurrence of each id."""
    seen: set[str] = set()
    unique: list[Location] = []
    for location in locations:
        if location.id not in seen:
            seen.add(location.id)
            unique.append(location)
    return unique
