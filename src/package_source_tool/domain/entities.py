from __future__ import annotations
"""Core domain entities shared by use cases, actions and adapters.

These data models carry no I/O and can be reused by any front end (CLI,
tests, library callers).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class Location:
    """Resolved package source reference.

    Attributes:
        raw: Original user-supplied target string.
        remote_url: Address `git clone` can consume.
        id: Filesystem-safe identifier derived from `remote_url`. Used as the
            local directory name and as the package name for build/removal.
    """

    raw: str
    remote_url: str
    id: str

    @property
    def is_base(self) -> bool:
        """Whether this is the sentinel for the default base with no sub-path."""
        return not self.id


@dataclass(frozen=True, slots=True)
class LocalRepository:
    """Materialized working copy under the managed source root."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(slots=True)
class ActionResult:
    """Standard result returned by each `Action.execute()` call.

    Attributes:
        action_name: Action identifier for logs and summaries.
        success: Whether the action succeeded.
        message: Human-readable action outcome.
        metadata: Optional structured payload (exit code, command line).
    """

    action_name: str
    success: bool
    message: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class TargetOutcome:
    """One line of a batch report."""

    target: str
    stage: str
    status: str
    message: str = ""

    @property
    def failed(self) -> bool:
        return self.status == "failed"


@dataclass(slots=True)
class BatchOutcome:
    """Aggregate result of applying one command across many targets.

    `error_count` only ever grows. Failures are recorded, never raised, so a
    single bad target cannot stop the remaining ones.
    """

    command: str
    error_count: int = 0
    targets: list[TargetOutcome] = field(default_factory=list)

    def record(self, target: str, stage: str, status: str, message: str = "") -> None:
        self.targets.append(TargetOutcome(target=target, stage=stage, status=status, message=message))

    def record_failure(self, target: str, stage: str, error: BaseException | str) -> None:
        self.error_count += 1
        self.targets.append(TargetOutcome(target=target, stage=stage, status="failed", message=str(error)))

    def with_status(self, status: str) -> list[TargetOutcome]:
        return [item for item in self.targets if item.status == status]

    @property
    def exit_code(self) -> int:
        """Process exit status: the error count, clamped to the 8-bit range."""
        return min(self.error_count, 255)


@dataclass(frozen=True, slots=True)
class PackageSummary:
    """Package index search hit."""

    name: str
    version: str | None = None
    description: str | None = None
    maintainer: str | None = None
    popularity: float = 0.0
    num_votes: int = 0
    out_of_date: int | None = None
    url: str | None = None
