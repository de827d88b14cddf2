from __future__ import annotations
"""Per-repository action contract."""

from abc import ABC, abstractmethod

from .entities import ActionResult, LocalRepository


class Action(ABC):
    """External step applied to one local repository (build, uninstall).

    Implementers return an `ActionResult` for ordinary failures such as a
    non-zero exit code and raise `ExternalActionError` only when the step could
    not be started at all.
    """

    @property
    def name(self) -> str:
        """Stable default action name used in summaries/logging."""
        return self.__class__.__name__

    @abstractmethod
    def execute(self, repository: LocalRepository) -> ActionResult:
        """Execute action logic for a single repository.

        Args:
            repository: Working copy to act on.

        Returns:
            ActionResult with execution outcome details.
        """
        raise NotImplementedError
