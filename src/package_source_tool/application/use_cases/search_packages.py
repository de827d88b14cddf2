from __future__ import annotations

from dataclasses import dataclass
import logging

from package_source_tool.domain.entities import PackageSummary
from package_source_tool.domain.ports import PackageSearchPort


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchPackages:
    """Query the package index and rank hits by popularity, most popular first."""

    index: PackageSearchPort

    def execute(self, keywords: list[str]) -> list[PackageSummary]:
        packages = self.index.search(keywords)
        LOGGER.debug(
            "package index searched",
            extra={"event": "search.completed", "keywords": keywords, "count": len(packages)},
        )
        return sorted(packages, key=lambda package: package.popularity, reverse=True)
