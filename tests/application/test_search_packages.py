"""Tests for package index search ranking."""
from __future__ import annotations

from unittest.mock import MagicMock

from package_source_tool.application.use_cases.search_packages import SearchPackages
from package_source_tool.domain.entities import PackageSummary


def test_results_sorted_by_popularity() -> None:
    index = MagicMock()
    index.search.return_value = [
        PackageSummary(name="low", popularity=0.1),
        PackageSummary(name="high", popularity=9.5),
        PackageSummary(name="mid", popularity=2.0),
    ]

    packages = SearchPackages(index).execute(["helper"])

    assert [package.name for package in packages] == ["high", "mid", "low"]
    index.search.assert_called_once_with(["helper"])
