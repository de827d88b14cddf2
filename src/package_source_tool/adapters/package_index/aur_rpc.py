from __future__ import annotations

import json
from typing import Any, Callable
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from package_source_tool.domain.entities import PackageSummary
from package_source_tool.domain.errors import SearchError
from package_source_tool.domain.location import DEFAULT_BASE_URL
from package_source_tool.domain.ports import PackageSearchPort


class AurRpcSearchAdapter(PackageSearchPort):
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        urlopen_fn: Callable[..., Any] = urlopen,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._urlopen_fn = urlopen_fn

    def search(self, keywords: list[str]) -> list[PackageSummary]:
        query = quote(" ".join(keywords), safe="")
        payload = self._request_json(f"{self._base_url}/rpc/?v=5&type=search&arg={query}")

        if payload.get("type") == "error":
            raise SearchError(f"AUR RPC error: {payload.get('error') or 'unknown error'}")

        items = payload.get("results", [])
        if not isinstance(items, list):
            raise SearchError("Unexpected AUR RPC payload: 'results' must be a list")

        packages: list[PackageSummary] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            package = self._map_package(item)
            if package is not None:
                packages.append(package)
        return packages

    def _request_json(self, url: str) -> dict[str, Any]:
        request = Request(url, headers={"Accept": "application/json"})
        try:
            with self._urlopen_fn(request, timeout=self._timeout_seconds) as response:
                content = response.read()
        except HTTPError as error:
            raise SearchError(f"AUR RPC request failed with HTTP {error.code} for URL: {url}") from error
        except URLError as error:
            raise SearchError(f"AUR RPC request failed for URL: {url}: {error.reason}") from error

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as error:
            raise SearchError(f"Invalid JSON received from AUR RPC for URL: {url}") from error

        if not isinstance(parsed, dict):
            raise SearchError("Unexpected AUR RPC payload: top-level object must be a JSON object")

        return parsed

    @staticmethod
    def _map_package(payload: dict[str, Any]) -> PackageSummary | None:
        name = payload.get("Name")
        if not isinstance(name, str) or not name.strip():
            return None

        return PackageSummary(
            name=name.strip(),
            version=_optional_str(payload.get("Version")),
            description=_optional_str(payload.get("Description")),
            maintainer=_optional_str(payload.get("Maintainer")),
            popularity=_number(payload.get("Popularity"), float, 0.0),
            num_votes=_number(payload.get("NumVotes"), int, 0),
            out_of_date=_number(payload.get("OutOfDate"), int, None),
            url=_optional_str(payload.get("URL")),
        )


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _number(value: Any, kind: type, default: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return kind(value)
