from __future__ import annotations
"""Resolution of user-supplied targets into canonical `Location` values."""

import os
import re
from urllib.parse import urlsplit

from .entities import Location
from .errors import ParseError


DEFAULT_BASE_URL = "https://aur.archlinux.org/"
ID_SEPARATOR = "."

_URL_PATTERN = re.compile(r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*)://(?P<rest>.*)$")
# user@host:path, as accepted by `git clone`
_SCP_PATTERN = re.compile(r"^(?P<user>[^@/\s]+)@(?P<host>[^:/\s]+):(?P<path>.+)$")
_PATH_SEPARATORS = tuple(sep for sep in {"/", os.sep, os.altsep} if sep)


class LocationResolver:
    """Turn shorthand names or remote URLs into `Location` values.

    Shorthands are taken relative to `base_url`. Identifiers of addresses
    under the base drop the base prefix, so `foo` and
    `https://aur.archlinux.org/foo.git` share the id `foo`. Anything else keeps
    its host, e.g. `github.com.user.repo`.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        base_url = base_url.strip()
        match = _URL_PATTERN.match(base_url)
        if not match or not urlsplit(base_url).hostname:
            raise ValueError(f"Base URL must be a fully-qualified URL: '{base_url}'")
        self._base_url = base_url.rstrip("/") + "/"
        self._base_address = _strip_scheme(self._base_url).rstrip("/")

    def resolve(self, raw: str, *, as_pattern: bool = False) -> Location:
        """Resolve one target string.

        With `as_pattern`, the id keeps the target text as written apart from
        the base prefix and path separators, so it can be compiled as a
        regular expression (`.*.git` must not lose its suffix).

        Raises:
            ParseError: If the input is neither a usable shorthand nor a URL.
        """
        value = raw.strip()
        if not value:
            raise ParseError(raw, "empty target")
        if any(char.isspace() or not char.isprintable() for char in value):
            raise ParseError(raw, "contains whitespace or control characters")

        if _looks_like_remote(value):
            remote_url = value
            if _URL_PATTERN.match(value) and not urlsplit(value).hostname:
                raise ParseError(raw, "URL has no host")
        else:
            remote_url = f"{self._base_url}{value.lstrip('/')}"

        derive = self._derive_pattern if as_pattern else self._derive_id
        return Location(raw=raw, remote_url=remote_url, id=derive(raw, remote_url))

    def resolve_package(self, raw: str, *, as_pattern: bool = False) -> Location:
        """Resolve a target that must name a package, not the bare base."""
        location = self.resolve(raw, as_pattern=as_pattern)
        if location.is_base:
            raise ParseError(raw, "does not name a package")
        return location

    def base_location(self) -> Location:
        """Sentinel location for the default base with no sub-path."""
        return Location(raw="", remote_url=self._base_url, id="")

    def _relative_address(self, remote_url: str) -> str | None:
        """Address without scheme and base prefix; `None` for the bare base."""
        address = _strip_scheme(remote_url).rstrip("/")
        for separator in _PATH_SEPARATORS:
            address = address.replace(separator, "/")

        if address == self._base_address:
            return None
        if address.startswith(self._base_address + "/"):
            address = address[len(self._base_address) + 1 :]
        return address

    def _derive_id(self, raw: str, remote_url: str) -> str:
        address = self._relative_address(remote_url)
        if address is None:
            return ""

        if address.endswith(".git"):
            address = address[: -len(".git")]

        segments = [segment for segment in address.split("/") if segment]
        if not segments:
            raise ParseError(raw, "empty identifier")
        if any(segment in {".", ".."} for segment in segments):
            raise ParseError(raw, "relative path segments are not allowed")

        return ID_SEPARATOR.join(segments)

    def _derive_pattern(self, raw: str, remote_url: str) -> str:
        address = self._relative_address(remote_url)
        if address is None:
            return ""

        segments = [segment for segment in address.split("/") if segment]
        if not segments:
            raise ParseError(raw, "empty pattern")
        return ID_SEPARATOR.join(segments)


def remote_host(remote_url: str) -> str:
    """Host part of a remote address, used to key cached credentials."""
    scp_match = _SCP_PATTERN.match(remote_url)
    if scp_match and not _URL_PATTERN.match(remote_url):
        return scp_match.group("host").lower()
    return (urlsplit(remote_url).hostname or "").lower()


def _looks_like_remote(value: str) -> bool:
    return bool(_URL_PATTERN.match(value) or _SCP_PATTERN.match(value))


def _strip_scheme(remote_url: str) -> str:
    url_match = _URL_PATTERN.match(remote_url)
    if url_match:
        rest = url_match.group("rest")
        authority, slash, path = rest.partition("/")
        if "@" in authority:
            authority = authority.rsplit("@", 1)[1]
        return f"{authority}{slash}{path}"

    scp_match = _SCP_PATTERN.match(remote_url)
    if scp_match:
        return f"{scp_match.group('host')}/{scp_match.group('path')}"

    return remote_url
