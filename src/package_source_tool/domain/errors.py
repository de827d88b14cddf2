from __future__ import annotations
"""Error kinds raised across the package source tool.

All of them derive from `RuntimeError` so adapters keep signalling failures the
same way callers already expect, while use cases can tell per-target failures
(`PackageSourceError`) apart from structural ones (`PatternError`).
"""


class PackageSourceError(RuntimeError):
    """Base class for every recoverable, per-target failure."""


class ParseError(PackageSourceError):
    """A target string could not be interpreted as a shorthand or a URL."""

    def __init__(self, raw: str, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"Cannot resolve '{raw}': {reason}")


class CloneError(PackageSourceError):
    """Transport, authentication or disk failure while cloning."""

    def __init__(self, package_id: str, remote_url: str, details: str) -> None:
        self.package_id = package_id
        self.remote_url = remote_url
        self.details = details
        super().__init__(f"Failed to clone {remote_url}: {details}")


class PatternError(PackageSourceError):
    """A match pattern is not a valid regular expression.

    Fails a whole matching call rather than a single target.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern '{pattern}': {reason}")


class ExternalActionError(PackageSourceError):
    """A delegated build/removal command could not run or exited non-zero."""


class FilesystemError(PackageSourceError):
    """Directory listing, creation or deletion failure."""


class SearchError(PackageSourceError):
    """Package index request or payload failure."""
