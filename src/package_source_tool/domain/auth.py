from __future__ import annotations
"""Batch-scoped credential cache shared by every clone of one invocation."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Credentials:
    """Username/password (or token) pair for one remote host."""

    username: str
    password: str

    def basic_authorization(self) -> str:
        encoded = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return f"Basic {encoded}"

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


class CredentialProvider(Protocol):
    """Source of credentials when a remote rejects an anonymous clone."""

    def request(self, host: str) -> Credentials | None:
        """Return credentials for `host`, or `None` when none are available."""
        ...


class AuthCache:
    """In-memory credential store for a single batch.

    Construct one per command invocation and pass it into every clone. A host
    is negotiated at most once: whatever the provider returned the first time,
    including nothing, is what later clones in the batch get.
    """

    def __init__(
        self,
        provider: CredentialProvider | None = None,
        *,
        seed: dict[str, Credentials] | None = None,
    ) -> None:
        self._provider = provider
        self._credentials: dict[str, Credentials] = dict(seed or {})
        self._negotiated: set[str] = set(self._credentials)

    def get(self, host: str) -> Credentials | None:
        return self._credentials.get(host.lower())

    def has_negotiated(self, host: str) -> bool:
        return host.lower() in self._negotiated

    def negotiate(self, host: str) -> Credentials | None:
        """Ask the provider for credentials once per host and cache the answer."""
        key = host.lower()
        if key in self._negotiated:
            return self._credentials.get(key)

        self._negotiated.add(key)
        if self._provider is None:
            LOGGER.debug(
                "no credential provider configured",
                extra={"event": "auth.negotiate.no_provider", "host": key},
            )
            return None

        credentials = self._provider.request(key)
        if credentials is not None:
            self._credentials[key] = credentials
        LOGGER.info(
            "credential negotiation finished",
            extra={"event": "auth.negotiate.done", "host": key, "obtained": credentials is not None},
        )
        return credentials
