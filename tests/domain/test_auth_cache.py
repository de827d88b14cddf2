"""Tests for the batch-scoped credential cache."""
from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest

from package_source_tool.domain.auth import AuthCache, Credentials


@pytest.fixture
def provider() -> MagicMock:
    """Credential provider that always answers with the same pair."""
    mock = MagicMock()
    mock.request.return_value = Credentials("alice", "s3cret")
    return mock


def test_new_cache_is_empty(provider: MagicMock) -> None:
    cache = AuthCache(provider)

    assert cache.get("aur.archlinux.org") is None
    assert not cache.has_negotiated("aur.archlinux.org")
    provider.request.assert_not_called()


def test_negotiation_happens_once_per_host(provider: MagicMock) -> None:
    """Later lookups reuse the first negotiated credentials."""
    cache = AuthCache(provider)

    first = cache.negotiate("aur.archlinux.org")
    second = cache.negotiate("AUR.archlinux.org")

    assert first == second == Credentials("alice", "s3cret")
    assert cache.get("aur.archlinux.org") == first
    provider.request.assert_called_once_with("aur.archlinux.org")


def test_declined_negotiation_is_not_repeated(provider: MagicMock) -> None:
    """A provider returning nothing is still the one attempt for that host."""
    provider.request.return_value = None
    cache = AuthCache(provider)

    assert cache.negotiate("github.com") is None
    assert cache.negotiate("github.com") is None
    assert cache.has_negotiated("github.com")
    provider.request.assert_called_once()


def test_hosts_are_negotiated_independently(provider: MagicMock) -> None:
    cache = AuthCache(provider)

    cache.negotiate("github.com")
    cache.negotiate("gitlab.com")

    assert provider.request.call_count == 2


def test_seeded_credentials_skip_the_provider(provider: MagicMock) -> None:
    seeded = Credentials("bot", "token")
    cache = AuthCache(provider, seed={"aur.archlinux.org": seeded})

    assert cache.has_negotiated("aur.archlinux.org")
    assert cache.negotiate("aur.archlinux.org") == seeded
    provider.request.assert_not_called()


def test_caches_do_not_share_state(provider: MagicMock) -> None:
    """Each invocation builds its own cache; nothing leaks between them."""
    first = AuthCache(provider)
    first.negotiate("aur.archlinux.org")

    second = AuthCache(provider)

    assert second.get("aur.archlinux.org") is None
    assert not second.has_negotiated("aur.archlinux.org")


def test_negotiation_without_provider_returns_none() -> None:
    cache = AuthCache()

    assert cache.negotiate("aur.archlinux.org") is None
    assert cache.has_negotiated("aur.archlinux.org")


def test_basic_authorization_header() -> None:
    header = Credentials("alice", "s3cret").basic_authorization()

    assert header.startswith("Basic ")
    assert base64.b64decode(header.split(" ", 1)[1]).decode("utf-8") == "alice:s3cret"


def test_repr_hides_password() -> None:
    assert "s3cret" not in repr(Credentials("alice", "s3cret"))
