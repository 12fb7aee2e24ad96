"""Test-only hooks for crypto provider resolution.

Production code never needs these: clearing a shared resolver while requests
are in flight would swap providers underneath them.
"""

from __future__ import annotations

from collections.abc import Iterable

from iyzipay_client.crypto.base import CryptoProvider
from iyzipay_client.crypto.resolver import (
    DEFAULT_FACTORIES,
    CryptoResolver,
    ProviderFactory,
    default_resolver,
)

__all__ = ["make_resolver", "reset_provider"]


def reset_provider(resolver: CryptoResolver | None = None) -> None:
    """Forget the memoized provider so the next lookup probes again."""

    (resolver or default_resolver())._clear()


def make_resolver(
    provider: CryptoProvider | None = None,
    *,
    factories: Iterable[ProviderFactory] = DEFAULT_FACTORIES,
) -> CryptoResolver:
    """Return an isolated resolver, optionally pinned to ``provider``."""

    resolver = CryptoResolver(factories)
    if provider is not None:
        resolver.set_provider(provider)
    return resolver
