"""Lazy, memoized selection of the active crypto provider."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from iyzipay_client.crypto.base import CryptoProvider
from iyzipay_client.crypto.native import probe_native_crypto
from iyzipay_client.crypto.subtle import probe_subtle_crypto
from iyzipay_client.errors import CryptoUnavailableError

__all__ = [
    "DEFAULT_FACTORIES",
    "CryptoResolver",
    "ProviderFactory",
    "default_resolver",
    "get_provider",
    "set_provider",
]

LOGGER = logging.getLogger(__name__)

ProviderFactory = Callable[[], CryptoProvider | None]

DEFAULT_FACTORIES: tuple[ProviderFactory, ...] = (
    probe_subtle_crypto,
    probe_native_crypto,
)

UNAVAILABLE_MESSAGE = (
    "No crypto implementation available. "
    "Please ensure you are running in a supported environment "
    "(CPython with the 'cryptography' package, or a browser runtime such as "
    "Pyodide exposing crypto.subtle) or set a custom provider using set_provider()."
)


class CryptoResolver:
    """Resolve and cache the crypto provider for a process or a client.

    Resolution order on a cold call:

    1. the ``custom`` provider given at construction;
    2. each factory in ``factories``, in order, until one returns a provider.

    :meth:`set_provider` replaces the cached provider outright and skips
    probing until the cache is cleared through :mod:`iyzipay_client.testing`.

    Args:
        factories: Ordered probe factories; each returns a provider or ``None``.
        custom: Explicitly injected provider with top priority.
    """

    def __init__(
        self,
        factories: Iterable[ProviderFactory] = DEFAULT_FACTORIES,
        *,
        custom: CryptoProvider | None = None,
    ) -> None:
        self._factories = tuple(factories)
        self._custom = custom
        self._provider: CryptoProvider | None = None

    @property
    def factories(self) -> tuple[ProviderFactory, ...]:
        """Return the probe order."""

        return self._factories

    def get_provider(self) -> CryptoProvider:
        """Return the memoized provider, probing on the first call.

        Raises:
            CryptoUnavailableError: When no probe yields a provider.
        """

        provider = self._provider
        if provider is None:
            provider = self._probe()
            self._provider = provider
        return provider

    def set_provider(self, provider: CryptoProvider) -> None:
        """Override the cached provider."""

        self._provider = provider

    def _clear(self) -> None:
        self._provider = None

    def _probe(self) -> CryptoProvider:
        if self._custom is not None:
            return self._custom

        for factory in self._factories:
            try:
                candidate = factory()
            except (ImportError, AttributeError, OSError) as exc:
                LOGGER.warning(
                    "Crypto provider probe failed",
                    extra={
                        "factory": getattr(factory, "__name__", repr(factory)),
                        "error_type": type(exc).__name__,
                    },
                    exc_info=exc,
                )
                continue
            if candidate is not None:
                LOGGER.debug(
                    "Crypto provider selected", extra={"provider": candidate.name}
                )
                return candidate

        raise CryptoUnavailableError(UNAVAILABLE_MESSAGE)


_DEFAULT_RESOLVER = CryptoResolver()


def default_resolver() -> CryptoResolver:
    """Return the process-wide resolver."""

    return _DEFAULT_RESOLVER


def get_provider(resolver: CryptoResolver | None = None) -> CryptoProvider:
    """Return the active provider from ``resolver`` or the process default."""

    return (resolver or _DEFAULT_RESOLVER).get_provider()


def set_provider(
    provider: CryptoProvider, resolver: CryptoResolver | None = None
) -> None:
    """Install ``provider`` on ``resolver`` or the process default."""

    (resolver or _DEFAULT_RESOLVER).set_provider(provider)
