"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import inspect
import os
import sys
from collections.abc import Iterator
from typing import Any

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from iyzipay_client.crypto import CryptoResolver  # noqa: E402
from iyzipay_client.crypto.native import (  # noqa: E402
    NativeCryptoProvider,
    load_native_backend,
)
from iyzipay_client.testing import make_resolver, reset_provider  # noqa: E402

from fakes import CountingProvider  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "asyncio: mark test as requiring an event loop")


def pytest_pyfunc_call(pyfuncitem: Any) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames  # type: ignore[attr-defined]
        }

        event_loop = asyncio.new_event_loop()
        try:
            event_loop.run_until_complete(pyfuncitem.obj(**call_kwargs))
        finally:
            event_loop.close()
        return True
    return None


@pytest.fixture(autouse=True)
def _reset_default_resolver() -> Iterator[None]:
    """Keep the process-wide resolver cold between tests."""

    reset_provider()
    yield
    reset_provider()


@pytest.fixture
def native_provider() -> NativeCryptoProvider:
    backend = load_native_backend()
    assert backend is not None, "cryptography must be installed for the test suite"
    return NativeCryptoProvider(backend)


@pytest.fixture
def counting_provider(native_provider: NativeCryptoProvider) -> CountingProvider:
    return CountingProvider(native_provider)


@pytest.fixture
def resolver(counting_provider: CountingProvider) -> CryptoResolver:
    return make_resolver(counting_provider)
