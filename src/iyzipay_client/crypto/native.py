"""Server-side provider backed by the ``cryptography`` package.

The package is loaded lazily so that the library imports cleanly in runtimes
where it is missing; the resolver then moves on or reports
:class:`~iyzipay_client.errors.CryptoUnavailableError`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from importlib import import_module
from types import ModuleType

from iyzipay_client.crypto.base import CryptoProvider
from iyzipay_client.crypto.codec import (
    Base64Codec,
    decode_text,
    encode_text,
    resolve_codec,
)

__all__ = [
    "NativeBackend",
    "NativeCryptoProvider",
    "load_native_backend",
    "probe_native_crypto",
]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NativeBackend:
    """Modules and primitives making up the native backend."""

    hashes: ModuleType
    hmac: ModuleType
    constant_time: ModuleType
    urandom: Callable[[int], bytes] = os.urandom


def load_native_backend() -> NativeBackend | None:
    """Attempt to import the ``cryptography`` primitives."""
    try:
        hashes = import_module("cryptography.hazmat.primitives.hashes")
        hmac = import_module("cryptography.hazmat.primitives.hmac")
        constant_time = import_module("cryptography.hazmat.primitives.constant_time")
    except ImportError as exc:
        LOGGER.debug(
            "cryptography package unavailable",
            extra={"provider": "NativeCrypto", "error_type": type(exc).__name__},
        )
        return None
    return NativeBackend(hashes=hashes, hmac=hmac, constant_time=constant_time)


class NativeCryptoProvider(CryptoProvider):
    """Crypto provider built on synchronous ``cryptography`` primitives.

    Hashing completes synchronously; the coroutine methods exist so callers
    share one calling convention with asynchronous backends.
    """

    name = "NativeCrypto"

    def __init__(
        self, backend: NativeBackend, *, codec: Base64Codec | None = None
    ) -> None:
        self._backend = backend
        self._codec = codec if codec is not None else resolve_codec()

    async def sha1(self, data: str) -> str:
        digest = self._backend.hashes.Hash(self._backend.hashes.SHA1())
        digest.update(data.encode("utf-8"))
        return self._codec.encode(digest.finalize())

    async def hmac_sha256(self, key: str, data: str) -> str:
        mac = self._backend.hmac.HMAC(
            key.encode("utf-8"), self._backend.hashes.SHA256()
        )
        mac.update(data.encode("utf-8"))
        return mac.finalize().hex()

    def base64_encode(self, data: str) -> str:
        return encode_text(self._codec, data)

    def base64_decode(self, data: str) -> str:
        return decode_text(self._codec, data)

    def random_bytes(self, length: int) -> bytes:
        return self._backend.urandom(length)

    def timing_safe_equal(self, a: str, b: str) -> bool:
        return bool(
            self._backend.constant_time.bytes_eq(a.encode("utf-8"), b.encode("utf-8"))
        )


def probe_native_crypto(
    load: Callable[[], NativeBackend | None] = load_native_backend,
) -> CryptoProvider | None:
    """Return a :class:`NativeCryptoProvider` when ``cryptography`` loads."""

    backend = load()
    if backend is None:
        return None
    return NativeCryptoProvider(backend)
