"""Provider backed by a WebCrypto-style ``subtle`` interface.

This is the backend selected inside browser-hosted interpreters such as
Pyodide, where ``js.crypto.subtle`` exposes asynchronous digest and HMAC
primitives. Browser-grade primitives offer no constant-time comparison, so
:meth:`SubtleCryptoProvider.timing_safe_equal` refuses to run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from importlib import import_module
from typing import Any, Protocol

from iyzipay_client.crypto.base import CryptoProvider
from iyzipay_client.crypto.codec import (
    Base64Codec,
    decode_text,
    encode_text,
    resolve_codec,
)
from iyzipay_client.errors import UnsupportedOperationError

__all__ = ["SubtleCryptoProvider", "load_host_namespace", "probe_subtle_crypto"]

LOGGER = logging.getLogger(__name__)

HMAC_ALGORITHM = {"name": "HMAC", "hash": "SHA-256"}


class SubtleCrypto(Protocol):
    """Protocol describing the ``SubtleCrypto`` members used here."""

    def digest(self, algorithm: str, data: Any) -> Any: ...

    def importKey(  # noqa: N802 - mirrors the WebCrypto API
        self,
        key_format: str,
        key_data: Any,
        algorithm: Any,
        extractable: bool,
        usages: Any,
    ) -> Any: ...

    def sign(self, algorithm: str, key: Any, data: Any) -> Any: ...


class WebCrypto(Protocol):
    """Protocol for the global ``crypto`` object."""

    subtle: SubtleCrypto

    def getRandomValues(self, array: Any) -> Any: ...  # noqa: N802


def _identity(value: object) -> object:
    return value


def _to_bytes(buffer: Any) -> bytes:
    """Convert a host buffer (ArrayBuffer proxy, memoryview, bytes) to bytes."""

    to_py = getattr(buffer, "to_py", None)
    if callable(to_py):
        buffer = to_py()
    return bytes(buffer)


class SubtleCryptoProvider(CryptoProvider):
    """Crypto provider for runtimes exposing ``crypto.subtle``.

    Args:
        crypto: The host ``crypto`` object.
        host: Optional host namespace providing ``btoa``/``atob``.
        to_host: Converter applied to every argument handed to the host API.
        allocate: Factory for the typed array filled by ``getRandomValues``.
        codec: Explicit base64 codec; resolved from ``host`` when omitted.
    """

    name = "WebCrypto"

    def __init__(
        self,
        crypto: WebCrypto,
        *,
        host: object | None = None,
        to_host: Callable[[object], object] = _identity,
        allocate: Callable[[int], Any] = bytearray,
        codec: Base64Codec | None = None,
    ) -> None:
        self._crypto = crypto
        self._to_host = to_host
        self._allocate = allocate
        self._codec = codec if codec is not None else resolve_codec(host)

    async def sha1(self, data: str) -> str:
        buffer = await self._crypto.subtle.digest(
            "SHA-1", self._to_host(data.encode("utf-8"))
        )
        return self._codec.encode(_to_bytes(buffer))

    async def hmac_sha256(self, key: str, data: str) -> str:
        crypto_key = await self._crypto.subtle.importKey(
            "raw",
            self._to_host(key.encode("utf-8")),
            self._to_host(dict(HMAC_ALGORITHM)),
            False,
            self._to_host(["sign"]),
        )
        signature = await self._crypto.subtle.sign(
            "HMAC", crypto_key, self._to_host(data.encode("utf-8"))
        )
        return _to_bytes(signature).hex()

    def base64_encode(self, data: str) -> str:
        return encode_text(self._codec, data)

    def base64_decode(self, data: str) -> str:
        return decode_text(self._codec, data)

    def random_bytes(self, length: int) -> bytes:
        array = self._allocate(length)
        filled = self._crypto.getRandomValues(array)
        return _to_bytes(filled if filled is not None else array)

    def timing_safe_equal(self, a: str, b: str) -> bool:
        raise UnsupportedOperationError(
            "Timing safe equal not available in this environment"
        )


def load_host_namespace() -> object | None:
    """Return the browser host namespace (Pyodide's ``js`` module) if present."""
    try:
        return import_module("js")
    except ModuleNotFoundError:
        return None


def _pyodide_adapters(host: object) -> dict[str, Any]:
    """Build argument converters for Pyodide's foreign function interface."""
    try:
        ffi = import_module("pyodide.ffi")
    except ModuleNotFoundError:
        return {}

    js_object = getattr(host, "Object", None)
    from_entries = getattr(js_object, "fromEntries", None)

    def to_host(value: object) -> object:
        if from_entries is not None:
            return ffi.to_js(value, dict_converter=from_entries)
        return ffi.to_js(value)

    adapters: dict[str, Any] = {"to_host": to_host}
    uint8 = getattr(host, "Uint8Array", None)
    if uint8 is not None:
        adapters["allocate"] = uint8.new
    return adapters


def probe_subtle_crypto(
    load_host: Callable[[], object | None] = load_host_namespace,
) -> CryptoProvider | None:
    """Return a :class:`SubtleCryptoProvider` when the host exposes ``subtle``."""

    host = load_host()
    if host is None:
        return None
    crypto = getattr(host, "crypto", None)
    subtle = getattr(crypto, "subtle", None) if crypto is not None else None
    if subtle is None or not callable(getattr(subtle, "digest", None)):
        return None
    LOGGER.debug("Ambient subtle crypto detected", extra={"provider": "WebCrypto"})
    return SubtleCryptoProvider(crypto, host=host, **_pyodide_adapters(host))
