"""Provider wrapping a restricted native crypto bridge (embedded/mobile)."""

from __future__ import annotations

import inspect
from typing import Any, Protocol

from iyzipay_client.crypto.base import CryptoProvider
from iyzipay_client.crypto.codec import (
    Base64Codec,
    decode_text,
    encode_text,
    resolve_codec,
)
from iyzipay_client.errors import UnsupportedOperationError

__all__ = ["BridgeCryptoProvider", "NativeCryptoBridge"]

DIGEST_SHA1 = "SHA-1"
ENCODING_BASE64 = "base64"


class NativeCryptoBridge(Protocol):
    """Members a native bridge module is expected to expose.

    ``digest_string`` may return the digest directly or an awaitable. A
    ``timing_safe_equal(a: bytes, b: bytes)`` member is optional.
    """

    def digest_string(self, algorithm: str, data: str, *, encoding: str) -> Any: ...

    def get_random_bytes(self, length: int) -> Any: ...


class BridgeCryptoProvider(CryptoProvider):
    """Crypto provider for embedded runtimes with a digest-only bridge.

    The bridge has no HMAC primitive; :meth:`hmac_sha256` raises rather than
    building one out of plain digests.

    Example:
        >>> provider = BridgeCryptoProvider(native_module)
        >>> set_provider(provider)
    """

    name = "BridgeCrypto"

    def __init__(
        self,
        bridge: NativeCryptoBridge,
        *,
        host: object | None = None,
        codec: Base64Codec | None = None,
    ) -> None:
        self._bridge = bridge
        self._codec = codec if codec is not None else resolve_codec(host)

    async def sha1(self, data: str) -> str:
        result = self._bridge.digest_string(
            DIGEST_SHA1, data, encoding=ENCODING_BASE64
        )
        if inspect.isawaitable(result):
            result = await result
        return str(result)

    async def hmac_sha256(self, key: str, data: str) -> str:
        raise UnsupportedOperationError(
            "HMAC not natively supported by the crypto bridge. "
            "Inject a provider with HMAC support via set_provider()."
        )

    def base64_encode(self, data: str) -> str:
        return encode_text(self._codec, data)

    def base64_decode(self, data: str) -> str:
        return decode_text(self._codec, data)

    def random_bytes(self, length: int) -> bytes:
        return bytes(self._bridge.get_random_bytes(length))

    def timing_safe_equal(self, a: str, b: str) -> bool:
        compare = getattr(self._bridge, "timing_safe_equal", None)
        if not callable(compare):
            raise UnsupportedOperationError(
                "Timing safe equal not available in this environment"
            )
        return bool(compare(a.encode("utf-8"), b.encode("utf-8")))
