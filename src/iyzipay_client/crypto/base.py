"""Capability interface shared by every cryptographic backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

__all__ = ["CryptoProvider"]


class CryptoProvider(ABC):
    """Seven-operation capability set used by the signer and verifiers.

    Output encodings are part of the contract: :meth:`sha1` returns base64
    and :meth:`hmac_sha256` returns lowercase hex on every backend. A backend
    that cannot offer a primitive raises
    :class:`~iyzipay_client.errors.UnsupportedOperationError` instead of
    approximating it.

    Custom backends subclass this and are injected with
    :func:`iyzipay_client.crypto.set_provider`.
    """

    name: str = "Custom"

    @abstractmethod
    async def sha1(self, data: str) -> str:
        """Return the base64-encoded SHA-1 digest of ``data`` (UTF-8)."""

    @abstractmethod
    async def hmac_sha256(self, key: str, data: str) -> str:
        """Return the lowercase hex HMAC-SHA256 of ``data`` keyed by ``key``."""

    @abstractmethod
    def base64_encode(self, data: str) -> str:
        """Encode UTF-8 text to base64."""

    @abstractmethod
    def base64_decode(self, data: str) -> str:
        """Decode base64 back to UTF-8 text."""

    @abstractmethod
    def random_bytes(self, length: int) -> bytes:
        """Return exactly ``length`` cryptographically random bytes."""

    @abstractmethod
    def timing_safe_equal(self, a: str, b: str) -> bool:
        """Compare two strings in constant time."""

    def random_string(self, length: int) -> str:
        """Return ``length`` random bytes rendered as lowercase hex."""

        return self.random_bytes(length).hex()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
