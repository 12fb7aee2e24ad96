"""Convenience wrappers routing through the active crypto provider."""

from __future__ import annotations

import base64
from dataclasses import dataclass

from iyzipay_client.crypto.resolver import CryptoResolver, get_provider

__all__ = [
    "RandomBytes",
    "base64_to_string",
    "calculate_hmac",
    "calculate_sha1",
    "generate_random_bytes",
    "string_to_base64",
]


@dataclass(frozen=True, slots=True)
class RandomBytes:
    """Random bytes together with their common text encodings."""

    raw: bytes
    hex: str
    base64: str


async def calculate_sha1(data: str, resolver: CryptoResolver | None = None) -> str:
    """Return the base64 SHA-1 digest of ``data``."""
    return await get_provider(resolver).sha1(data)


async def calculate_hmac(
    key: str, data: str, resolver: CryptoResolver | None = None
) -> str:
    """Return the hex HMAC-SHA256 of ``data`` keyed by ``key``."""
    return await get_provider(resolver).hmac_sha256(key, data)


def string_to_base64(data: str, resolver: CryptoResolver | None = None) -> str:
    return get_provider(resolver).base64_encode(data)


def base64_to_string(data: str, resolver: CryptoResolver | None = None) -> str:
    return get_provider(resolver).base64_decode(data)


def generate_random_bytes(
    length: int, resolver: CryptoResolver | None = None
) -> RandomBytes:
    """Draw ``length`` random bytes once and expose them in three encodings."""

    provider = get_provider(resolver)
    raw = provider.random_bytes(length)
    return RandomBytes(
        raw=raw, hex=raw.hex(), base64=base64.b64encode(raw).decode("ascii")
    )
