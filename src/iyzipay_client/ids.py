"""Identifier helpers for conversations, baskets and idempotency keys."""

from __future__ import annotations

import base64
import time
from typing import Literal

from iyzipay_client.crypto.resolver import CryptoResolver, get_provider

__all__ = [
    "generate_basket_id",
    "generate_conversation_id",
    "generate_idempotency_key",
    "generate_secret_key",
    "hash_payment_reference",
]


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def _random_hex(length: int, resolver: CryptoResolver | None) -> str:
    return get_provider(resolver).random_string(length)


def generate_conversation_id(
    prefix: str = "conv", *, resolver: CryptoResolver | None = None
) -> str:
    """Return ``<prefix>_<epoch ms>_<16 hex chars>``."""
    return f"{prefix}_{_epoch_millis()}_{_random_hex(8, resolver)}"


def generate_basket_id(
    user_id: str | None = None, *, resolver: CryptoResolver | None = None
) -> str:
    """Return ``basket_<user id or "anon">_<epoch ms>_<8 hex chars>``."""
    return f"basket_{user_id or 'anon'}_{_epoch_millis()}_{_random_hex(4, resolver)}"


def generate_idempotency_key(
    context: str = "request", *, resolver: CryptoResolver | None = None
) -> str:
    """Return ``idem_<context>_<epoch ms>_<24 hex chars>``.

    Store the key and reuse it when retrying the same logical operation.
    """
    return f"idem_{context}_{_epoch_millis()}_{_random_hex(12, resolver)}"


async def hash_payment_reference(
    *parts: str, resolver: CryptoResolver | None = None
) -> str:
    """Return ``ref_`` plus the first 16 characters of SHA-1(``"::".join(parts)``)."""

    digest = await get_provider(resolver).sha1("::".join(parts))
    return f"ref_{digest[:16]}"


def generate_secret_key(
    fmt: Literal["hex", "base64"] = "hex", *, resolver: CryptoResolver | None = None
) -> str:
    """Return 32 random bytes as hex (default) or base64."""

    raw = get_provider(resolver).random_bytes(32)
    if fmt == "base64":
        return base64.b64encode(raw).decode("ascii")
    return raw.hex()
