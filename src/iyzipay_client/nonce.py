"""Signed nonces for replay protection.

A signed nonce carries a random value, its creation time and an expiry, all
bound together by ``HMAC(secret, "nonce:timestamp:expires_at")``. The
receiving side rejects stale or future-dated nonces before doing any crypto.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass

from iyzipay_client.crypto.resolver import CryptoResolver, get_provider
from iyzipay_client.settings import get_settings

__all__ = ["NONCE_BYTES", "SignedNonce", "create_signed_nonce", "verify_signed_nonce"]

LOGGER = logging.getLogger(__name__)

NONCE_BYTES = 16


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def _signing_payload(nonce: str, timestamp: int, expires_at: int) -> str:
    return f"{nonce}:{timestamp}:{expires_at}"


@dataclass(frozen=True, slots=True)
class SignedNonce:
    """Nonce record produced by :func:`create_signed_nonce`.

    Attributes:
        nonce: Random lowercase hex string.
        timestamp: Creation time in epoch milliseconds.
        expires_at: ``timestamp`` plus the validity window.
        signature: Hex HMAC over ``nonce:timestamp:expires_at``.
    """

    nonce: str
    timestamp: int
    expires_at: int
    signature: str

    def to_dict(self) -> dict[str, object]:
        """Return the record using the gateway's camelCase field names."""

        data = asdict(self)
        data["expiresAt"] = data.pop("expires_at")
        return data


async def create_signed_nonce(
    secret: str,
    expiry_ms: int | None = None,
    *,
    resolver: CryptoResolver | None = None,
    clock: Callable[[], int] = _epoch_millis,
) -> SignedNonce:
    """Create a nonce valid for ``expiry_ms`` milliseconds.

    When ``expiry_ms`` is omitted the window comes from
    ``IYZIPAY_NONCE_EXPIRY_MS`` (five minutes by default).

    Raises:
        CryptoUnavailableError: If no provider can be resolved.
        UnsupportedOperationError: If the provider cannot compute HMAC.
    """

    if expiry_ms is None:
        expiry_ms = get_settings().nonce_expiry_ms
    provider = get_provider(resolver)
    nonce = provider.random_string(NONCE_BYTES)
    timestamp = clock()
    expires_at = timestamp + expiry_ms
    signature = await provider.hmac_sha256(
        secret, _signing_payload(nonce, timestamp, expires_at)
    )
    return SignedNonce(
        nonce=nonce, timestamp=timestamp, expires_at=expires_at, signature=signature
    )


async def verify_signed_nonce(
    nonce: str,
    timestamp: int,
    signature: str,
    secret: str,
    max_age_ms: int | None = None,
    *,
    resolver: CryptoResolver | None = None,
    clock: Callable[[], int] = _epoch_millis,
) -> bool:
    """Return ``True`` when the nonce is fresh and its signature matches.

    Future timestamps (``age < 0``) and expired ones (``age > max_age_ms``)
    are rejected without touching the crypto provider. ``max_age_ms``
    defaults to ``IYZIPAY_NONCE_EXPIRY_MS``. Errors raised while
    recomputing or comparing the signature yield ``False``.
    """

    if max_age_ms is None:
        max_age_ms = get_settings().nonce_expiry_ms
    age = clock() - timestamp
    if age < 0 or age > max_age_ms:
        LOGGER.debug("Signed nonce outside validity window", extra={"age_ms": age})
        return False

    expires_at = timestamp + max_age_ms
    try:
        provider = get_provider(resolver)
        expected = await provider.hmac_sha256(
            secret, _signing_payload(nonce, timestamp, expires_at)
        )
        return provider.timing_safe_equal(signature, expected)
    except Exception as exc:
        LOGGER.warning(
            "Signed nonce verification failed closed",
            extra={"error_type": type(exc).__name__},
        )
        return False
