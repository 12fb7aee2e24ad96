"""Inbound webhook signature verification."""

from __future__ import annotations

import hmac
import logging

from iyzipay_client.crypto.resolver import CryptoResolver, get_provider

__all__ = ["SIGNATURE_HEADER", "verify_webhook_signature"]

LOGGER = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-iyz-signature"


async def verify_webhook_signature(
    secret_key: str,
    body: str | bytes,
    signature: str,
    *,
    resolver: CryptoResolver | None = None,
) -> bool:
    """Return ``True`` when ``signature`` is the HMAC-SHA256 of ``body``.

    Args:
        secret_key: Merchant secret key.
        body: Raw request body exactly as received. The body is never
            re-serialized, but providers hash text, so bytes are decoded as
            UTF-8 first. A body that is not valid UTF-8 never verifies, even
            when the sender signed those exact bytes.
        signature: Value of the ``x-iyz-signature`` header (lowercase hex).
        resolver: Resolver supplying the crypto provider.

    Returns:
        ``False`` when any input is empty, when the signature does not match,
        or when computing the expected signature fails.
    """

    if not secret_key or not body or not signature:
        return False

    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
        expected = await get_provider(resolver).hmac_sha256(secret_key, text)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
    except Exception as exc:
        LOGGER.warning(
            "Webhook signature verification failed closed",
            extra={"error_type": type(exc).__name__},
        )
        return False
