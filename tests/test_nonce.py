"""Tests for signed nonce creation and verification."""

from __future__ import annotations

import logging

import pytest

from iyzipay_client.crypto import CryptoResolver, SubtleCryptoProvider
from iyzipay_client.errors import CryptoUnavailableError, UnsupportedOperationError
from iyzipay_client.nonce import (
    NONCE_BYTES,
    SignedNonce,
    create_signed_nonce,
    verify_signed_nonce,
)
from iyzipay_client.testing import make_resolver

from fakes import CountingProvider, FakeWebCrypto

SECRET = "nonce-secret"
NOW = 1_700_000_000_000
WINDOW = 300_000


def _at(value: int):
    return lambda: value


async def test_created_nonce_verifies(resolver: CryptoResolver) -> None:
    signed = await create_signed_nonce(SECRET, resolver=resolver, clock=_at(NOW))

    assert len(signed.nonce) == NONCE_BYTES * 2
    int(signed.nonce, 16)
    assert signed.timestamp == NOW
    assert signed.expires_at == NOW + WINDOW
    assert await verify_signed_nonce(
        signed.nonce,
        signed.timestamp,
        signed.signature,
        SECRET,
        resolver=resolver,
        clock=_at(NOW + 1_000),
    )


async def test_known_signature_vector(resolver: CryptoResolver) -> None:
    signature = "d77e0ba9a3fe899650be27f9ac7f3a7bb6e597238c00af81015f3a924d4834bc"
    assert await verify_signed_nonce(
        "abc", NOW, signature, SECRET, resolver=resolver, clock=_at(NOW)
    )


async def test_custom_expiry_is_applied(resolver: CryptoResolver) -> None:
    signed = await create_signed_nonce(SECRET, 1_000, resolver=resolver, clock=_at(NOW))
    assert signed.expires_at == NOW + 1_000
    assert await verify_signed_nonce(
        signed.nonce,
        NOW,
        signed.signature,
        SECRET,
        1_000,
        resolver=resolver,
        clock=_at(NOW + 999),
    )


async def test_environment_window_is_the_default(
    resolver: CryptoResolver, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("IYZIPAY_NONCE_EXPIRY_MS", "60000")

    signed = await create_signed_nonce(SECRET, resolver=resolver, clock=_at(0))

    assert signed.expires_at == 60_000
    assert await verify_signed_nonce(
        signed.nonce, 0, signed.signature, SECRET, resolver=resolver, clock=_at(60_000)
    )
    assert not await verify_signed_nonce(
        signed.nonce, 0, signed.signature, SECRET, resolver=resolver, clock=_at(60_001)
    )


async def test_nonces_are_unique(resolver: CryptoResolver) -> None:
    first = await create_signed_nonce(SECRET, resolver=resolver)
    second = await create_signed_nonce(SECRET, resolver=resolver)
    assert first.nonce != second.nonce


async def test_expired_nonce_is_rejected_without_crypto(
    resolver: CryptoResolver, counting_provider: CountingProvider
) -> None:
    assert not await verify_signed_nonce(
        "abc", NOW, "sig", SECRET, resolver=resolver, clock=_at(NOW + WINDOW + 1)
    )
    assert counting_provider.hmac_calls == []


async def test_future_nonce_is_rejected_without_crypto(
    resolver: CryptoResolver, counting_provider: CountingProvider
) -> None:
    assert not await verify_signed_nonce(
        "abc", NOW + 10, "sig", SECRET, resolver=resolver, clock=_at(NOW)
    )
    assert counting_provider.hmac_calls == []


async def test_window_edge_is_inclusive(resolver: CryptoResolver) -> None:
    signed = await create_signed_nonce(SECRET, resolver=resolver, clock=_at(NOW))
    assert await verify_signed_nonce(
        signed.nonce, NOW, signed.signature, SECRET, resolver=resolver, clock=_at(NOW + WINDOW)
    )


async def test_tampered_fields_fail(resolver: CryptoResolver) -> None:
    signed = await create_signed_nonce(SECRET, resolver=resolver, clock=_at(NOW))
    later = _at(NOW + 5)

    assert not await verify_signed_nonce(
        signed.nonce, NOW, signed.signature, "other", resolver=resolver, clock=later
    )
    assert not await verify_signed_nonce(
        "0" * 32, NOW, signed.signature, SECRET, resolver=resolver, clock=later
    )
    assert not await verify_signed_nonce(
        signed.nonce, NOW + 1, signed.signature, SECRET, resolver=resolver, clock=later
    )
    assert not await verify_signed_nonce(
        signed.nonce, NOW, signed.signature[:-1], SECRET, resolver=resolver, clock=later
    )


async def test_verification_fails_closed_on_provider_error(
    resolver: CryptoResolver,
    counting_provider: CountingProvider,
    caplog: pytest.LogCaptureFixture,
) -> None:
    counting_provider.fail_with = UnsupportedOperationError("boom")

    with caplog.at_level(logging.WARNING):
        result = await verify_signed_nonce(
            "abc", NOW, "sig", SECRET, resolver=resolver, clock=_at(NOW)
        )

    assert result is False
    assert len(counting_provider.hmac_calls) == 1
    assert "failed closed" in caplog.text


async def test_verification_fails_closed_without_timing_safe_compare() -> None:
    resolver = make_resolver(SubtleCryptoProvider(FakeWebCrypto()))
    signature = "d77e0ba9a3fe899650be27f9ac7f3a7bb6e597238c00af81015f3a924d4834bc"
    assert not await verify_signed_nonce(
        "abc", NOW, signature, SECRET, resolver=resolver, clock=_at(NOW)
    )


async def test_creation_propagates_unavailable_crypto() -> None:
    resolver = CryptoResolver([lambda: None])
    with pytest.raises(CryptoUnavailableError):
        await create_signed_nonce(SECRET, resolver=resolver)


def test_to_dict_uses_gateway_field_names() -> None:
    signed = SignedNonce(nonce="abc", timestamp=1, expires_at=2, signature="ff")
    assert signed.to_dict() == {
        "nonce": "abc",
        "timestamp": 1,
        "expiresAt": 2,
        "signature": "ff",
    }
