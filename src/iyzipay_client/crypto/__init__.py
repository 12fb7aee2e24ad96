"""Cross-runtime cryptographic providers and their resolver."""

from __future__ import annotations

from iyzipay_client.crypto.base import CryptoProvider
from iyzipay_client.crypto.bridge import BridgeCryptoProvider, NativeCryptoBridge
from iyzipay_client.crypto.codec import (
    AsciiCodec,
    Base64Codec,
    BufferCodec,
    UnavailableCodec,
    resolve_codec,
)
from iyzipay_client.crypto.native import NativeCryptoProvider, probe_native_crypto
from iyzipay_client.crypto.resolver import (
    DEFAULT_FACTORIES,
    CryptoResolver,
    ProviderFactory,
    default_resolver,
    get_provider,
    set_provider,
)
from iyzipay_client.crypto.subtle import SubtleCryptoProvider, probe_subtle_crypto
from iyzipay_client.crypto.utils import (
    RandomBytes,
    base64_to_string,
    calculate_hmac,
    calculate_sha1,
    generate_random_bytes,
    string_to_base64,
)

__all__ = [
    "AsciiCodec",
    "Base64Codec",
    "BridgeCryptoProvider",
    "BufferCodec",
    "CryptoProvider",
    "CryptoResolver",
    "DEFAULT_FACTORIES",
    "NativeCryptoBridge",
    "NativeCryptoProvider",
    "ProviderFactory",
    "RandomBytes",
    "SubtleCryptoProvider",
    "UnavailableCodec",
    "base64_to_string",
    "calculate_hmac",
    "calculate_sha1",
    "default_resolver",
    "generate_random_bytes",
    "get_provider",
    "probe_native_crypto",
    "probe_subtle_crypto",
    "resolve_codec",
    "set_provider",
    "string_to_base64",
]
