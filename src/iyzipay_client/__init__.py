"""iyzipay client - request signing, canonical serialization and crypto providers."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__version__ = "0.1.0"

__all__ = [
    "CryptoProvider",
    "CryptoUnavailableError",
    "Iyzipay",
    "IyzipayConfig",
    "IyzipayError",
    "RequestSigner",
    "SignedNonce",
    "UnsupportedOperationError",
    "build_canonical_string",
    "create_signed_nonce",
    "get_provider",
    "set_provider",
    "sign_request",
    "verify_signed_nonce",
    "verify_webhook_signature",
    "__version__",
]

if TYPE_CHECKING:
    from .auth import RequestSigner, sign_request
    from .canonical import build_canonical_string
    from .client import Iyzipay
    from .crypto import CryptoProvider, get_provider, set_provider
    from .errors import CryptoUnavailableError, IyzipayError, UnsupportedOperationError
    from .http_client import IyzipayConfig
    from .nonce import SignedNonce, create_signed_nonce, verify_signed_nonce
    from .webhook import verify_webhook_signature


def __getattr__(name: str) -> Any:
    """Lazily import submodules so ``import iyzipay_client`` stays light."""

    module_map = {
        "CryptoProvider": "crypto",
        "CryptoUnavailableError": "errors",
        "Iyzipay": "client",
        "IyzipayConfig": "http_client",
        "IyzipayError": "errors",
        "RequestSigner": "auth",
        "SignedNonce": "nonce",
        "UnsupportedOperationError": "errors",
        "build_canonical_string": "canonical",
        "create_signed_nonce": "nonce",
        "get_provider": "crypto",
        "set_provider": "crypto",
        "sign_request": "auth",
        "verify_signed_nonce": "nonce",
        "verify_webhook_signature": "webhook",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
