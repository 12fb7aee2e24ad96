"""V2 request authentication (``IYZWSv2`` authorization header).

The header value is::

    IYZWSv2 base64("apiKey:<key>&randomKey:<nonce>&signature:<hmac>")

where ``hmac`` is the hex HMAC-SHA256, keyed by the secret key, of
``nonce + path + body`` with no delimiters. ``body`` is the exact JSON string
sent on the wire, or ``""`` for bodyless requests.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from iyzipay_client import __version__
from iyzipay_client.crypto.resolver import CryptoResolver, get_provider

__all__ = [
    "AUTH_SCHEME",
    "CLIENT_VERSION",
    "NonceSource",
    "RequestSigner",
    "sign_request",
]

LOGGER = logging.getLogger(__name__)

AUTH_SCHEME = "IYZWSv2"
CLIENT_VERSION = f"iyzipay-python-{__version__}"
NONCE_HEADER = "x-iyzi-rnd"
CLIENT_VERSION_HEADER = "x-iyzi-client-version"


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class NonceSource:
    """Produce time-derived request nonces that never repeat in a process.

    Each value is the current epoch time in milliseconds; when the clock has
    not advanced past the previous value, the previous value plus one is used.
    """

    def __init__(self, clock: Callable[[], int] = _epoch_millis) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            current = self._clock()
            if current <= self._last:
                current = self._last + 1
            self._last = current
        return str(current)


async def sign_request(
    api_key: str,
    secret_key: str,
    path: str,
    nonce: str,
    body: str = "",
    *,
    resolver: CryptoResolver | None = None,
) -> str:
    """Return the ``Authorization`` header value for one request.

    Args:
        api_key: Merchant API key.
        secret_key: Merchant secret key used as the HMAC key.
        path: Request path, including any query string, as sent.
        nonce: Per-request random key; must differ on every call.
        body: Serialized request body, ``""`` for bodyless requests.
        resolver: Resolver supplying the crypto provider.

    Raises:
        ValueError: If ``nonce`` is empty.
        CryptoUnavailableError: If no provider can be resolved.
        UnsupportedOperationError: If the provider cannot compute HMAC.
    """

    if not nonce:
        raise ValueError("nonce must be a non-empty, per-request value")

    provider = get_provider(resolver)
    signature = await provider.hmac_sha256(secret_key, nonce + path + body)
    params = "&".join(
        (f"apiKey:{api_key}", f"randomKey:{nonce}", f"signature:{signature}")
    )
    return f"{AUTH_SCHEME} {provider.base64_encode(params)}"


@dataclass(frozen=True, slots=True)
class RequestSigner:
    """Bind merchant credentials and a resolver for repeated signing."""

    api_key: str
    secret_key: str = field(repr=False)
    resolver: CryptoResolver | None = field(default=None, repr=False)

    async def sign(self, path: str, nonce: str, body: str = "") -> str:
        """Return the authorization header value for ``path``/``nonce``/``body``."""

        return await sign_request(
            self.api_key,
            self.secret_key,
            path,
            nonce,
            body,
            resolver=self.resolver,
        )

    async def headers(self, path: str, nonce: str, body: str = "") -> dict[str, str]:
        """Return the full header set for a signed JSON request."""

        authorization = await self.sign(path, nonce, body)
        LOGGER.debug("Request signed", extra={"path": path, "nonce": nonce})
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            NONCE_HEADER: nonce,
            CLIENT_VERSION_HEADER: CLIENT_VERSION,
            "Authorization": authorization,
        }
