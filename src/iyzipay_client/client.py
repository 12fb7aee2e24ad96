"""Top-level client object."""

from __future__ import annotations

from typing import Any

import httpx

from iyzipay_client.crypto.resolver import CryptoResolver
from iyzipay_client.errors import IyzipayConfigError
from iyzipay_client.http_client import HttpClient, IyzipayConfig
from iyzipay_client.settings import IyzipaySettings, get_settings

__all__ = ["Iyzipay"]


class Iyzipay:
    """Entry point holding the signed HTTP client.

    Resource wrappers (payments, refunds, checkout forms) are thin callers of
    :attr:`http`; they are layered on by applications as needed.
    """

    def __init__(
        self,
        config: IyzipayConfig,
        *,
        resolver: CryptoResolver | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.http = HttpClient(config, resolver=resolver, transport=transport)

    @classmethod
    def from_env(
        cls,
        settings: IyzipaySettings | None = None,
        **overrides: Any,
    ) -> Iyzipay:
        """Build a client from ``IYZIPAY_*`` environment variables.

        Args:
            settings: Pre-parsed settings; read from the environment when omitted.
            **overrides: ``timeout``, ``resolver`` or ``transport`` overrides.

        Raises:
            IyzipayConfigError: If the API key or secret key is missing.
        """

        settings_obj = settings or get_settings()
        if not settings_obj.api_key or not settings_obj.secret_key:
            raise IyzipayConfigError(
                "Iyzipay environment variables (IYZIPAY_API_KEY, "
                "IYZIPAY_SECRET_KEY) are missing."
            )
        config = IyzipayConfig(
            api_key=settings_obj.api_key,
            secret_key=settings_obj.secret_key,
            base_url=settings_obj.base_url,
            timeout=overrides.pop("timeout", settings_obj.timeout),
        )
        return cls(config, **overrides)
