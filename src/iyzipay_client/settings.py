"""Environment-backed settings primitives for :mod:`iyzipay_client`."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_NONCE_EXPIRY_MS",
    "DEFAULT_TIMEOUT_SECONDS",
    "IyzipaySettings",
    "get_settings",
]

DEFAULT_BASE_URL = "https://api.iyzipay.com"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_NONCE_EXPIRY_MS = 300_000


class IyzipaySettings(BaseSettings):
    """Expose environment-derived configuration knobs for the client.

    All environment lookups flow through this class. Credentials default to
    ``None`` so callers can decide whether their absence is fatal.

    Attributes:
        api_key: Merchant API key (``IYZIPAY_API_KEY``).
        secret_key: Merchant secret key (``IYZIPAY_SECRET_KEY``).
        base_url: Gateway base URL (``IYZIPAY_BASE_URL``).
        timeout: HTTP timeout in seconds (``IYZIPAY_TIMEOUT``).
        nonce_expiry_ms: Default validity window for signed nonces
            (``IYZIPAY_NONCE_EXPIRY_MS``).
    """

    api_key: str | None = Field(default=None, alias="IYZIPAY_API_KEY")
    secret_key: str | None = Field(default=None, alias="IYZIPAY_SECRET_KEY")
    base_url: str = Field(default=DEFAULT_BASE_URL, alias="IYZIPAY_BASE_URL")
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, alias="IYZIPAY_TIMEOUT")
    nonce_expiry_ms: int = Field(
        default=DEFAULT_NONCE_EXPIRY_MS, alias="IYZIPAY_NONCE_EXPIRY_MS"
    )

    model_config = SettingsConfigDict(
        env_file=None, extra="ignore", populate_by_name=True
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def _default_blank_base_url(cls, value: object) -> object:
        """Treat an empty base URL as unset."""

        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_BASE_URL
        return value

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: object) -> float:
        """Parse the timeout while tolerating malformed input.

        Args:
            value: Raw environment value.

        Returns:
            Parsed positive float, otherwise the default timeout.
        """

        parsed: float | None = None
        if isinstance(value, (int, float)):
            parsed = float(value)
        elif isinstance(value, str):
            try:
                parsed = float(value.strip())
            except ValueError:
                parsed = None
        if parsed is None or parsed <= 0:
            return DEFAULT_TIMEOUT_SECONDS
        return parsed

    @field_validator("nonce_expiry_ms", mode="before")
    @classmethod
    def _parse_expiry(cls, value: object) -> int:
        """Parse the nonce expiry window, falling back to five minutes."""

        if isinstance(value, int) and value > 0:
            return value
        if isinstance(value, str):
            try:
                parsed = int(value.strip())
            except ValueError:
                return DEFAULT_NONCE_EXPIRY_MS
            return parsed if parsed > 0 else DEFAULT_NONCE_EXPIRY_MS
        return DEFAULT_NONCE_EXPIRY_MS


def get_settings() -> IyzipaySettings:
    """Return an :class:`IyzipaySettings` instance parsed from the environment."""

    return IyzipaySettings()
