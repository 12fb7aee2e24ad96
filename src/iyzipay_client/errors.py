"""Exception hierarchy for :mod:`iyzipay_client`."""

from __future__ import annotations

from collections.abc import Mapping

__all__ = [
    "CryptoUnavailableError",
    "HttpStatusError",
    "IyzipayClientError",
    "IyzipayConfigError",
    "IyzipayError",
    "UnsupportedOperationError",
]


class IyzipayClientError(Exception):
    """Base class for every error raised by the client library."""


class CryptoUnavailableError(IyzipayClientError):
    """No cryptographic provider could be resolved in the current runtime."""


class UnsupportedOperationError(IyzipayClientError):
    """The resolved provider lacks a specific primitive."""


class IyzipayConfigError(IyzipayClientError):
    """Client configuration is incomplete."""


class HttpStatusError(IyzipayClientError):
    """The gateway answered with a non-success HTTP status."""

    def __init__(self, status_code: int, text: str) -> None:
        super().__init__(f"HTTP {status_code}: {text}")
        self.status_code = status_code
        self.text = text


class IyzipayError(IyzipayClientError):
    """Structured failure returned by the gateway (``status == "failure"``).

    Attributes:
        status: Raw ``status`` field of the response.
        error_code: Gateway error code, when supplied.
        error_message: Human readable message, when supplied.
        error_group: Gateway error group, when supplied.
        locale: Response locale.
        conversation_id: Conversation identifier echoed by the gateway.
        system_time: Gateway timestamp in epoch milliseconds.
    """

    def __init__(self, response: Mapping[str, object]) -> None:
        message = response.get("errorMessage")
        super().__init__(message or "Unknown Iyzipay Error")
        self.status = str(response.get("status", ""))
        self.error_code = _optional_str(response.get("errorCode"))
        self.error_message = _optional_str(message)
        self.error_group = _optional_str(response.get("errorGroup"))
        self.locale = _optional_str(response.get("locale"))
        self.conversation_id = _optional_str(response.get("conversationId"))
        system_time = response.get("systemTime")
        self.system_time = int(system_time) if isinstance(system_time, (int, float)) else None


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
