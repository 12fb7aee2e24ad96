"""Asynchronous HTTP transport with automatic V2 request signing."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from iyzipay_client.auth import NonceSource, RequestSigner
from iyzipay_client.crypto.resolver import CryptoResolver
from iyzipay_client.errors import HttpStatusError, IyzipayClientError, IyzipayError
from iyzipay_client.settings import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS

__all__ = ["HttpClient", "IyzipayConfig", "IyzipayResult"]

LOGGER = logging.getLogger(__name__)

Method = Literal["GET", "POST", "PUT", "DELETE"]
T = TypeVar("T")
RequestBody = Mapping[str, Any] | BaseModel


class IyzipayConfig(BaseModel):
    """Credentials and endpoint configuration for :class:`HttpClient`."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    secret_key: str = Field(min_length=1, repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)


@dataclass(frozen=True, slots=True)
class IyzipayResult(Generic[T]):
    """Outcome of a gateway call: exactly one of ``data`` or ``error`` is set."""

    data: T | None
    error: Exception | None

    @property
    def ok(self) -> bool:
        """Return ``True`` when the call produced data."""

        return self.error is None


def serialize_body(body: RequestBody) -> str:
    """Return the compact JSON string that is both signed and sent.

    Pydantic models are dumped by alias in JSON mode with ``None`` fields
    left out.

    Raises:
        TypeError: If a mapping holds a value JSON cannot encode.
    """

    if isinstance(body, BaseModel):
        body = body.model_dump(by_alias=True, mode="json", exclude_none=True)
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


class HttpClient:
    """Gateway HTTP client.

    Every request gets a fresh nonce and an ``IYZWSv2`` authorization header
    computed over the exact body bytes sent. If signing fails the request is
    never sent and the signing error is returned in the result.

    Args:
        config: Credentials and endpoint.
        resolver: Resolver supplying the crypto provider.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        nonce_source: Nonce generator; defaults to a millisecond clock source.
    """

    def __init__(
        self,
        config: IyzipayConfig,
        *,
        resolver: CryptoResolver | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        nonce_source: NonceSource | None = None,
    ) -> None:
        self.config = config
        self._signer = RequestSigner(config.api_key, config.secret_key, resolver)
        self._transport = transport
        self._nonces = nonce_source or NonceSource()

    async def get(self, path: str, model: type[BaseModel] | None = None) -> IyzipayResult[Any]:
        """Send a signed GET request."""

        return await self._request("GET", path, None, model)

    async def post(
        self,
        path: str,
        body: RequestBody | None = None,
        model: type[BaseModel] | None = None,
    ) -> IyzipayResult[Any]:
        """Send a signed POST request with a JSON body."""

        return await self._request("POST", path, {} if body is None else body, model)

    async def put(
        self,
        path: str,
        body: RequestBody | None = None,
        model: type[BaseModel] | None = None,
    ) -> IyzipayResult[Any]:
        """Send a signed PUT request with a JSON body."""

        return await self._request("PUT", path, {} if body is None else body, model)

    async def delete(
        self,
        path: str,
        body: RequestBody | None = None,
        model: type[BaseModel] | None = None,
    ) -> IyzipayResult[Any]:
        """Send a signed DELETE request with an optional JSON body."""

        return await self._request("DELETE", path, {} if body is None else body, model)

    async def _request(
        self,
        method: Method,
        path: str,
        body: RequestBody | None,
        model: type[BaseModel] | None,
    ) -> IyzipayResult[Any]:
        url = f"{self.config.base_url.rstrip('/')}{path}"
        nonce = self._nonces()
        try:
            body_text = (
                serialize_body(body) if method != "GET" and body is not None else ""
            )
        except (TypeError, ValueError) as exc:
            LOGGER.error(
                "Request body serialization failed; request not sent",
                extra={"method": method, "path": path, "error_type": type(exc).__name__},
            )
            return IyzipayResult(data=None, error=exc)

        try:
            headers = await self._signer.headers(path, nonce, body_text)
        except IyzipayClientError as exc:
            LOGGER.error(
                "Request signing failed; request not sent",
                extra={"method": method, "path": path, "error_type": type(exc).__name__},
            )
            return IyzipayResult(data=None, error=exc)

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    url,
                    headers=headers,
                    content=body_text.encode("utf-8") if method != "GET" else None,
                )
        except httpx.HTTPError as exc:
            LOGGER.warning(
                "Gateway transport error",
                extra={"method": method, "url": url, "error_type": type(exc).__name__},
                exc_info=exc,
            )
            return IyzipayResult(data=None, error=exc)

        if response.is_error:
            LOGGER.warning(
                "Gateway HTTP error",
                extra={"method": method, "url": url, "status_code": response.status_code},
            )
            return IyzipayResult(
                data=None, error=HttpStatusError(response.status_code, response.text)
            )

        try:
            payload = response.json()
        except ValueError as exc:
            LOGGER.warning(
                "Gateway response parsing error",
                extra={"method": method, "url": url},
                exc_info=exc,
            )
            return IyzipayResult(data=None, error=exc)

        if not isinstance(payload, dict):
            return IyzipayResult(
                data=None, error=TypeError("Gateway response is not a JSON object")
            )

        if payload.get("status") == "failure":
            error = IyzipayError(payload)
            LOGGER.info(
                "Gateway reported failure",
                extra={
                    "method": method,
                    "path": path,
                    "error_code": error.error_code,
                    "conversation_id": error.conversation_id,
                },
            )
            return IyzipayResult(data=None, error=error)

        if model is None:
            return IyzipayResult(data=payload, error=None)
        try:
            return IyzipayResult(data=model.model_validate(payload), error=None)
        except ValidationError as exc:
            return IyzipayResult(data=None, error=exc)
