"""Tests for the signed HTTP client using ``httpx.MockTransport``."""

from __future__ import annotations

import base64
import json
from decimal import Decimal
from typing import Any

import httpx
import pytest
from pydantic import BaseModel, Field, ValidationError

from iyzipay_client.auth import CLIENT_VERSION, NonceSource
from iyzipay_client.client import Iyzipay
from iyzipay_client.crypto import BridgeCryptoProvider, CryptoResolver
from iyzipay_client.errors import HttpStatusError, IyzipayError, UnsupportedOperationError
from iyzipay_client.http_client import HttpClient, IyzipayConfig, serialize_body
from iyzipay_client.testing import make_resolver

from fakes import CountingProvider, FakeBridge

CONFIG = IyzipayConfig(
    api_key="sandbox-api",
    secret_key="sandbox-secret",
    base_url="https://sandbox-api.iyzipay.com/",
)


class _Recorder:
    """Mock transport handler answering every request with a fresh response."""

    def __init__(self, status_code: int = 200, **kwargs: Any) -> None:
        self.status_code = status_code
        self.kwargs = kwargs
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, **self.kwargs)


def _client(recorder: _Recorder, resolver: CryptoResolver) -> HttpClient:
    return HttpClient(
        CONFIG,
        resolver=resolver,
        transport=httpx.MockTransport(recorder),
        nonce_source=NonceSource(clock=lambda: 1_700_000_000_000),
    )


def _signature(request: httpx.Request) -> str:
    token = request.headers["Authorization"].split(" ", 1)[1]
    params = dict(part.split(":", 1) for part in base64.b64decode(token).decode().split("&"))
    return params["signature"]


async def test_post_signs_exact_body_sent(
    resolver: CryptoResolver, counting_provider: CountingProvider
) -> None:
    recorder = _Recorder(200, json={"status": "success", "binNumber": "554960"})
    client = _client(recorder, resolver)

    result = await client.post("/payment/bin/check", {"locale": "tr", "price": "1.0"})

    assert result.ok
    assert result.data == {"status": "success", "binNumber": "554960"}
    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://sandbox-api.iyzipay.com/payment/bin/check"
    assert request.content == b'{"locale":"tr","price":"1.0"}'
    assert request.headers["x-iyzi-rnd"] == "1700000000000"
    assert request.headers["x-iyzi-client-version"] == CLIENT_VERSION
    assert request.headers["Content-Type"] == "application/json"
    assert counting_provider.hmac_calls == [
        (
            "sandbox-secret",
            '1700000000000/payment/bin/check{"locale":"tr","price":"1.0"}',
        )
    ]
    assert _signature(request) == await counting_provider.hmac_sha256(
        "sandbox-secret", '1700000000000/payment/bin/check{"locale":"tr","price":"1.0"}'
    )


async def test_get_signs_without_body(
    resolver: CryptoResolver, counting_provider: CountingProvider
) -> None:
    recorder = _Recorder(200, json={"status": "success"})
    result = await _client(recorder, resolver).get("/payment/detail")

    assert result.ok
    assert recorder.requests[0].content == b""
    assert counting_provider.hmac_calls == [("sandbox-secret", "1700000000000/payment/detail")]
    assert _signature(recorder.requests[0]) == (
        "798144ea16679d18d23db6f8669ff65aee58bbbe83e0a86059c8d1309f97d33f"
    )


async def test_each_request_gets_a_fresh_nonce(resolver: CryptoResolver) -> None:
    recorder = _Recorder(200, json={"status": "success"})
    client = _client(recorder, resolver)

    await client.post("/a", {})
    await client.put("/a", {})
    await client.delete("/a")

    nonces = [request.headers["x-iyzi-rnd"] for request in recorder.requests]
    assert nonces == ["1700000000000", "1700000000001", "1700000000002"]
    assert [request.method for request in recorder.requests] == ["POST", "PUT", "DELETE"]


async def test_gateway_failure_becomes_structured_error(resolver: CryptoResolver) -> None:
    payload = {
        "status": "failure",
        "errorCode": "1001",
        "errorMessage": "api bilgileri bulunamadı",
        "errorGroup": "NOT_FOUND",
        "locale": "tr",
        "conversationId": "conv-1",
        "systemTime": 1700000000000,
    }
    recorder = _Recorder(200, json=payload)

    result = await _client(recorder, resolver).post("/payment/auth", {"locale": "tr"})

    assert not result.ok
    assert isinstance(result.error, IyzipayError)
    assert result.error.error_code == "1001"
    assert result.error.error_group == "NOT_FOUND"
    assert result.error.conversation_id == "conv-1"
    assert result.error.system_time == 1700000000000
    assert str(result.error) == "api bilgileri bulunamadı"


async def test_http_status_error(resolver: CryptoResolver) -> None:
    recorder = _Recorder(500, text="upstream down")
    result = await _client(recorder, resolver).get("/payment/detail")

    assert isinstance(result.error, HttpStatusError)
    assert result.error.status_code == 500
    assert str(result.error) == "HTTP 500: upstream down"


async def test_transport_error_is_returned(resolver: CryptoResolver) -> None:
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpClient(CONFIG, resolver=resolver, transport=httpx.MockTransport(_boom))
    result = await client.get("/payment/detail")

    assert isinstance(result.error, httpx.ConnectError)
    assert result.data is None


async def test_non_json_response_is_an_error(resolver: CryptoResolver) -> None:
    recorder = _Recorder(200, text="<html>")
    result = await _client(recorder, resolver).get("/payment/detail")
    assert isinstance(result.error, ValueError)


async def test_non_object_json_is_an_error(resolver: CryptoResolver) -> None:
    recorder = _Recorder(200, json=[1, 2])
    result = await _client(recorder, resolver).get("/payment/detail")
    assert isinstance(result.error, TypeError)


async def test_signing_failure_never_sends_request() -> None:
    resolver = make_resolver(BridgeCryptoProvider(FakeBridge()))
    recorder = _Recorder(200, json={"status": "success"})

    result = await _client(recorder, resolver).post("/payment/auth", {"a": 1})

    assert isinstance(result.error, UnsupportedOperationError)
    assert recorder.requests == []


async def test_unserializable_body_never_sends_request(resolver: CryptoResolver) -> None:
    recorder = _Recorder(200, json={"status": "success"})

    result = await _client(recorder, resolver).post("/payment/auth", {"price": Decimal("1.0")})

    assert not result.ok
    assert result.data is None
    assert isinstance(result.error, TypeError)
    assert recorder.requests == []

class _BinCheck(BaseModel):
    status: str
    bin_number: str = Field(alias="binNumber")


async def test_response_model_validation(resolver: CryptoResolver) -> None:
    recorder = _Recorder(200, json={"status": "success", "binNumber": "554960"})
    client = _client(recorder, resolver)

    result = await client.post("/payment/bin/check", {"binNumber": "554960"}, _BinCheck)
    assert isinstance(result.data, _BinCheck)
    assert result.data.bin_number == "554960"

    recorder.kwargs = {"json": {"status": "success"}}
    result = await client.post("/payment/bin/check", {"binNumber": "554960"}, _BinCheck)
    assert isinstance(result.error, ValidationError)


class _BinRequest(BaseModel):
    locale: str
    bin_number: str = Field(alias="binNumber")
    conversation_id: str | None = Field(default=None, alias="conversationId")
    price: Decimal


async def test_model_body_is_sent_by_alias(
    resolver: CryptoResolver, counting_provider: CountingProvider
) -> None:
    recorder = _Recorder(200, json={"status": "success"})
    body = _BinRequest(locale="tr", binNumber="554960", price=Decimal("1.0"))

    result = await _client(recorder, resolver).post("/payment/bin/check", body)

    assert result.ok
    sent = recorder.requests[0].content.decode("utf-8")
    assert json.loads(sent) == {"locale": "tr", "binNumber": "554960", "price": "1.0"}
    assert counting_provider.hmac_calls[-1][1] == f"1700000000000/payment/bin/check{sent}"


def test_serialize_body_is_compact_and_unicode() -> None:
    assert serialize_body({"city": "İstanbul", "n": 1}) == '{"city":"İstanbul","n":1}'
    assert json.loads(serialize_body({"a": [1, 2]})) == {"a": [1, 2]}


def test_config_requires_credentials() -> None:
    with pytest.raises(ValidationError):
        IyzipayConfig(api_key="", secret_key="s")
    with pytest.raises(ValidationError):
        IyzipayConfig(api_key="k", secret_key="s", timeout=0)
    assert "s3cret" not in repr(IyzipayConfig(api_key="k", secret_key="s3cret"))


async def test_client_facade_routes_through_http(resolver: CryptoResolver) -> None:
    recorder = _Recorder(200, json={"status": "success"})
    client = Iyzipay(CONFIG, resolver=resolver, transport=httpx.MockTransport(recorder))

    result = await client.http.get("/payment/detail")

    assert result.ok
    assert recorder.requests[0].headers["Authorization"].startswith("IYZWSv2 ")
