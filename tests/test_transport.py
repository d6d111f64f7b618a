# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc_client

"""
Tests for safe_json_fetch.
"""

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest

from coreason_oidc_client.exceptions import DeserializationError, OversizedResponseError, TransportError
from coreason_oidc_client.transport import safe_json_fetch


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_json_success() -> None:
    async with make_client(lambda request: httpx.Response(200, json={"sub": "123"})) as client:
        data = await safe_json_fetch(client, "https://idp/userinfo")
    assert data == {"sub": "123"}


@pytest.mark.asyncio
async def test_fetch_passes_request_options() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with make_client(handler) as client:
        await safe_json_fetch(client, "https://idp/token", method="POST", data={"a": "b c"}, headers={"X-Test": "1"})

    assert seen[0].method == "POST"
    assert seen[0].headers["X-Test"] == "1"
    assert seen[0].content == b"a=b+c"


@pytest.mark.asyncio
async def test_fetch_rejects_large_content_length() -> None:
    async with make_client(lambda request: httpx.Response(200, content=b"{" + b" " * 100 + b"}")) as client:
        with pytest.raises(OversizedResponseError):
            await safe_json_fetch(client, "https://idp/userinfo", max_bytes=10)


@pytest.mark.asyncio
async def test_fetch_rejects_large_streamed_body() -> None:
    async def endless() -> AsyncGenerator[bytes, None]:
        for _ in range(100):
            yield b"a" * 1024

    async with make_client(lambda request: httpx.Response(200, content=endless())) as client:
        with pytest.raises(OversizedResponseError) as exc:
            await safe_json_fetch(client, "https://idp/userinfo", max_bytes=4096)
    assert isinstance(exc.value, TransportError)


@pytest.mark.asyncio
async def test_fetch_error_status_keeps_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "invalid_grant"})

    async with make_client(handler) as client:
        with pytest.raises(TransportError) as exc:
            await safe_json_fetch(client, "https://idp/token", method="POST")

    assert exc.value.status_code == 400
    assert exc.value.response_body is not None
    assert "invalid_grant" in exc.value.response_body


@pytest.mark.asyncio
async def test_fetch_connection_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(TransportError, match="Connection refused") as exc:
            await safe_json_fetch(client, "https://idp/token")

    assert exc.value.status_code is None
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_fetch_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with make_client(handler) as client:
        with pytest.raises(TransportError):
            await safe_json_fetch(client, "https://idp/token")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"", b"<html>oops</html>", b"{\"unterminated\": "])
async def test_fetch_invalid_json(body: bytes) -> None:
    async with make_client(lambda request: httpx.Response(200, content=body)) as client:
        with pytest.raises(DeserializationError):
            await safe_json_fetch(client, "https://idp/userinfo")


@pytest.mark.asyncio
async def test_fetch_invalid_url() -> None:
    async with make_client(lambda request: httpx.Response(200, json={})) as client:
        with pytest.raises(TransportError) as exc:
            await safe_json_fetch(client, "http://[::1/userinfo")
    assert isinstance(exc.value.__cause__, httpx.InvalidURL)
