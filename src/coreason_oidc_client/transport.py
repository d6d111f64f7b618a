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
Bounded JSON fetching over an injected httpx client.
"""

import json
from typing import Any

import httpx

from coreason_oidc_client.exceptions import DeserializationError, OversizedResponseError, TransportError
from coreason_oidc_client.utils.logger import logger

DEFAULT_MAX_BYTES = 1_000_000


async def safe_json_fetch(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    max_bytes: int = DEFAULT_MAX_BYTES,
    **kwargs: Any,
) -> Any:
    """
    Sends a request and decodes the JSON body, reading at most `max_bytes`.

    The body is streamed so an oversized response is rejected before it is
    held in memory. Error responses are read too, so the IdP's error payload
    travels with the raised TransportError.

    Args:
        client: The async HTTP client to send the request with.
        url: Absolute request URL.
        method: HTTP method.
        max_bytes: Maximum accepted body size.
        **kwargs: Passed through to `client.stream` (headers, data, auth, ...).

    Returns:
        Any: The decoded JSON value.

    Raises:
        OversizedResponseError: If the body exceeds `max_bytes`.
        TransportError: On connection failures, timeouts and non-2xx statuses.
        DeserializationError: If the body is not valid JSON.
    """
    try:
        async with client.stream(method, url, **kwargs) as response:
            content_length = response.headers.get("Content-Length")
            if content_length:
                try:
                    if int(content_length) > max_bytes:
                        raise OversizedResponseError(f"Response from {url} too large ({content_length} bytes)")
                except ValueError:
                    pass

            content = bytearray()
            async for chunk in response.aiter_bytes():
                content.extend(chunk)
                if len(content) > max_bytes:
                    raise OversizedResponseError(f"Response from {url} too large")

            if response.is_error:
                body = content.decode("utf-8", errors="replace")
                logger.error(f"{method} {url} failed with status {response.status_code}")
                raise TransportError(
                    f"{method} {url} failed with status {response.status_code}",
                    status_code=response.status_code,
                    response_body=body,
                )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"{method} {url} failed: {e}")
        raise TransportError(f"{method} {url} failed: {e}") from e

    try:
        return json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Invalid JSON received from {url}")
        raise DeserializationError(f"Invalid JSON response from {url}: {e}") from e
