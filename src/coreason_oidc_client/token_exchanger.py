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
TokenExchanger component for the authorization code grant and the UserInfo endpoint.
"""

from contextlib import AbstractContextManager
from typing import Any

import httpx
from anyio.from_thread import BlockingPortal, start_blocking_portal
from opentelemetry import trace
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from coreason_oidc_client.config import ClientConfig
from coreason_oidc_client.exceptions import CoreasonOIDCError, DeserializationError, TransportError
from coreason_oidc_client.models import AuthRequestParams, TokenAnswer, UserInfo
from coreason_oidc_client.request_builder import build_authorization_url, encode_for_url
from coreason_oidc_client.transport import safe_json_fetch
from coreason_oidc_client.utils.logger import logger

tracer = trace.get_tracer(__name__)

JSON_HEADERS = {"Accept": "application/json"}


class TokenExchangerAsync:
    """
    Async implementation of the TokenExchanger (The Core).

    Both operations are single-shot request/response exchanges: nothing is
    cached between calls and nothing is retried. Endpoint URLs are derived from
    the config on every call.

    Attributes:
        config (ClientConfig): The client configuration.
    """

    def __init__(self, config: ClientConfig, client: httpx.AsyncClient | None = None) -> None:
        """
        Initialize the TokenExchangerAsync.

        Args:
            config: The client configuration.
            client: External async client (optional). If not provided, one is created
                with `config.http_timeout` and closed on exit.
        """
        self.config = config
        self._internal_client = client is None

        if client:
            self._client = client
        else:
            self._client = httpx.AsyncClient(timeout=self.config.http_timeout)
            # Instrument the client for distributed tracing
            HTTPXClientInstrumentor().instrument_client(self._client)

    async def __aenter__(self) -> "TokenExchangerAsync":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the HTTP client if it was created by this exchanger."""
        if self._internal_client:
            await self._client.aclose()

    @property
    def security_target(self) -> httpx.URL:
        """The base target requests are currently sent to."""
        return self.config.security_target

    def authorization_url(self, params: AuthRequestParams) -> str:
        """
        Builds the authorization request URL for this exchanger's config.

        See `build_authorization_url`.
        """
        return build_authorization_url(self.config, params)

    def _endpoint(self, path: str) -> str:
        try:
            return self.config.endpoint_url(path)
        except httpx.InvalidURL as e:
            logger.error(f"Invalid security endpoint {self.config.security_endpoint!r}: {e}")
            raise TransportError(f"Invalid security endpoint {self.config.security_endpoint!r}: {e}") from e

    def _client_auth(self) -> httpx.BasicAuth | None:
        # client_secret_basic: both parts are form-urlencoded first (RFC 6749, 2.3.1)
        if self.config.client_secret is None:
            return None
        return httpx.BasicAuth(
            encode_for_url(self.config.client_id),
            encode_for_url(self.config.client_secret.get_secret_value()),
        )

    async def exchange_code(self, code: str) -> TokenAnswer:
        """
        Exchanges an authorization code for tokens.

        POSTs `grant_type=authorization_code`, `code` and `redirect_uri` as a form
        to `{security_endpoint}/token`. Emits an OpenTelemetry span `oidc.exchange_code`.

        Args:
            code: The authorization code returned to the redirect URI.

        Returns:
            TokenAnswer: The tokens issued by the IdP.

        Raises:
            TransportError: If the request fails or the IdP answers with an error status.
            DeserializationError: If the response is not a valid token response.
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.config.redirect_url,
        }

        with tracer.start_as_current_span("oidc.exchange_code") as span:
            try:
                url = self._endpoint("token")
                span.set_attribute("http.url", url)
                payload = await safe_json_fetch(
                    self._client,
                    url,
                    method="POST",
                    max_bytes=self.config.max_response_bytes,
                    data=data,
                    headers=JSON_HEADERS,
                    auth=self._client_auth(),
                )
                try:
                    answer = TokenAnswer.model_validate(payload)
                except ValidationError as e:
                    logger.error(f"Token response from {url} has an unexpected shape")
                    raise DeserializationError(f"Invalid token response: {e}") from e
            except CoreasonOIDCError as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            logger.info(f"Authorization code exchanged for client {self.config.client_id}")
            span.set_status(Status(StatusCode.OK))
            return answer

    async def fetch_user_info(self, access_token: str) -> UserInfo:
        """
        Fetches the claims about the End-User the access token belongs to.

        The decoded JSON is returned as-is since claim sets differ between providers.
        Emits an OpenTelemetry span `oidc.fetch_user_info`.

        Args:
            access_token: The access token obtained from `exchange_code`.

        Returns:
            UserInfo: The decoded JSON payload of the UserInfo endpoint.

        Raises:
            TransportError: If the request fails or the IdP answers with an error status.
            DeserializationError: If the response body is not JSON.
        """
        headers = {**JSON_HEADERS, "Authorization": f"Bearer {encode_for_url(access_token)}"}

        with tracer.start_as_current_span("oidc.fetch_user_info") as span:
            try:
                url = self._endpoint("userinfo")
                span.set_attribute("http.url", url)
                claims = await safe_json_fetch(
                    self._client,
                    url,
                    max_bytes=self.config.max_response_bytes,
                    headers=headers,
                )
            except CoreasonOIDCError as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            logger.debug(f"UserInfo retrieved from {url}")
            span.set_status(Status(StatusCode.OK))
            return claims


class TokenExchanger:
    """
    Blocking facade over TokenExchangerAsync.

    Calls run on an anyio blocking portal that lives as long as the facade, so
    every call shares one event loop and one connection pool. Use it as a
    context manager or call `close()` when done.
    """

    def __init__(self, config: ClientConfig, client: httpx.AsyncClient | None = None) -> None:
        """
        Initialize the TokenExchanger.

        Args:
            config: The client configuration.
            client: External async client (optional). See TokenExchangerAsync.
        """
        self._async = TokenExchangerAsync(config, client=client)
        self._portal_cm: AbstractContextManager[BlockingPortal] = start_blocking_portal()
        self._portal: BlockingPortal | None = self._portal_cm.__enter__()

    def __enter__(self) -> "TokenExchanger":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _run_portal(self) -> BlockingPortal:
        if self._portal is None:
            raise CoreasonOIDCError("TokenExchanger is closed.")
        return self._portal

    def close(self) -> None:
        """Closes the internal client (if any) and stops the event loop thread."""
        if self._portal is None:
            return
        try:
            self._portal.call(self._async.aclose)
        finally:
            self._portal = None
            self._portal_cm.__exit__(None, None, None)

    @property
    def config(self) -> ClientConfig:
        return self._async.config

    @property
    def security_target(self) -> httpx.URL:
        return self._async.security_target

    def authorization_url(self, params: AuthRequestParams) -> str:
        return self._async.authorization_url(params)

    def exchange_code(self, code: str) -> TokenAnswer:
        """Blocking version of `TokenExchangerAsync.exchange_code`."""
        return self._run_portal().call(self._async.exchange_code, code)

    def fetch_user_info(self, access_token: str) -> UserInfo:
        """Blocking version of `TokenExchangerAsync.fetch_user_info`."""
        return self._run_portal().call(self._async.fetch_user_info, access_token)
