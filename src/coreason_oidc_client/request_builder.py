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
Construction of OIDC authorization request URLs.
"""

from collections.abc import Iterable
from urllib.parse import quote_plus

from coreason_oidc_client.config import ClientConfig
from coreason_oidc_client.exceptions import MissingRequiredScopeError
from coreason_oidc_client.models import AuthRequestParams
from coreason_oidc_client.utils.logger import logger

OPENID_SCOPE = "openid"


def encode_for_url(value: str) -> str:
    """
    Encodes a value for a query string (UTF-8, application/x-www-form-urlencoded).

    Spaces become "+", "*" is kept and "~" becomes "%7E". This function never
    raises: a value that cannot be encoded as UTF-8 (e.g. one holding a lone
    surrogate) yields an empty string and a warning. Callers rely on URL construction not failing here.

    Args:
        value: The raw value.

    Returns:
        The percent-encoded value, or "" if encoding failed.
    """
    try:
        # WHATWG form-urlencoded byte set: "*" stays, "~" is escaped
        return quote_plus(value, safe="*", encoding="utf-8", errors="strict").replace("~", "%7E")
    except (UnicodeError, LookupError):
        logger.warning("Could not URL-encode a request parameter, substituting an empty value.")
        return ""


def _join(values: Iterable[str]) -> str:
    return " ".join(values)


def build_authorization_url(config: ClientConfig, params: AuthRequestParams) -> str:
    """
    Builds the URL the End-User is redirected to for authentication.

    The query parameters are always emitted in the same order: response_type,
    client_id, scope, redirect_uri, then state, nonce, display, prompt, max_age,
    ui_locales, claims_locales, id_token_hint, login_hint and acr_values when
    present. The endpoint and client_id are emitted verbatim.

    Args:
        config: The client configuration.
        params: The authentication request parameters.

    Returns:
        str: The authorization request URL.

    Raises:
        MissingRequiredScopeError: If `params.scopes` does not contain "openid".
    """
    if OPENID_SCOPE not in params.scopes:
        raise MissingRequiredScopeError(f'Scopes do not contain "{OPENID_SCOPE}"')

    parts = [
        f"{config.security_endpoint}/authorize",
        "?response_type=code",
        f"&client_id={config.client_id}",
        f"&scope={encode_for_url(_join(params.scopes))}",
        f"&redirect_uri={encode_for_url(config.redirect_url)}",
    ]

    optional: list[tuple[str, str | None]] = [
        ("state", params.state),
        ("nonce", params.nonce),
        ("display", params.display.value if params.display is not None else None),
        ("prompt", params.prompt.value if params.prompt is not None else None),
    ]
    for key, value in optional:
        if value is not None:
            parts.append(f"&{key}={encode_for_url(value)}")

    # Decimal seconds, not percent-encoded
    if params.max_age is not None and params.max_age > 0:
        parts.append(f"&max_age={params.max_age}")

    if params.ui_locales:
        parts.append(f"&ui_locales={encode_for_url(_join(params.ui_locales))}")
    if params.claims_locales:
        parts.append(f"&claims_locales={encode_for_url(_join(params.claims_locales))}")

    for key, value in (
        ("id_token_hint", params.id_token_hint),
        ("login_hint", params.login_hint),
        ("acr_values", params.acr_values),
    ):
        if value is not None:
            parts.append(f"&{key}={encode_for_url(value)}")

    url = "".join(parts)
    logger.debug(f"Built authorization request URL for client {config.client_id}")
    return url
