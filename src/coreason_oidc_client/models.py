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
Data models for the coreason-oidc-client package.
"""

import re
from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Display(StrEnum):
    """How the Authorization Server displays the authentication and consent pages."""

    PAGE = "page"
    POPUP = "popup"
    TOUCH = "touch"
    WAP = "wap"


class Prompt(StrEnum):
    """Whether the Authorization Server prompts the End-User for reauthentication and consent."""

    NONE = "none"
    LOGIN = "login"
    CONSENT = "consent"
    SELECT_ACCOUNT = "select_account"


_LOCALE_SEPARATOR = re.compile(r"[-_]")


def normalize_locale(tag: str) -> str:
    """
    Renders a locale tag as language_REGION (e.g. "de-de" -> "de_DE").

    Script subtags are title-cased, other subtags are kept as given.
    """
    parts = [p for p in _LOCALE_SEPARATOR.split(tag.strip()) if p]
    if not parts:
        return ""

    rendered = [parts[0].lower()]
    for part in parts[1:]:
        if (len(part) == 2 and part.isalpha()) or (len(part) == 3 and part.isdigit()):
            rendered.append(part.upper())
        elif len(part) == 4 and part.isalpha():
            rendered.append(part.title())
        else:
            rendered.append(part)
    return "_".join(rendered)


class AuthRequestParams(BaseModel):
    """
    Parameters of an OIDC authentication request (OpenID Connect Core 1.0, 3.1.2.1).

    Consumed once by `build_authorization_url`. The presence of the "openid" scope
    is checked when the URL is built, not here.

    Attributes:
        scopes (list[str]): Requested scopes, in order. Must contain "openid".
        state (str | None): Opaque value for CSRF mitigation.
        nonce (str | None): Value binding the ID token to the client session.
        display (Display | None): How the IdP displays its pages.
        prompt (Prompt | None): Whether the IdP prompts for reauthentication/consent.
        max_age (int | None): Allowed seconds since the last active authentication.
            Ignored unless greater than zero.
        ui_locales (list[str]): Preferred UI languages.
        claims_locales (list[str]): Preferred claim languages.
        id_token_hint (str | None): Previously issued ID token.
        login_hint (str | None): Login identifier the user might use.
        acr_values (str | None): Requested Authentication Context Class Reference values.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    scopes: list[str] = Field(default_factory=lambda: ["openid"])
    state: str | None = None
    nonce: str | None = None
    display: Display | None = None
    prompt: Prompt | None = None
    max_age: int | None = None
    ui_locales: list[str] = Field(default_factory=list)
    claims_locales: list[str] = Field(default_factory=list, alias="claim_locales")
    id_token_hint: str | None = None
    login_hint: str | None = None
    acr_values: str | None = None

    @field_validator("ui_locales", "claims_locales", mode="before")
    @classmethod
    def ensure_locale_list(cls, v: Any) -> Any:
        """Accepts None or a single space-separated string in place of a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return v.split()
        return v

    @field_validator("ui_locales", "claims_locales", mode="after")
    @classmethod
    def normalize_locales(cls, v: list[str]) -> list[str]:
        return [tag for tag in (normalize_locale(t) for t in v) if tag]


class TokenAnswer(BaseModel):
    """
    Response of the token endpoint for the authorization code grant.

    Provider-specific fields are kept as extras.

    Attributes:
        access_token (str): The access token issued by the authorization server.
        token_type (str): The type of the token (e.g. "Bearer").
        expires_in (int | None): The lifetime in seconds of the access token.
        refresh_token (str | None): The refresh token, if issued.
        id_token (str | None): The ID token, if issued.
        scope (str | None): The granted scopes, if they differ from the requested ones.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    access_token: str
    token_type: str
    expires_in: int | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    scope: str | None = None

    def __repr__(self) -> str:
        # Tokens MUST NOT leak into logs
        return (
            f"TokenAnswer(access_token='<REDACTED>', "
            f"token_type={self.token_type!r}, "
            f"expires_in={self.expires_in!r}, "
            f"refresh_token={'<REDACTED>' if self.refresh_token else None!r}, "
            f"id_token={'<REDACTED>' if self.id_token else None!r})"
        )

    def __str__(self) -> str:
        return self.__repr__()


# Claim sets differ between providers, so user info is handed back as decoded JSON.
UserInfo: TypeAlias = Any
