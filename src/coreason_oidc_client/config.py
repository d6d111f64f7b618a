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
Configuration for the coreason-oidc-client package.
"""

from typing import Any

import httpx
from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coreason_oidc_client.exceptions import MissingFieldError

_FIELD_LABELS = {
    "security_endpoint": "Security endpoint",
    "client_id": "ClientID",
    "redirect_url": "Redirect URL",
}


class ClientConfig(BaseSettings):
    """
    Relying-party settings for a single Identity Provider.

    The three identity fields are mandatory and validated on construction and on
    every assignment. Values are stored verbatim.

    Instances are not safe for concurrent mutation: reassigning a field while
    another task is exchanging a code races with that request. Share a config
    across tasks only if it is never mutated after construction.

    Attributes:
        security_endpoint (str): Base URL of the authorization server (e.g. https://auth.coreason.com/oidc).
        client_id (str): The OIDC Client ID.
        redirect_url (str): The redirect URI registered with the IdP.
        client_secret (SecretStr | None): Client secret for `client_secret_basic` authentication.
        http_timeout (float): Timeout in seconds for IdP requests made with an internal client.
        max_response_bytes (int): Upper bound on the size of IdP responses.
    """

    model_config = SettingsConfigDict(
        env_prefix="COREASON_OIDC_",
        case_sensitive=False,
        validate_assignment=True,
    )

    security_endpoint: str = Field(default="", validate_default=True)
    client_id: str = Field(default="", validate_default=True)
    redirect_url: str = Field(default="", validate_default=True)
    client_secret: SecretStr | None = None
    http_timeout: float = Field(default=10.0, gt=0, description="Timeout in seconds for all IdP network operations.")
    max_response_bytes: int = Field(default=1_000_000, gt=0)

    @field_validator("security_endpoint", "client_id", "redirect_url", mode="before")
    @classmethod
    def require_non_empty(cls, v: Any, info: ValidationInfo) -> Any:
        """
        Rejects None and empty strings for the mandatory identity fields.

        MissingFieldError is not a ValueError, so pydantic lets it propagate
        unwrapped to the caller.

        Raises:
            MissingFieldError: If the value is None or "".
        """
        field = info.field_name or "field"
        if v is None or v == "":
            raise MissingFieldError(field, f"{_FIELD_LABELS.get(field, field)} has to be set!")
        return v

    @property
    def security_target(self) -> httpx.URL:
        """
        The base target that token and user-info requests are sent to.

        Derived from `security_endpoint` on every read, so reassigning the
        endpoint redirects all subsequent requests.
        """
        return httpx.URL(self.security_endpoint)

    def endpoint_url(self, path: str) -> str:
        """
        Joins a path below the security endpoint with exactly one slash.

        Args:
            path: Relative endpoint path (e.g. "token").

        Returns:
            The absolute endpoint URL.
        """
        return f"{str(self.security_target).rstrip('/')}/{path.lstrip('/')}"
