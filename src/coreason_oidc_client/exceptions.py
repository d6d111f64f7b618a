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
Custom exceptions for the coreason-oidc-client package.
"""


class CoreasonOIDCError(Exception):
    """Base exception for all coreason-oidc-client errors."""


class ConfigError(CoreasonOIDCError):
    """Raised when the client configuration is unusable."""


class MissingFieldError(ConfigError):
    """
    Raised when a mandatory configuration value is None or empty.

    Attributes:
        field (str): Name of the offending configuration field.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field} has to be set!")


class RequestValidationError(CoreasonOIDCError):
    """Raised when authorization request parameters are invalid."""


class MissingRequiredScopeError(RequestValidationError):
    """Raised when the requested scopes do not contain "openid"."""


class TransportError(CoreasonOIDCError):
    """
    Raised when the HTTP exchange with the Identity Provider fails.

    Attributes:
        status_code (int | None): HTTP status returned by the IdP, if any.
        response_body (str | None): Raw body of the error response, if any.
    """

    def __init__(self, message: str, status_code: int | None = None, response_body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class OversizedResponseError(TransportError):
    """Raised when an HTTP response is too large."""


class DeserializationError(CoreasonOIDCError):
    """Raised when an IdP response cannot be decoded into the expected shape."""
