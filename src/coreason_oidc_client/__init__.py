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
OpenID Connect relying-party client: authorization request URLs, code exchange and UserInfo.
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import ClientConfig
from .exceptions import (
    ConfigError,
    CoreasonOIDCError,
    DeserializationError,
    MissingFieldError,
    MissingRequiredScopeError,
    RequestValidationError,
    TransportError,
)
from .models import AuthRequestParams, Display, Prompt, TokenAnswer, UserInfo
from .request_builder import build_authorization_url, encode_for_url
from .token_exchanger import TokenExchanger, TokenExchangerAsync

__all__ = [
    "AuthRequestParams",
    "ClientConfig",
    "ConfigError",
    "CoreasonOIDCError",
    "DeserializationError",
    "Display",
    "MissingFieldError",
    "MissingRequiredScopeError",
    "Prompt",
    "RequestValidationError",
    "TokenAnswer",
    "TokenExchanger",
    "TokenExchangerAsync",
    "TransportError",
    "UserInfo",
    "build_authorization_url",
    "encode_for_url",
]
