# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc_client

import os
from collections.abc import Generator
from unittest.mock import patch

import pytest

from coreason_oidc_client.config import ClientConfig


@pytest.fixture(autouse=True)
def clean_environment() -> Generator[None, None, None]:
    """
    Removes COREASON_OIDC_* variables so ClientConfig only sees explicit arguments.
    """
    clean = {k: v for k, v in os.environ.items() if not k.upper().startswith("COREASON_OIDC_")}
    with patch.dict(os.environ, clean, clear=True):
        yield


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        security_endpoint="http://example.org",
        client_id="great",
        redirect_url="http://localhost/back",
    )
