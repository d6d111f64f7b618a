# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc_client

import json
import logging
import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
from loguru import logger
from opentelemetry.sdk.trace import TracerProvider

from coreason_oidc_client.utils.logger import configure_logging


@pytest.fixture
def clean_logger() -> Generator[None, None, None]:
    """Ensure logger is reset before and after tests."""
    logger.remove()
    yield
    logger.remove()


@pytest.mark.usefixtures("clean_logger")
def test_text_and_json_toggling(capsys: pytest.CaptureFixture[str]) -> None:
    with patch.dict(os.environ, {"COREASON_OIDC_LOG_JSON": "false"}):
        configure_logging()
        logger.info("Text Log")

        captured = capsys.readouterr()
        assert "Text Log" in captured.err
        assert "{" not in captured.err

    with patch.dict(os.environ, {"COREASON_OIDC_LOG_JSON": "true"}):
        configure_logging()
        logger.info("JSON Log")

        captured = capsys.readouterr()
        assert '"text":' in captured.out
        assert "JSON Log" in captured.out
        assert not captured.err


@pytest.mark.usefixtures("clean_logger")
def test_invalid_level_falls_back_to_info(capsys: pytest.CaptureFixture[str]) -> None:
    with patch.dict(os.environ, {"COREASON_OIDC_LOG_LEVEL": "CHATTY"}):
        configure_logging()
        logger.debug("hidden")
        logger.info("shown")

    err = capsys.readouterr().err
    assert "shown" in err
    assert "hidden" not in err


@pytest.mark.usefixtures("clean_logger")
def test_standard_logging_is_intercepted_on_request(capsys: pytest.CaptureFixture[str]) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        with patch.dict(os.environ, {"COREASON_OIDC_LOG_INTERCEPT_STDLIB": "true"}):
            configure_logging()
        logging.getLogger("httpx").warning("from stdlib")
        assert "from stdlib" in capsys.readouterr().err
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


@pytest.mark.usefixtures("clean_logger")
def test_root_logger_left_alone_by_default() -> None:
    """The host application keeps its own stdlib logging configuration."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level

    configure_logging()

    assert root.handlers == saved_handlers
    assert root.level == saved_level


@pytest.mark.usefixtures("clean_logger")
def test_file_sink(tmp_path: Path) -> None:
    log_file = tmp_path / "oidc.log"
    with patch.dict(os.environ, {"COREASON_OIDC_LOG_FILE": str(log_file)}):
        configure_logging()
        logger.info("to file")
        logger.complete()

    logger.remove()
    record = json.loads(log_file.read_text().splitlines()[0])
    assert record["record"]["message"] == "to file"


@pytest.mark.usefixtures("clean_logger")
def test_trace_ids_injected(capsys: pytest.CaptureFixture[str]) -> None:
    tracer = TracerProvider().get_tracer("test")
    with patch.dict(os.environ, {"COREASON_OIDC_LOG_JSON": "true"}):
        configure_logging()
        with tracer.start_as_current_span("work") as span:
            logger.info("inside span")
            trace_id = format(span.get_span_context().trace_id, "032x")

    record = json.loads(capsys.readouterr().out.splitlines()[0])
    assert record["record"]["extra"]["trace_id"] == trace_id
