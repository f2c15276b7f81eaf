from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

import pytest

from cwl2argo.log_handler import logger
from tests.utils.cwl import get_docker_requirement, get_tool_document


@pytest.fixture(autouse=True)
def restore_logger():
    level, handlers, filters = logger.level, list(logger.handlers), list(logger.filters)
    yield
    logger.setLevel(level)
    logger.handlers = handlers
    logger.filters = filters


@pytest.fixture
def log_capture(caplog):
    # The package logger does not propagate, so the capture handler is attached directly
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=logger.name)
    yield caplog
    logger.removeHandler(caplog.handler)


@pytest.fixture
def echo_document() -> MutableMapping[str, Any]:
    return get_tool_document(
        inputs=[{"id": "msg", "type": "string"}],
        requirements=[get_docker_requirement("alpine")],
        base_command=["echo"],
    )
