from __future__ import annotations

import io
import json
import logging

from taskflow.core.config import Settings
from taskflow.core.context import bind_actor_id, bind_request_id, reset_actor_id, reset_request_id
from taskflow.core.logging import JsonLogFormatter, configure_logging


def test_configure_logging_outputs_json_with_request_id() -> None:
    settings = Settings(environment="test", log_level="INFO")
    configure_logging(settings)

    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)),
        None,
    )
    assert handler is not None, "Expected JSON stream handler to be configured"

    buffer = io.StringIO()
    previous_stream = handler.setStream(buffer)

    token = bind_request_id("req-json-1")
    try:
        logger = logging.getLogger("taskflow.tests.logging")
        logger.info("structured log event", extra={"component": "unit-test"})
    finally:
        handler.flush()
        reset_request_id(token)
        handler.setStream(previous_stream)

    log_lines = buffer.getvalue().strip().splitlines()
    assert log_lines, "Expected structured log line to be captured"
    payload = json.loads(log_lines[-1])

    assert payload["message"] == "structured log event"
    assert payload["request_id"] == "req-json-1"
    assert payload["environment"] == settings.environment
    assert payload["level"] == "INFO"
    assert payload["component"] == "unit-test"
    assert payload["service"] == settings.project_name


def test_formatter_stringifies_unserialisable_extras() -> None:
    formatter = JsonLogFormatter(defaults={"service": "TaskFlow"})
    record = logging.LogRecord(
        name="taskflow.tests",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="with %s",
        args=("args",),
        exc_info=None,
    )
    record.payload = {1, 2}

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "with args"
    assert payload["service"] == "TaskFlow"
    assert payload["request_id"] == "-"
    assert payload["payload"] in ("{1, 2}", "{2, 1}")


def test_formatter_carries_actor_id_as_first_class_field() -> None:
    formatter = JsonLogFormatter(defaults={"service": "TaskFlow"})
    record = logging.LogRecord("taskflow.tests", logging.INFO, __file__, 1, "acting", (), None)

    anonymous = json.loads(formatter.format(record))
    assert anonymous["actor_id"] is None

    token = bind_actor_id(7)
    try:
        authenticated = json.loads(formatter.format(record))
    finally:
        reset_actor_id(token)
    assert authenticated["actor_id"] == 7
    assert authenticated["service"] == "TaskFlow"
