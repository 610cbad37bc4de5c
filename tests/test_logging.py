import json
import logging

from gradebook.core.logging import JsonFormatter, correlation_context, get_correlation_id, get_logger


def _record(message, structured=None):
    record = logging.LogRecord("gradebook.test", logging.INFO, __file__, 1, message, None, None)
    if structured is not None:
        record.structured_data = structured
    return record


def test_json_formatter_merges_structured_fields_and_keeps_thai():
    line = JsonFormatter().format(_record("roster_saved", {"class_id": "M5_History", "name": "มานี"}))
    payload = json.loads(line)
    assert payload["event"] == "roster_saved"
    assert payload["class_id"] == "M5_History"
    assert "มานี" in line


def test_correlation_context_binds_and_resets():
    assert get_correlation_id() is None
    with correlation_context("abc") as cid:
        assert cid == "abc"
        payload = json.loads(JsonFormatter().format(_record("x")))
        assert payload["correlation_id"] == "abc"
    assert get_correlation_id() is None


def test_get_logger_prefixes_and_merges_defaults(caplog):
    logger = get_logger("services.test", component="services")
    assert logger.logger.name == "gradebook.services.test"
    with caplog.at_level(logging.INFO, logger="gradebook.services.test"):
        logger.info("event", extra={"structured_data": {"k": 1}})
    assert caplog.records[-1].structured_data == {"component": "services", "k": 1}
