"""Tests for PII-safe logging helpers."""

import logging

import pytest

from utils.log_sanitize import (
    PiiRedactingFilter,
    install_redacting_filter,
    redact_event_dict,
    sanitize_for_log,
)


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


@pytest.fixture
def pii_logger():
    logger = logging.getLogger("tests.pii")
    pii_filter = PiiRedactingFilter()
    logger.addFilter(pii_filter)
    yield logger
    logger.removeFilter(pii_filter)


def test_sanitize_masks_values_and_keeps_structure():
    d = {"type": "email", "value": "user@example.com", "file": "x.txt", "line_number": 4}
    out = sanitize_for_log(d)
    assert out == {"type": "email", "value": "us*****@example.com", "file": "x.txt", "line_number": 4}


def test_sanitize_does_not_mutate_original():
    d = {"type": "phone", "password": "9876543210"}
    out = sanitize_for_log(d)
    assert d["password"] == "9876543210"
    assert out["password"] == "[REDACTED]"


def test_sanitize_primitive_types_kept():
    assert sanitize_for_log(42) == 42
    assert sanitize_for_log(None) is None
    assert sanitize_for_log(True) is True
    assert sanitize_for_log("hello") == "hello"


def test_sanitize_custom_placeholder():
    assert sanitize_for_log([{"token": "t"}], {"placeholder": "<hidden>"}) == [{"token": "<hidden>"}]


def test_filter_masks_formatted_message(pii_logger, caplog):
    with caplog.at_level(logging.INFO, logger="tests.pii"):
        pii_logger.info("user %s signed in from %s", "dev@test.local", "10.0.0.1")

    assert caplog.records[-1].getMessage() == "user de*****@test.local signed in from ********"


def test_filter_catches_secret_split_across_args(pii_logger, caplog):
    with caplog.at_level(logging.INFO, logger="tests.pii"):
        pii_logger.info("password=%s", "hunter2")

    assert caplog.records[-1].getMessage() == "password=**********"


def test_filter_sanitizes_mapping_messages(pii_logger, caplog):
    with caplog.at_level(logging.INFO, logger="tests.pii"):
        pii_logger.info({"api_key": "k", "email": "a@b.com", "attempt": 2})

    assert caplog.records[-1].msg == {"api_key": "[REDACTED]", "email": "a*****@b.com", "attempt": 2}


def test_install_redacting_filter_on_handlers():
    logger = logging.getLogger("tests.pii.install")
    logger.propagate = False
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        install_redacting_filter(logger, {"mask_char": "#"})
        logger.warning("retry for %s", "ops@example.org")
    finally:
        logger.removeHandler(handler)

    assert handler.messages == ["retry for op#####@example.org"]


def test_redact_event_dict_processor():
    event = {"event": "login", "email": "a@b.com", "api_key": "k", "attempt": 2}

    out = redact_event_dict(None, "info", event)

    assert out == {"event": "login", "email": "a*****@b.com", "api_key": "[REDACTED]", "attempt": 2}
    assert event["api_key"] == "k"


class _RecordHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_filter_survives_bad_format_args():
    logger = logging.getLogger("tests.pii.badformat")
    logger.propagate = False
    handler = _RecordHandler()
    pii_filter = PiiRedactingFilter()
    logger.addHandler(handler)
    logger.addFilter(pii_filter)
    try:
        logger.error("%d items for dev@test.local", "abc")
    finally:
        logger.removeFilter(pii_filter)
        logger.removeHandler(handler)

    [record] = handler.records
    assert record.msg == "%d items for de*****@test.local"
    assert record.args == ("abc",)


def test_filter_masks_args_when_format_fails():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "%d %d", ("a@b.com",), None)

    assert PiiRedactingFilter().filter(record) is True
    assert record.args == ("a*****@b.com",)
