from __future__ import annotations

import logging

from plan_import.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    setup_logging,
)


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("plan_import.test", level, __file__, 1, msg, None, None)


def test_setup_logging_creates_single_stdout_handler():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging(logging.DEBUG)
    assert first is second
    assert len(first.handlers) == 1
    assert get_logger() is first


def test_labeled_prefixes():
    fmt = LabeledFormatter()
    assert fmt.format(_record(logging.INFO, "parsed plan")) == "INFO parsed plan"
    assert fmt.format(_record(logging.WARNING, "rollback failed")) == "WARN rollback failed"
    assert fmt.format(_record(logging.ERROR, "boom")) == "ERROR boom"
    assert fmt.format(_record(SUMMARY_LEVEL, "project=p1")) == "SUMMARY project=p1"


def test_log_summary_writes_to_stdout(capsys):
    log_summary("project=p1 phases=1")
    out = capsys.readouterr().out
    assert out.strip() == "SUMMARY project=p1 phases=1"


def test_child_module_loggers_share_handler(capsys):
    setup_logging()
    logging.getLogger("plan_import.services.parser").info("parsed plan phases=1")
    logging.getLogger("plan_import.services.hierarchy").debug("hidden at INFO")
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ["INFO parsed plan phases=1"]
