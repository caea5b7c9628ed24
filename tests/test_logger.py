import logging

import pytest

from mms import logger


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", logging.DEBUG),
        ("info", logging.INFO),
        ("warn", logging.WARNING),
        ("error", logging.ERROR),
        ("fatal", logging.CRITICAL),
    ],
)
def test_init_sets_level(name, expected):
    log = logger.init(name)
    assert log.level == expected
    assert logger.get() is log


@pytest.mark.parametrize("name", ["bogus", "", None])
def test_unknown_level_defaults_to_info(name):
    assert logger.init(name).level == logging.INFO


def test_trace_is_below_debug():
    log = logger.init("trace")
    assert log.level < logging.DEBUG
    assert log.isEnabledFor(logging.DEBUG)


def test_repeated_init_keeps_one_handler():
    logger.init("info")
    logger.init("debug")
    assert len(logger.get().handlers) == 1


def test_writes_to_stdout_with_level_filtering(capsys):
    log = logger.init("info")
    log.info("Logger initialized")
    log.debug("hidden detail")
    out = capsys.readouterr().out
    assert "Logger initialized" in out
    assert "INF" in out
    assert "hidden detail" not in out


def test_fields_are_appended(capsys):
    log = logger.init("info")
    log.info("created", extra={"fields": {"user_id": 7}})
    out = capsys.readouterr().out
    assert "created user_id=7" in out