import logging

import pytest

import davproxy.logger as logger


@pytest.fixture
def request_log():
    request_log = logging.getLogger(logger.REQUEST_LOGGER)

    yield request_log

    request_log.propagate = True
    request_log.setLevel(logging.NOTSET)


def test_summarize_matching_length():
    assert logger.summarize("abc", max_length=3) == "abc"


def test_summarize_exceeding_length():
    assert logger.summarize("abcdef", max_length=5) == "ab..."


def test_summarize_list():
    x = [1, 2, 3, 4, 5]
    assert logger.summarize(x, max_length=6) == "[1,..."


def test_configure_default(request_log):
    logger.configure(False)

    assert logger.log.getEffectiveLevel() == logging.INFO
    assert request_log.getEffectiveLevel() == logging.WARNING
    assert not request_log.isEnabledFor(logging.INFO)


def test_configure_debug(request_log):
    logger.configure(True)

    assert logger.log.getEffectiveLevel() == logging.DEBUG
    assert request_log.isEnabledFor(logging.DEBUG)


def test_shared_handler(request_log):
    logger.configure(False)
    logger.configure(False)

    assert request_log.handlers.count(logger.log.handlers[0]) == 1
    assert len(logger.log.handlers) == 1
