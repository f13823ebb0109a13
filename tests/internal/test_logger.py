import logging

import mock
import pytest

import xraytrace.internal.logger
from xraytrace.internal.logger import LoggingBucket
from xraytrace.internal.logger import XRayFormatter
from xraytrace.internal.logger import get_logger
from xraytrace.internal.logger import log_filter


@pytest.fixture(autouse=True)
def reset_buckets():
    xraytrace.internal.logger._buckets.clear()
    try:
        yield
    finally:
        xraytrace.internal.logger._buckets.clear()


def _record(lineno=10):
    return logging.LogRecord("xraytrace.test", logging.WARNING, "test.py", lineno, "message", None, None)


def test_get_logger_adds_filter():
    log = get_logger("xraytrace.test")
    assert log_filter in log.filters
    # filters are not duplicated
    get_logger("xraytrace.test")
    assert log.filters.count(log_filter) == 1


def test_rate_limit_per_call_site():
    logging.getLogger("xraytrace.test").setLevel(logging.WARNING)
    with mock.patch("xraytrace.internal.logger._rate_limit", 60), mock.patch(
        "xraytrace.internal.logger.time.monotonic", return_value=1000.0
    ):
        assert log_filter(_record()) is True
        assert log_filter(_record()) is False
        assert log_filter(_record()) is False
        # another line is not limited
        assert log_filter(_record(lineno=11)) is True

    with mock.patch("xraytrace.internal.logger._rate_limit", 60), mock.patch(
        "xraytrace.internal.logger.time.monotonic", return_value=1061.0
    ):
        record = _record()
        assert log_filter(record) is True
        assert record.skipped == 2


def test_rate_limit_disabled():
    logging.getLogger("xraytrace.test").setLevel(logging.WARNING)
    with mock.patch("xraytrace.internal.logger._rate_limit", 0):
        assert all(log_filter(_record()) for _ in range(5))


def test_debug_level_not_limited():
    logger = logging.getLogger("xraytrace.test")
    logger.setLevel(logging.DEBUG)
    try:
        with mock.patch("xraytrace.internal.logger._rate_limit", 60):
            assert all(log_filter(_record()) for _ in range(5))
    finally:
        logger.setLevel(logging.NOTSET)


def test_bucket_repr():
    assert repr(LoggingBucket(1.0, 2)) == "LoggingBucket(1.0, 2)"


def test_formatter_skipped():
    record = _record()
    record.skipped = 3
    assert XRayFormatter("%(message)s").format(record) == "WARNING message [3 skipped]"
    assert XRayFormatter("%(message)s").format(_record()) == "WARNING message"


def test_record_opts_out_of_rate_limit():
    logging.getLogger("xraytrace.test").setLevel(logging.WARNING)
    with mock.patch("xraytrace.internal.logger._rate_limit", 60), mock.patch(
        "xraytrace.internal.logger.time.monotonic", return_value=1000.0
    ):
        assert log_filter(_record()) is True
        assert log_filter(_record()) is False
        record = _record()
        record.no_rate_limit = True
        assert log_filter(record) is True
        assert log_filter(record) is True
