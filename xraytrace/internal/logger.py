"""
Logging utilities for internal use.
Usage:
    from xraytrace.internal.logger import get_logger
    log = get_logger(__name__)

Every logger returned by ``get_logger`` shares a rate limiter: a given call
site (pathname and line number) emits at most one record every
``XRAY_LOGGING_RATE`` seconds, 60 by default. Records dropped in between are
counted and reported by the next record that makes it through::

    WARNING xraytrace.listener: ... [3 skipped]

``XRAY_LOGGING_RATE=0`` disables rate limiting, and so does setting the
logger itself to ``DEBUG``. A single call can opt out with
``extra={"no_rate_limit": True}``.
"""

import collections
import logging
import os
import time
from typing import DefaultDict
from typing import Tuple


SECOND = 1
MINUTE = 60 * SECOND


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve or create a ``Logger`` instance with consistent behavior for internal use.

    Configure all loggers with a rate limiter filter to prevent excessive logging.

    """
    logger = logging.getLogger(name)
    # addFilter will only add the filter if it is not already present
    logger.addFilter(log_filter)
    logger.propagate = True
    return logger


# Class used for keeping track of a log lines current time bucket and the number of log lines skipped
class LoggingBucket:
    def __init__(self, bucket: float, skipped: int):
        self.bucket = bucket
        self.skipped = skipped

    def __repr__(self):
        return f"LoggingBucket({self.bucket}, {self.skipped})"

    def is_sampled(self, record: logging.LogRecord, rate: float) -> bool:
        """
        Determine if the log line should be sampled based on the rate limit.
        """
        current = time.monotonic()
        if current - self.bucket >= rate:
            self.bucket = current
            record.skipped = self.skipped
            self.skipped = 0
            return True
        self.skipped += 1
        return False


_MINF = float("-inf")

_buckets: DefaultDict[Tuple[str, int], LoggingBucket] = collections.defaultdict(lambda: LoggingBucket(_MINF, 0))

# DEV: `XRAY_LOGGING_RATE=0` means to disable all rate limiting
_rate_limit = int(os.getenv("XRAY_LOGGING_RATE", default=MINUTE))


def log_filter(record: logging.LogRecord) -> bool:
    """
    Function used to determine if a log record should be outputted or not (True = output, False = skip).
    """
    logger = logging.getLogger(record.name)
    if not _rate_limit or logger.getEffectiveLevel() == logging.DEBUG:
        return True
    if getattr(record, "no_rate_limit", False):
        return True
    return _buckets[(record.pathname, record.lineno)].is_sampled(record, _rate_limit)


class XRayFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        skipped = getattr(record, "skipped", 0)
        skip_str = f" [{skipped} skipped]" if skipped else ""
        return f"{record.levelname} {super().format(record)}{skip_str}"


# setup the default formatter for all xraytrace loggers
root_logger = logging.getLogger("xraytrace")
if not root_logger.handlers:
    root_logger.addHandler(logging.StreamHandler())
    root_logger.handlers[0].setFormatter(XRayFormatter("%(name)s: %(message)s"))
root_logger.propagate = True
