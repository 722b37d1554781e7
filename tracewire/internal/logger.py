"""
Logging utilities for internal use.
Usage:
    import tracewire.internal.logger as logger
    log = logger.get_logger(__name__)

    log.debug("http.client: error adding breadcrumb", exc_info=True)

Records are rate limited per call site (pathname/lineno): by default one
record every 60 seconds, configurable with ``TRACEWIRE_LOGGING_RATE``.
``TRACEWIRE_LOGGING_RATE=0`` disables rate limiting and a logger set to
``DEBUG`` is never rate limited. The number of records skipped since the last
emitted one is appended by the ``tracewire`` root formatter::

    DEBUG http.client: error finishing span [3 skipped]
"""

import collections
import logging
import sys
from typing import DefaultDict
from typing import Tuple


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

    def is_sampled(self, record: logging.LogRecord, rate: float, current: float) -> bool:
        """
        Determine if the log line should be sampled based on the rate limit.
        """
        if current - self.bucket >= rate:
            self.bucket = current
            record.skipped = self.skipped
            self.skipped = 0
            return True
        self.skipped += 1
        return False


_MINF = float("-inf")

_buckets: DefaultDict[Tuple[str, int], LoggingBucket] = collections.defaultdict(lambda: LoggingBucket(_MINF, 0))


_DEFAULT_RATE_LIMIT = 60


def _get_rate_limit() -> int:
    # records emitted while the configuration itself is loading use the default
    settings = sys.modules.get("tracewire.settings.config")
    config = getattr(settings, "config", None)
    if config is None:
        return _DEFAULT_RATE_LIMIT
    return config.logging_rate


def log_filter(record: logging.LogRecord) -> bool:
    """
    Function used to determine if a log record should be outputted or not (True = output, False = skip).

    This function will:
      - Rate limit log records based on the record filename and line number
    """
    logger = logging.getLogger(record.name)
    rate_limit = _get_rate_limit()
    if not rate_limit or logger.getEffectiveLevel() == logging.DEBUG:
        return True
    key = (record.pathname, record.lineno)
    # record.created is seconds since epoch, set when the record was made
    return _buckets[key].is_sampled(record, rate_limit, record.created)


class TracewireFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        skipped = getattr(record, "skipped", 0)
        if skipped:
            skip_str = f" [{skipped} skipped]"
        else:
            skip_str = ""
        return f"{record.levelname} {super().format(record)}{skip_str}"


# setup the default formatter for all tracewire loggers
root_logger = logging.getLogger("tracewire")
if not root_logger.handlers:
    root_logger.addHandler(logging.StreamHandler())
    root_logger.handlers[0].setFormatter(TracewireFormatter())
root_logger.propagate = True
