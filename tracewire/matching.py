"""
Matchers deciding which HTTP calls get trace headers and which responses are
reported as failed requests.
"""
import re
from typing import Iterable
from typing import Optional
from typing import Pattern

import attr

from tracewire.internal.logger import get_logger
from tracewire.internal.utils.cache import cached


log = get_logger(__name__)


@attr.s(frozen=True, slots=True)
class StatusCodeRange(object):
    """Inclusive ``[min, max]`` range of HTTP status codes.

    ``StatusCodeRange(404)`` only contains ``404``.
    """

    DEFAULT_MIN = 500
    DEFAULT_MAX = 599

    min = attr.ib(type=int)
    max = attr.ib(type=int)

    @max.default
    def _max_default(self):
        return self.min

    @max.validator
    def _check_max(self, attribute, value):
        if value < self.min:
            raise ValueError("invalid status code range: %d-%d" % (self.min, value))

    def is_in_range(self, status_code):
        # type: (int) -> bool
        return self.min <= status_code <= self.max

    @classmethod
    def parse(cls, value):
        # type: (str) -> StatusCodeRange
        """Build a range out of ``"400-499"`` or ``"404"``."""
        low, sep, high = value.strip().partition("-")
        if sep:
            return cls(int(low), int(high))
        return cls(int(low))


def contains_status_code(status_code, ranges):
    # type: (int, Iterable[StatusCodeRange]) -> bool
    for status_range in ranges:
        if status_range.is_in_range(status_code):
            return True
    return False


@cached()
def _compile_target(target):
    # type: (str) -> Optional[Pattern[str]]
    try:
        return re.compile(target)
    except re.error:
        log.warning("invalid URL target pattern %r, it will only be matched literally", target)
        return None


def contains_target(targets, url):
    # type: (Iterable[str], str) -> bool
    r"""Return whether ``url`` matches any of ``targets``.

    A target matches when it is a substring of the URL or when, as a regular
    expression, it matches the whole URL. An empty list of targets never
    matches.

    The substring check lets a plain host such as ``api.example.com`` be
    used as a target without writing it as ``.*api\.example\.com.*``::

        >>> contains_target(["api.example.com"], "https://api.example.com/users")
        True
        >>> contains_target([r"https://api\.example\.com/.*"], "https://api.example.com/users")
        True
    """
    for target in targets:
        if target in url:
            return True
        pattern = _compile_target(target)
        if pattern is not None and pattern.fullmatch(url):
            return True
    return False
