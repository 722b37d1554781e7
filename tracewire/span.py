import enum
import time
from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple
import uuid

import attr

from tracewire.internal.logger import get_logger


log = get_logger(__name__)


class SpanStatus(enum.Enum):
    """Outcome of the operation described by a span.

    Each status may be bound to a range of HTTP status codes, see
    :meth:`from_http_status_code`.
    """

    UNSET = "unset"
    OK = "ok"
    CANCELLED = "cancelled"
    INTERNAL_ERROR = "internal_error"
    UNKNOWN = "unknown"
    INVALID_ARGUMENT = "invalid_argument"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    PERMISSION_DENIED = "permission_denied"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    FAILED_PRECONDITION = "failed_precondition"
    ABORTED = "aborted"
    OUT_OF_RANGE = "out_of_range"
    UNIMPLEMENTED = "unimplemented"
    UNAVAILABLE = "unavailable"
    DATA_LOSS = "data_loss"
    UNAUTHENTICATED = "unauthenticated"

    @classmethod
    def from_http_status_code(cls, status_code):
        # type: (int) -> SpanStatus
        for status, (low, high) in _HTTP_STATUS_CODES:
            if low <= status_code <= high:
                return status
        return cls.UNSET


# First match wins, statuses sharing a code are reached through the exception path only
_HTTP_STATUS_CODES = (
    (SpanStatus.OK, (200, 299)),
    (SpanStatus.CANCELLED, (499, 499)),
    (SpanStatus.INTERNAL_ERROR, (500, 500)),
    (SpanStatus.INVALID_ARGUMENT, (400, 400)),
    (SpanStatus.DEADLINE_EXCEEDED, (504, 504)),
    (SpanStatus.NOT_FOUND, (404, 404)),
    (SpanStatus.ALREADY_EXISTS, (409, 409)),
    (SpanStatus.PERMISSION_DENIED, (403, 403)),
    (SpanStatus.RESOURCE_EXHAUSTED, (429, 429)),
    (SpanStatus.UNIMPLEMENTED, (501, 501)),
    (SpanStatus.UNAVAILABLE, (503, 503)),
    (SpanStatus.UNAUTHENTICATED, (401, 401)),
)  # type: Tuple[Tuple[SpanStatus, Tuple[int, int]], ...]


def _new_trace_id():
    # type: () -> str
    return uuid.uuid4().hex


def _new_span_id():
    # type: () -> str
    return uuid.uuid4().hex[:16]


@attr.s(slots=True)
class SpanContext(object):
    """Trace context propagated to downstream services.

    ``sampled`` is ``None`` while no sampling decision was made. Setting it to
    ``False`` drops the span from reporting.
    """

    trace_id = attr.ib(type=str, factory=_new_trace_id)
    span_id = attr.ib(type=str, factory=_new_span_id)
    parent_span_id = attr.ib(type=Optional[str], default=None)
    sampled = attr.ib(type=Optional[bool], default=None)
    baggage = attr.ib(type=Dict[str, str], factory=dict)


class Span(object):
    """A timed operation, child of the span that was active when it started."""

    __slots__ = ("op", "description", "status", "throwable", "context", "data", "start_time", "end_time")

    def __init__(self, op, description=None, context=None):
        # type: (str, Optional[str], Optional[SpanContext]) -> None
        self.op = op
        self.description = description
        self.status = SpanStatus.UNSET  # type: SpanStatus
        self.throwable = None  # type: Optional[BaseException]
        self.context = context if context is not None else SpanContext()
        self.data = {}  # type: Dict[str, Any]
        self.start_time = time.time()
        self.end_time = None  # type: Optional[float]

    @property
    def is_noop(self):
        # type: () -> bool
        return False

    @property
    def finished(self):
        # type: () -> bool
        return self.end_time is not None

    def start_child(self, op, description=None):
        # type: (str, Optional[str]) -> Span
        context = SpanContext(
            trace_id=self.context.trace_id,
            parent_span_id=self.context.span_id,
            sampled=self.context.sampled,
            baggage=dict(self.context.baggage),
        )
        return Span(op, description, context)

    def set_data(self, key, value):
        # type: (str, Any) -> None
        self.data[key] = value

    def finish(self, finish_time=None):
        # type: (Optional[float]) -> None
        if self.end_time is not None:
            log.debug("span %r is already finished", self)
            return
        self.end_time = finish_time if finish_time is not None else time.time()

    def __repr__(self):
        return "<Span(op=%r, description=%r, span_id=%s, parent_id=%s, status=%s)>" % (
            self.op,
            self.description,
            self.context.span_id,
            self.context.parent_span_id,
            self.status.value,
        )


class NoOpSpan(Span):
    """Span that is never reported, children of a no-op span are no-op too."""

    __slots__ = ()

    @property
    def is_noop(self):
        # type: () -> bool
        return True

    def start_child(self, op, description=None):
        # type: (str, Optional[str]) -> Span
        return NoOpSpan(op, description, attr.evolve(self.context, baggage=dict(self.context.baggage)))
