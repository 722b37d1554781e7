"""
Error events reported for HTTP client failures.

HTTP clients do not raise on 4xx/5xx responses, so a synthetic
:class:`HttpClientError` is built instead and wrapped together with the
:class:`Mechanism` describing where it was captured::

    error = ExceptionMechanismError(
        Mechanism(type="HttpClientInterceptor", handled=True),
        HttpClientError("HTTP Client Error with status code: 503"),
        thread_name="MainThread",
        snapshot=True,
    )
    event = ErrorEvent(exception=error, request=EventRequest(url="https://api.example.com/x"))
"""
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Dict
from typing import Optional
import uuid

import attr


class HttpClientError(Exception):
    """Synthetic error standing for an HTTP response with a failed status code."""


class ExceptionMechanismError(Exception):
    """Wraps ``exception`` with the mechanism that captured it."""

    def __init__(self, mechanism, exception, thread_name=None, snapshot=False):
        # type: (Mechanism, BaseException, Optional[str], bool) -> None
        super(ExceptionMechanismError, self).__init__(str(exception))
        self.mechanism = mechanism
        self.exception = exception
        self.thread_name = thread_name
        self.snapshot = snapshot


@attr.s(slots=True)
class Mechanism(object):
    type = attr.ib(type=Optional[str], default=None)
    handled = attr.ib(type=Optional[bool], default=None)
    description = attr.ib(type=Optional[str], default=None)


@attr.s(slots=True)
class EventRequest(object):
    url = attr.ib(type=Optional[str], default=None)
    method = attr.ib(type=Optional[str], default=None)
    query_string = attr.ib(type=Optional[str], default=None)
    fragment = attr.ib(type=Optional[str], default=None)
    cookies = attr.ib(type=Optional[str], default=None)
    headers = attr.ib(type=Optional[Dict[str, str]], default=None)
    body_size = attr.ib(type=Optional[int], default=None)


@attr.s(slots=True)
class EventResponse(object):
    status_code = attr.ib(type=Optional[int], default=None)
    cookies = attr.ib(type=Optional[str], default=None)
    headers = attr.ib(type=Optional[Dict[str, str]], default=None)
    body_size = attr.ib(type=Optional[int], default=None)


def _utcnow():
    # type: () -> datetime
    return datetime.now(timezone.utc)


def _new_event_id():
    # type: () -> str
    return uuid.uuid4().hex


@attr.s(slots=True)
class ErrorEvent(object):
    exception = attr.ib(type=Optional[ExceptionMechanismError], default=None)
    request = attr.ib(type=Optional[EventRequest], default=None)
    contexts = attr.ib(type=Dict[str, Any], factory=dict)
    level = attr.ib(type=str, default="error")
    event_id = attr.ib(type=str, factory=_new_event_id)
    timestamp = attr.ib(type=datetime, factory=_utcnow)

    @property
    def response(self):
        # type: () -> Optional[EventResponse]
        return self.contexts.get("response")

    @response.setter
    def response(self, value):
        # type: (EventResponse) -> None
        self.contexts["response"] = value

    @property
    def mechanism(self):
        # type: () -> Optional[Mechanism]
        return self.exception.mechanism if self.exception is not None else None

    def to_dict(self):
        # type: () -> Dict[str, Any]
        """Plain dict projection of the event, unset values are left out."""
        data = {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "level": self.level,
        }  # type: Dict[str, Any]
        if self.exception is not None:
            error = self.exception.exception
            data["exception"] = {
                "type": type(error).__name__,
                "value": str(error),
                "thread": self.exception.thread_name,
                "snapshot": self.exception.snapshot,
                "mechanism": _asdict(self.exception.mechanism),
            }
        if self.request is not None:
            data["request"] = _asdict(self.request)
        if self.contexts:
            data["contexts"] = {
                key: _asdict(value) if attr.has(type(value)) else value for key, value in self.contexts.items()
            }
        return data


def _asdict(inst):
    # type: (Any) -> Dict[str, Any]
    return attr.asdict(inst, filter=lambda _, value: value is not None)
