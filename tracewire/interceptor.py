"""
The ``HttpClientInterceptor`` wraps every outgoing HTTP call: it starts a
``http.client`` span out of the active span, propagates the trace context,
adds a breadcrumb and, if ``capture_failed_requests`` is enabled, reports
HTTP client errors as events.

Usage::

    from tracewire.interceptor import HttpClientInterceptor

    interceptor = HttpClientInterceptor(capture_failed_requests=True)
    response = interceptor.intercept(request, send)

``send`` performs the call for a :class:`tracewire.http.Request` and returns
a :class:`tracewire.http.Response`. Errors raised by ``send`` are marked on
the span and re-raised unchanged, HTTP error responses are returned as they
are.

Spans can be changed or dropped before they are finished with a
``before_span`` callback::

    def before_span(span, request, response):
        if request.url.endswith("/health"):
            return None  # dropped
        span.set_data("peer", "billing")
        return span
"""
import threading
from typing import Callable
from typing import List
from typing import Optional

from tracewire.breadcrumb import build_http_breadcrumb
from tracewire.constants import COOKIE_HEADER
from tracewire.constants import HTTP_CLIENT_ERROR_MESSAGE
from tracewire.constants import HTTP_CLIENT_OP
from tracewire.constants import MECHANISM_TYPE
from tracewire.constants import REQUEST_HINT
from tracewire.constants import RESPONSE_HINT
from tracewire.constants import SET_COOKIE_HEADER
from tracewire.event import ErrorEvent
from tracewire.event import EventRequest
from tracewire.event import EventResponse
from tracewire.event import ExceptionMechanismError
from tracewire.event import HttpClientError
from tracewire.event import Mechanism
from tracewire.http import Request
from tracewire.http import Response
from tracewire.hub import Hint
from tracewire.hub import Hub
from tracewire.hub import HubAdapter
from tracewire.internal.logger import get_logger
from tracewire.internal.utils.http import sanitize_headers
from tracewire.internal.utils.http import strip_query_and_fragment
from tracewire.internal.utils.http import valid_length
from tracewire.matching import StatusCodeRange
from tracewire.matching import contains_status_code
from tracewire.matching import contains_target
from tracewire.propagation.http import HTTPPropagator
from tracewire.settings.config import config
from tracewire.span import Span
from tracewire.span import SpanStatus


log = get_logger(__name__)

BeforeSpanCallback = Callable[[Span, Request, Optional[Response]], Optional[Span]]
Proceed = Callable[[Request], Response]


class HttpClientInterceptor(object):
    """
    :param hub: The hub reporting spans, breadcrumbs and events. Defaults to the current hub.
    :param before_span: Customizes or drops (by returning ``None``) the span before it is finished.
    :param capture_failed_requests: Report HTTP client errors as events.
    :param failed_request_status_codes: Only responses with a status code within these ranges are reported.
    :param failed_request_targets: Only requests whose URL matches one of these targets are reported.

    Arguments left to ``None`` are read from the ``TRACEWIRE_*`` configuration.
    """

    def __init__(
        self,
        hub=None,  # type: Optional[Hub]
        before_span=None,  # type: Optional[BeforeSpanCallback]
        capture_failed_requests=None,  # type: Optional[bool]
        failed_request_status_codes=None,  # type: Optional[List[StatusCodeRange]]
        failed_request_targets=None,  # type: Optional[List[str]]
    ):
        # type: (...) -> None
        self.hub = hub if hub is not None else HubAdapter()
        self.before_span = before_span
        self.capture_failed_requests = (
            config.capture_failed_requests if capture_failed_requests is None else capture_failed_requests
        )
        self.failed_request_status_codes = tuple(
            config.failed_request_status_codes if failed_request_status_codes is None else failed_request_status_codes
        )
        self.failed_request_targets = tuple(
            config.failed_request_targets if failed_request_targets is None else failed_request_targets
        )

    def __call__(self, request, proceed):
        # type: (Request, Proceed) -> Response
        return self.intercept(request, proceed)

    def intercept(self, request, proceed):
        # type: (Request, Proceed) -> Response
        active_span = self.hub.span
        span = None  # type: Optional[Span]
        if active_span is not None:
            span = active_span.start_child(HTTP_CLIENT_OP, "%s %s" % (request.method, request.url))

        response = None  # type: Optional[Response]
        status_code = None  # type: Optional[int]
        if span is not None and not span.is_noop:
            request = self._propagate(span, request)

        try:
            response = proceed(request)
            status_code = response.status_code
            if span is not None:
                span.status = SpanStatus.from_http_status_code(status_code)

            # HTTP errors (4xx, 5xx) are not raised, the breadcrumb is added in the
            # finally block so transport errors get one as well
            self._capture_failed_request(request, response)

            return response
        except Exception as e:
            if span is not None:
                span.throwable = e
                span.status = SpanStatus.INTERNAL_ERROR
            raise
        finally:
            self._finish_span(span, request, response)
            self._add_breadcrumb(request, response, status_code)

    def _propagate(self, span, request):
        # type: (Span, Request) -> Request
        try:
            if not HTTPPropagator.should_propagate(self.hub.options.trace_propagation_targets, request.url):
                return request
            return request.with_headers(HTTPPropagator.inject(span.context, request.headers))
        except Exception:
            log.debug("http.client: error propagating trace context to %s", request.url, exc_info=True)
            return request

    def _finish_span(self, span, request, response):
        # type: (Optional[Span], Request, Optional[Response]) -> None
        if span is None:
            return

        try:
            if self.before_span is None:
                span.finish()
                return

            try:
                result = self.before_span(span, request, response)
            except Exception:
                log.debug("http.client: before_span callback failed, finishing span %r", span, exc_info=True)
                span.finish()
                return

            if result is None:
                # span is dropped
                span.context.sampled = False
            else:
                span.finish()
        except Exception:
            log.debug("http.client: error finishing span %r", span, exc_info=True)

    def _add_breadcrumb(self, request, response, status_code):
        # type: (Request, Optional[Response], Optional[int]) -> None
        try:
            breadcrumb = build_http_breadcrumb(request, response, status_code)

            hint = {REQUEST_HINT: request.raw if request.raw is not None else request}  # type: Hint
            if response is not None:
                hint[RESPONSE_HINT] = response.raw if response.raw is not None else response

            self.hub.add_breadcrumb(breadcrumb, hint)
        except Exception:
            log.debug("http.client: error adding breadcrumb for %s", request.url, exc_info=True)

    def _capture_failed_request(self, request, response):
        # type: (Request, Response) -> None
        try:
            event = self._build_failed_request_event(request, response)
            if event is None:
                return

            hint = {
                REQUEST_HINT: request.raw if request.raw is not None else request,
                RESPONSE_HINT: response.raw if response.raw is not None else response,
            }  # type: Hint
            self.hub.capture_event(event, hint)
        except Exception:
            log.debug("http.client: error capturing failed request to %s", request.url, exc_info=True)

    def _build_failed_request_event(self, request, response):
        # type: (Request, Response) -> Optional[ErrorEvent]
        if not self.capture_failed_requests or not contains_status_code(
            response.status_code, self.failed_request_status_codes
        ):
            return None

        # Only the query string and the fragment can be removed, a parameterized
        # URL (https://api.example.com/users/{user}/repos/) is not known here.
        query = request.query or None
        fragment = request.fragment or None
        url = strip_query_and_fragment(request.url, query, fragment)

        if not contains_target(self.failed_request_targets, url):
            return None

        mechanism = Mechanism(type=MECHANISM_TYPE, handled=True)
        error = HttpClientError(HTTP_CLIENT_ERROR_MESSAGE % response.status_code)
        event = ErrorEvent(
            exception=ExceptionMechanismError(
                mechanism, error, thread_name=threading.current_thread().name, snapshot=True
            )
        )

        send_default_pii = self.hub.options.send_default_pii
        event.request = EventRequest(
            url=url,
            method=request.method,
            query_string=query,
            fragment=fragment,
            # cookies are only sent if sending PII is enabled
            cookies=request.headers.get(COOKIE_HEADER) if send_default_pii else None,
            headers=sanitize_headers(request.headers, send_default_pii),
            body_size=valid_length(request.body_size),
        )
        event.response = EventResponse(
            status_code=response.status_code,
            cookies=response.headers.get(SET_COOKIE_HEADER) if send_default_pii else None,
            headers=sanitize_headers(response.headers, send_default_pii),
            body_size=valid_length(response.body_size),
        )
        return event
