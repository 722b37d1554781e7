import pytest
import requests
import wrapt
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from tracewire.constants import REQUEST_HINT
from tracewire.constants import RESPONSE_HINT
from tracewire.contrib.requests import get_version
from tracewire.contrib.requests import patch
from tracewire.contrib.requests import unpatch
from tracewire.interceptor import HttpClientInterceptor
from tracewire.propagation.http import HTTP_HEADER_TRACE
from tracewire.span import SpanStatus

from ...utils import DummyHub
from ...utils import override_config


URL = "https://api.example.com/x?a=1#f"


class StubAdapter(BaseAdapter):
    """Transport adapter answering without hitting the network."""

    def __init__(self, status_code=200, body=b"", headers=None, error=None):
        super(StubAdapter, self).__init__()
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.error = error
        self.requests = []

    def send(self, request, **kwargs):
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        response = requests.Response()
        response.status_code = self.status_code
        response.headers = CaseInsensitiveDict(self.headers)
        response._content = self.body
        response.request = request
        response.url = request.url
        return response

    def close(self):
        pass


@pytest.fixture
def interceptor(hub):
    return HttpClientInterceptor(hub=hub, capture_failed_requests=True)


@pytest.fixture
def patched(interceptor):
    patch(interceptor)
    yield
    unpatch()


def _is_wrapped():
    return isinstance(requests.Session.__dict__["send"], wrapt.ObjectProxy)


def _session(adapter):
    session = requests.Session()
    session.mount("https://", adapter)
    return session


def test_patch_and_unpatch(interceptor):
    patch(interceptor)
    try:
        assert _is_wrapped()
        assert requests.Session._tracewire_interceptor is interceptor
    finally:
        unpatch()

    assert not _is_wrapped()
    assert not hasattr(requests.Session, "_tracewire_interceptor")


def test_patch_is_idempotent(interceptor):
    patch(interceptor)
    patch(HttpClientInterceptor())
    try:
        assert requests.Session._tracewire_interceptor is interceptor
    finally:
        unpatch()
    # a second unpatch is a no-op
    unpatch()


def test_not_patched_when_disabled(interceptor):
    with override_config(dict(requests_enabled=False)):
        patch(interceptor)

    assert not _is_wrapped()


def test_get_version():
    assert get_version() == requests.__version__


@pytest.mark.usefixtures("patched")
def test_request(hub, active_span):
    adapter = StubAdapter(body=b"hello")

    response = _session(adapter).get(URL)

    assert isinstance(response, requests.Response)
    assert response.content == b"hello"

    (span,) = active_span.children
    assert span.description == "GET " + URL
    assert span.status is SpanStatus.OK
    assert span.finish_count == 1

    (sent,) = adapter.requests
    assert sent.headers[HTTP_HEADER_TRACE] == "%s-%s" % (span.context.trace_id, span.context.span_id)

    ((breadcrumb, hint),) = hub.breadcrumbs
    assert breadcrumb.data == {"url": URL, "method": "GET", "status_code": 200, "response_body_size": 5}
    assert hint[REQUEST_HINT] is sent
    assert hint[RESPONSE_HINT] is response


@pytest.mark.usefixtures("patched")
def test_request_body_size(hub):
    _session(StubAdapter(headers={"Content-Length": "7"})).post(URL, data=b"abc")

    ((breadcrumb, _),) = hub.breadcrumbs
    assert breadcrumb.data["method"] == "POST"
    assert breadcrumb.data["request_body_size"] == 3
    assert breadcrumb.data["response_body_size"] == 7


@pytest.mark.usefixtures("patched")
def test_failed_request(hub):
    adapter = StubAdapter(status_code=500, body=b"oops", headers={"Set-Cookie": "session=2"})

    response = _session(adapter).get(URL, headers={"Authorization": "Bearer token", "Cookie": "session=1"})

    assert response.status_code == 500
    ((event, hint),) = hub.events
    assert event.request.url == "https://api.example.com/x"
    assert event.request.query_string == "a=1"
    assert event.request.cookies == "session=1"
    assert "Authorization" not in event.request.headers
    assert event.response.status_code == 500
    assert event.response.cookies == "session=2"
    assert event.response.body_size == 4
    assert hint[RESPONSE_HINT] is response


@pytest.mark.usefixtures("patched")
def test_transport_error(hub, active_span):
    error = requests.ConnectionError("connection refused")

    with pytest.raises(requests.ConnectionError) as exc_info:
        _session(StubAdapter(error=error)).get(URL)

    assert exc_info.value is error
    (span,) = active_span.children
    assert span.status is SpanStatus.INTERNAL_ERROR
    assert span.throwable is error
    assert hub.events == []
    ((breadcrumb, hint),) = hub.breadcrumbs
    assert "status_code" not in breadcrumb.data
    assert RESPONSE_HINT not in hint


@pytest.mark.usefixtures("patched")
def test_session_override(hub, active_span):
    other = DummyHub(span=None)
    session = _session(StubAdapter())
    session._tracewire_interceptor = HttpClientInterceptor(hub=other)

    session.get(URL)

    assert hub.breadcrumbs == []
    assert len(other.breadcrumbs) == 1
    assert active_span.children == []
