from typing import TYPE_CHECKING
from typing import Optional

from tracewire.http import Headers
from tracewire.http import Request
from tracewire.http import Response
from tracewire.internal.logger import get_logger


if TYPE_CHECKING:  # pragma: no cover
    import requests


log = get_logger(__name__)


def _content_length(headers):
    # type: (Headers) -> Optional[int]
    value = headers.get("Content-Length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        log.debug("requests: invalid Content-Length header %r", value)
        return None


def _request_body_size(prepared, headers):
    # type: (requests.PreparedRequest, Headers) -> Optional[int]
    body = prepared.body
    if body is None:
        return None
    size = _content_length(headers)
    if size is not None:
        return size
    if isinstance(body, bytes):
        return len(body)
    if isinstance(body, str):
        return len(body.encode("utf-8"))
    # streamed bodies have no known length
    return None


def _response_body_size(response, headers):
    # type: (requests.Response, Headers) -> Optional[int]
    size = _content_length(headers)
    if size is not None:
        return size
    # only available once the content was read, streamed responses are left alone
    content = getattr(response, "_content", False)
    if isinstance(content, bytes):
        return len(content)
    return None


def _to_request(prepared):
    # type: (requests.PreparedRequest) -> Request
    headers = Headers(prepared.headers.items())
    return Request(
        url=prepared.url,
        method=prepared.method or "GET",
        headers=headers,
        body_size=_request_body_size(prepared, headers),
        raw=prepared,
    )


def _to_response(response, request):
    # type: (requests.Response, Request) -> Response
    headers = Headers(response.headers.items())
    return Response(
        status_code=response.status_code,
        request=request,
        headers=headers,
        body_size=_response_body_size(response, headers),
        raw=response,
    )


def _wrap_send(func, instance, args, kwargs):
    """Intercept the `Session.send` instance method"""
    interceptor = getattr(instance, "_tracewire_interceptor", None)
    if interceptor is None:
        return func(*args, **kwargs)

    # Session.send(self, request, **kwargs)
    prepared = kwargs.get("request", args[0] if args else None)
    if not prepared:
        return func(*args, **kwargs)

    def proceed(request):
        # type: (Request) -> Response
        # trace headers are only ever added or replaced
        for name, value in request.headers.items():
            prepared.headers[name] = value
        return _to_response(func(*args, **kwargs), request)

    return interceptor.intercept(_to_request(prepared), proceed).raw
