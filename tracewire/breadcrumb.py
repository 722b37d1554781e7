from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Dict
from typing import Optional

import attr

from tracewire.constants import HTTP_BREADCRUMB_CATEGORY
from tracewire.constants import REQUEST_BODY_SIZE_KEY
from tracewire.constants import RESPONSE_BODY_SIZE_KEY
from tracewire.http import Request
from tracewire.http import Response
from tracewire.internal.utils.http import valid_length


def _utcnow():
    # type: () -> datetime
    return datetime.now(timezone.utc)


@attr.s(slots=True)
class Breadcrumb(object):
    """Diagnostic record of something that happened before an event."""

    type = attr.ib(type=Optional[str], default=None)
    category = attr.ib(type=Optional[str], default=None)
    message = attr.ib(type=Optional[str], default=None)
    level = attr.ib(type=str, default="info")
    data = attr.ib(type=Dict[str, Any], factory=dict)
    timestamp = attr.ib(type=datetime, factory=_utcnow)

    def set_data(self, key, value):
        # type: (str, Any) -> None
        self.data[key] = value

    @classmethod
    def http(cls, url, method, status_code=None):
        # type: (str, str, Optional[int]) -> Breadcrumb
        breadcrumb = cls(type=HTTP_BREADCRUMB_CATEGORY, category=HTTP_BREADCRUMB_CATEGORY)
        breadcrumb.set_data("url", url)
        breadcrumb.set_data("method", method.upper())
        if status_code is not None:
            breadcrumb.set_data("status_code", status_code)
        return breadcrumb


def build_http_breadcrumb(request, response=None, status_code=None):
    # type: (Request, Optional[Response], Optional[int]) -> Breadcrumb
    """Build the breadcrumb recorded for every intercepted HTTP call.

    Body sizes are only set when they are known.
    """
    breadcrumb = Breadcrumb.http(request.url, request.method, status_code)

    request_body_size = valid_length(request.body_size)
    if request_body_size is not None:
        breadcrumb.set_data(REQUEST_BODY_SIZE_KEY, request_body_size)

    if response is not None:
        response_body_size = valid_length(response.body_size)
        if response_body_size is not None:
            breadcrumb.set_data(RESPONSE_BODY_SIZE_KEY, response_body_size)

    return breadcrumb
