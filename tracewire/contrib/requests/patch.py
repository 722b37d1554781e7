import requests
import wrapt

from tracewire.interceptor import HttpClientInterceptor
from tracewire.settings.config import config

from .connection import _wrap_send


def get_version():
    # type: () -> str
    return getattr(requests, "__version__", "")


def patch(interceptor=None):
    # type: (HttpClientInterceptor) -> None
    """Activate HTTP calls interception"""
    if not config.requests_enabled or getattr(requests, "_tracewire_patch", False):
        return
    requests._tracewire_patch = True

    requests.Session._tracewire_interceptor = interceptor if interceptor is not None else HttpClientInterceptor()
    wrapt.wrap_function_wrapper("requests", "Session.send", _wrap_send)


def unpatch():
    # type: () -> None
    """Disable HTTP calls interception"""
    if not getattr(requests, "_tracewire_patch", False):
        return
    requests._tracewire_patch = False

    send = requests.Session.__dict__["send"]
    if isinstance(send, wrapt.ObjectProxy):
        requests.Session.send = send.__wrapped__
    del requests.Session._tracewire_interceptor
