"""
tracewire intercepts outgoing HTTP calls to trace them: every call gets a
``http.client`` span, trace headers, a breadcrumb and, if enabled, HTTP client
errors are reported as events.
"""
from .hub import Hub  # noqa: F401
from .hub import HubOptions  # noqa: F401
from .hub import get_current_hub  # noqa: F401
from .hub import set_current_hub  # noqa: F401
from .interceptor import HttpClientInterceptor  # noqa: F401
from .matching import StatusCodeRange  # noqa: F401
from .version import __version__  # noqa: F401


__all__ = [
    "Hub",
    "HubOptions",
    "HttpClientInterceptor",
    "StatusCodeRange",
    "get_current_hub",
    "set_current_hub",
    "__version__",
]
