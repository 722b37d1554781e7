"""
The ``requests`` integration intercepts all HTTP requests made with the
``requests`` library: each call gets a ``http.client`` span under the active
span, trace headers, a breadcrumb and, if enabled, failed requests are
reported as events.

Enabling
~~~~~~~~

Use :func:`patch()<tracewire.contrib.requests.patch>` to enable the integration::

    from tracewire.contrib.requests import patch
    patch()

    # use requests like usual

The integration is not installed when ``TRACEWIRE_REQUESTS_ENABLED`` is false.


Configuration
~~~~~~~~~~~~~

By default the interceptor reports to the current hub and reads its options
from the ``TRACEWIRE_*`` environment variables. A configured interceptor can be
given instead::

    from tracewire.interceptor import HttpClientInterceptor
    from tracewire.matching import StatusCodeRange

    patch(
        HttpClientInterceptor(
            capture_failed_requests=True,
            failed_request_status_codes=[StatusCodeRange(400, 599)],
        )
    )


Instance Configuration
~~~~~~~~~~~~~~~~~~~~~~

To use another interceptor for all requests made with a ``requests.Session``::

    session = requests.Session()
    session._tracewire_interceptor = HttpClientInterceptor(hub=billing_hub)
"""
from .patch import get_version  # noqa:F401
from .patch import patch  # noqa:F401
from .patch import unpatch  # noqa:F401


__all__ = ["patch", "unpatch", "get_version"]
