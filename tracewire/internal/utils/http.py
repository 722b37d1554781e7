from typing import TYPE_CHECKING
from typing import Dict
from typing import Optional

from tracewire.internal.utils.cache import cached


if TYPE_CHECKING:  # pragma: no cover
    from tracewire.http import Headers


# Never reported, not even when sending PII is enabled
SENSITIVE_HEADERS = frozenset(
    [
        "authorization",
        "cookie",
        "forwarded",
        "proxy-authorization",
        "remote-addr",
        "set-cookie",
        "x-api-key",
        "x-csrf-token",
        "x-csrftoken",
        "x-forwarded-for",
        "x-real-ip",
        "x-xsrf-token",
    ]
)


@cached()
def normalize_header_name(header_name):
    # type: (Optional[str]) -> Optional[str]
    """
    Normalizes an header name to lower case, stripping all its leading and trailing white spaces.
    :param header_name: the header name to normalize
    :type header_name: str
    :return: the normalized header name
    :rtype: str
    """
    return header_name.strip().lower() if header_name is not None else None


def is_sensitive_header(header_name):
    # type: (str) -> bool
    return normalize_header_name(header_name) in SENSITIVE_HEADERS


def sanitize_headers(headers, send_default_pii):
    # type: (Headers, bool) -> Optional[Dict[str, str]]
    """
    Project ``headers`` to a plain dict fit for reporting.

    Headers are only reported if sending PII is enabled, ``None`` is returned
    otherwise. Sensitive headers are always left out.
    """
    if not send_default_pii:
        return None

    sanitized = {}
    for name, value in headers.items():
        if is_sensitive_header(name):
            continue
        sanitized[name] = value
    return sanitized


def strip_query_and_fragment(url, query, fragment):
    # type: (str, Optional[str], Optional[str]) -> str
    """
    Remove the literal ``?<query>`` and ``#<fragment>`` parts from ``url``.

    Only the first occurrence of each is removed, e.g.
    ``https://api.example.com/repos/?query=q#frag`` becomes
    ``https://api.example.com/repos/``.
    """
    if query:
        url = url.replace("?" + query, "", 1)
    if fragment:
        url = url.replace("#" + fragment, "", 1)
    return url


def valid_length(length):
    # type: (Optional[int]) -> Optional[int]
    """Return ``length`` if it is a known body size, ``None`` otherwise (``-1`` means unknown)."""
    if length is None or length < 0:
        return None
    return length
