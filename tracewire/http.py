"""
Transport agnostic snapshots of the HTTP requests and responses going through
the interceptor.

Integrations convert their native objects into these and keep the native
object around as ``raw`` so it can be handed back to the caller and attached
to breadcrumb and event hints.
"""
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Mapping
from typing import Optional
from typing import Tuple
from typing import Union
from urllib import parse

import attr

from tracewire.internal.utils.http import normalize_header_name


HeadersInput = Union["Headers", Mapping[str, str], Iterable[Tuple[str, str]], None]


class Headers(object):
    """Ordered, case-insensitive and multi-valued collection of HTTP headers.

    Instances are immutable: ``set`` and ``remove`` return new collections.
    """

    __slots__ = ("_items",)

    def __init__(self, items=None):
        # type: (HeadersInput) -> None
        if items is None:
            pairs = ()  # type: Iterable[Tuple[str, str]]
        elif isinstance(items, Headers):
            pairs = items._items
        elif isinstance(items, Mapping):
            pairs = items.items()
        else:
            pairs = items
        self._items = tuple((str(name), str(value)) for name, value in pairs)  # type: Tuple[Tuple[str, str], ...]

    def get(self, name, default=None):
        # type: (str, Optional[str]) -> Optional[str]
        """Return the last value of the header ``name``."""
        values = self.get_all(name)
        return values[-1] if values else default

    def get_all(self, name):
        # type: (str) -> List[str]
        normalized = normalize_header_name(name)
        return [value for key, value in self._items if normalize_header_name(key) == normalized]

    def set(self, name, value):
        # type: (str, str) -> Headers
        """Return a copy where every ``name`` header is replaced by a single ``value``."""
        return Headers(self.remove(name)._items + ((name, value),))

    def remove(self, name):
        # type: (str) -> Headers
        normalized = normalize_header_name(name)
        return Headers(item for item in self._items if normalize_header_name(item[0]) != normalized)

    def items(self):
        # type: () -> List[Tuple[str, str]]
        return list(self._items)

    def __contains__(self, name):
        # type: (object) -> bool
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self):
        # type: () -> Iterator[str]
        return (name for name, _ in self._items)

    def __len__(self):
        # type: () -> int
        return len(self._items)

    def __eq__(self, other):
        if not isinstance(other, Headers):
            return NotImplemented
        return self._items == other._items

    def __hash__(self):
        return hash(self._items)

    def __repr__(self):
        return "Headers(%r)" % (list(self._items),)


def _to_headers(value):
    # type: (HeadersInput) -> Headers
    return value if isinstance(value, Headers) else Headers(value)


def _to_method(value):
    # type: (str) -> str
    return value.upper()


@attr.s(frozen=True, slots=True)
class Request(object):
    """Snapshot of an outgoing HTTP request.

    ``body_size`` is ``None`` when there is no body or its length is unknown.
    """

    url = attr.ib(type=str)
    method = attr.ib(type=str, default="GET", converter=_to_method)
    headers = attr.ib(type=Headers, factory=Headers, converter=_to_headers)
    body_size = attr.ib(type=Optional[int], default=None)
    raw = attr.ib(type=Any, default=None, eq=False, repr=False)

    @property
    def query(self):
        # type: () -> str
        return parse.urlsplit(self.url).query

    @property
    def fragment(self):
        # type: () -> str
        return parse.urlsplit(self.url).fragment

    def with_headers(self, headers):
        # type: (HeadersInput) -> Request
        return attr.evolve(self, headers=headers)


@attr.s(frozen=True, slots=True)
class Response(object):
    """Snapshot of the HTTP response received for ``request``."""

    status_code = attr.ib(type=int)
    request = attr.ib(type=Request)
    headers = attr.ib(type=Headers, factory=Headers, converter=_to_headers)
    body_size = attr.ib(type=Optional[int], default=None)
    raw = attr.ib(type=Any, default=None, eq=False, repr=False)
