from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from urllib import parse

from tracewire.http import Headers
from tracewire.internal.logger import get_logger
from tracewire.matching import contains_target
from tracewire.span import SpanContext


log = get_logger(__name__)

HTTP_HEADER_TRACE = "tracewire-trace"
HTTP_HEADER_BAGGAGE = "baggage"

# Baggage members owned by tracewire, any other member belongs to a third party
BAGGAGE_KEY_PREFIX = "tracewire-"


class _TraceHeader:
    """Helper class for the ``tracewire-trace`` header

    Format::

        <trace_id>-<span_id>[-<sampled>]

    ``sampled`` is ``1`` or ``0`` and is left out while no sampling decision was made.
    """

    @staticmethod
    def _value(span_context):
        # type: (SpanContext) -> str
        value = "%s-%s" % (span_context.trace_id, span_context.span_id)
        if span_context.sampled is not None:
            value += "-1" if span_context.sampled else "-0"
        return value


class _BaggageHeader:
    """Helper class for the W3C ``baggage`` header

    https://www.w3.org/TR/baggage/

    Members of third parties found on the outgoing request are kept as they
    are, tracewire members are replaced by the ones of the span context.
    """

    @staticmethod
    def _items(span_context):
        # type: (SpanContext) -> Dict[str, str]
        items = {"trace_id": span_context.trace_id}
        if span_context.sampled is not None:
            items["sampled"] = "true" if span_context.sampled else "false"
        items.update(span_context.baggage)
        return items

    @staticmethod
    def _third_party_members(values):
        # type: (Iterable[str]) -> List[str]
        members = []
        for value in values:
            for member in value.split(","):
                member = member.strip()
                if not member:
                    continue
                key = member.split("=", 1)[0].strip()
                if key.startswith(BAGGAGE_KEY_PREFIX):
                    continue
                members.append(member)
        return members

    @classmethod
    def _value(cls, span_context, existing):
        # type: (SpanContext, Iterable[str]) -> Optional[str]
        members = cls._third_party_members(existing)
        for key, value in cls._items(span_context).items():
            members.append("%s%s=%s" % (BAGGAGE_KEY_PREFIX, parse.quote(key, safe=""), parse.quote(value, safe="")))
        if not members:
            return None
        return ",".join(members)


class HTTPPropagator(object):
    """Propagate the trace context of outgoing HTTP requests through headers."""

    @staticmethod
    def should_propagate(targets, url):
        # type: (Iterable[str], str) -> bool
        return contains_target(targets, url)

    @staticmethod
    def inject(span_context, headers):
        # type: (SpanContext, Headers) -> Headers
        """Return ``headers`` with the trace context of ``span_context`` injected.

        Any pre-existing ``tracewire-trace`` header is replaced, the ``baggage``
        header is rebuilt out of its third party members and the span context.

        :param SpanContext span_context: Span context to propagate.
        :param Headers headers: HTTP headers of the outgoing request.
        """
        if not span_context.trace_id or not span_context.span_id:
            log.debug("tried to inject invalid context %r", span_context)
            return headers

        headers = headers.set(HTTP_HEADER_TRACE, _TraceHeader._value(span_context))

        baggage = _BaggageHeader._value(span_context, headers.get_all(HTTP_HEADER_BAGGAGE))
        if baggage is not None:
            headers = headers.set(HTTP_HEADER_BAGGAGE, baggage)
        return headers
