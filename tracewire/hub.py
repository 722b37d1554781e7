"""
The hub is the collaborator the interceptor reports to: it knows the active
span and takes breadcrumbs and events. Buffering and delivery are up to the
hub implementation.

A process-wide current hub is kept for integrations that are installed
without an explicit hub::

    from tracewire.hub import set_current_hub

    set_current_hub(MyHub())
"""
import abc
import threading
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import attr

from tracewire.breadcrumb import Breadcrumb
from tracewire.event import ErrorEvent
from tracewire.internal.logger import get_logger
from tracewire.settings.config import config
from tracewire.span import Span


log = get_logger(__name__)

Hint = Dict[str, Any]


@attr.s(frozen=True, slots=True)
class HubOptions(object):
    send_default_pii = attr.ib(type=bool, default=False)
    trace_propagation_targets = attr.ib(type=List[str], factory=lambda: [".*"])

    @classmethod
    def from_config(cls):
        # type: () -> HubOptions
        return cls(
            send_default_pii=config.send_default_pii,
            trace_propagation_targets=list(config.trace_propagation_targets),
        )


class Hub(abc.ABC):
    @property
    @abc.abstractmethod
    def options(self):
        # type: () -> HubOptions
        pass

    @property
    @abc.abstractmethod
    def span(self):
        # type: () -> Optional[Span]
        """The active span, if any."""

    @abc.abstractmethod
    def add_breadcrumb(self, breadcrumb, hint=None):
        # type: (Breadcrumb, Optional[Hint]) -> None
        pass

    @abc.abstractmethod
    def capture_event(self, event, hint=None):
        # type: (ErrorEvent, Optional[Hint]) -> None
        pass


class NoopHub(Hub):
    """Hub without an active span that discards everything it is given."""

    def __init__(self, options=None):
        # type: (Optional[HubOptions]) -> None
        self._options = options if options is not None else HubOptions.from_config()

    @property
    def options(self):
        # type: () -> HubOptions
        return self._options

    @property
    def span(self):
        # type: () -> Optional[Span]
        return None

    def add_breadcrumb(self, breadcrumb, hint=None):
        # type: (Breadcrumb, Optional[Hint]) -> None
        log.debug("no hub bound, dropping breadcrumb %r", breadcrumb)

    def capture_event(self, event, hint=None):
        # type: (ErrorEvent, Optional[Hint]) -> None
        log.debug("no hub bound, dropping event %s", event.event_id)


_lock = threading.Lock()
_current_hub = None  # type: Optional[Hub]


def get_current_hub():
    # type: () -> Hub
    global _current_hub

    with _lock:
        if _current_hub is None:
            _current_hub = NoopHub()
        return _current_hub


def set_current_hub(hub):
    # type: (Optional[Hub]) -> None
    """Bind ``hub`` as the process-wide current hub, ``None`` restores the default."""
    global _current_hub

    with _lock:
        _current_hub = hub


class HubAdapter(Hub):
    """Hub forwarding every call to the current hub at the time of the call."""

    @property
    def options(self):
        # type: () -> HubOptions
        return get_current_hub().options

    @property
    def span(self):
        # type: () -> Optional[Span]
        return get_current_hub().span

    def add_breadcrumb(self, breadcrumb, hint=None):
        # type: (Breadcrumb, Optional[Hint]) -> None
        get_current_hub().add_breadcrumb(breadcrumb, hint)

    def capture_event(self, event, hint=None):
        # type: (ErrorEvent, Optional[Hint]) -> None
        get_current_hub().capture_event(event, hint)
