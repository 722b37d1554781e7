import contextlib
import os

from tracewire.hub import Hub
from tracewire.hub import HubOptions
from tracewire.settings.config import config
from tracewire.span import Span


@contextlib.contextmanager
def override_env(env):
    """
    Temporarily override ``os.environ`` with provided values::

        >>> with override_env(dict(TRACEWIRE_SEND_DEFAULT_PII="true")):
            # Your test
    """
    # Copy the full original environment
    original = dict(os.environ)

    os.environ.update(env)
    try:
        yield
    finally:
        # Full clear the environment out and reset back to the original
        os.environ.clear()
        os.environ.update(original)


@contextlib.contextmanager
def override_config(values):
    """
    Temporarily override the global configuration::

        >>> with override_config(dict(capture_failed_requests=True)):
            # Your test
    """
    originals = {key: getattr(config, key) for key in values}
    for key, value in values.items():
        setattr(config, key, value)
    try:
        yield
    finally:
        for key, value in originals.items():
            setattr(config, key, value)


class RecordingSpan(Span):
    """Span keeping track of its children and of how many times it was finished."""

    def __init__(self, *args, **kwargs):
        super(RecordingSpan, self).__init__(*args, **kwargs)
        self.children = []
        self.finish_count = 0

    def start_child(self, op, description=None):
        context = Span.start_child(self, op, description).context
        child = RecordingSpan(op, description, context)
        self.children.append(child)
        return child

    def finish(self, finish_time=None):
        self.finish_count += 1
        super(RecordingSpan, self).finish(finish_time)


class DummyHub(Hub):
    """DummyHub is a small fake hub keeping everything it is given. not thread-safe."""

    def __init__(self, span=None, send_default_pii=False, trace_propagation_targets=None):
        self._span = span
        self._options = HubOptions(
            send_default_pii=send_default_pii,
            trace_propagation_targets=[".*"] if trace_propagation_targets is None else trace_propagation_targets,
        )
        self.breadcrumbs = []
        self.events = []

    @property
    def options(self):
        return self._options

    @property
    def span(self):
        return self._span

    def add_breadcrumb(self, breadcrumb, hint=None):
        self.breadcrumbs.append((breadcrumb, hint))

    def capture_event(self, event, hint=None):
        self.events.append((event, hint))

    def pop_breadcrumbs(self):
        breadcrumbs = self.breadcrumbs
        self.breadcrumbs = []
        return breadcrumbs

    def pop_events(self):
        events = self.events
        self.events = []
        return events
