import pytest

from tracewire.hub import set_current_hub
from tracewire.internal.utils.http import normalize_header_name
from tracewire.matching import _compile_target

from .utils import DummyHub
from .utils import RecordingSpan


@pytest.fixture(autouse=True)
def reset_tracewire_state():
    yield
    set_current_hub(None)
    _compile_target.invalidate()
    normalize_header_name.invalidate()


@pytest.fixture
def active_span():
    return RecordingSpan("http.server", "GET /checkout")


@pytest.fixture
def hub(active_span):
    return DummyHub(span=active_span, send_default_pii=True)
