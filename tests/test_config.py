import pytest

from tracewire.matching import StatusCodeRange
from tracewire.settings.config import TracewireConfig
from tracewire.settings.config import parse_status_code_ranges

from .utils import override_env


_ENV_NAMES = (
    "TRACEWIRE_SEND_DEFAULT_PII",
    "TRACEWIRE_TRACE_PROPAGATION_TARGETS",
    "TRACEWIRE_CAPTURE_FAILED_REQUESTS",
    "TRACEWIRE_FAILED_REQUEST_STATUS_CODES",
    "TRACEWIRE_FAILED_REQUEST_TARGETS",
    "TRACEWIRE_REQUESTS_ENABLED",
    "TRACEWIRE_LOGGING_RATE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults(clean_env):
    config = TracewireConfig()

    assert config.send_default_pii is False
    assert config.trace_propagation_targets == [".*"]
    assert config.capture_failed_requests is False
    assert config.failed_request_status_codes == [StatusCodeRange(500, 599)]
    assert config.failed_request_targets == [".*"]
    assert config.requests_enabled is True
    assert config.logging_rate == 60


def test_from_env(clean_env):
    with override_env(
        dict(
            TRACEWIRE_SEND_DEFAULT_PII="true",
            TRACEWIRE_TRACE_PROPAGATION_TARGETS="api.example.com, ^https://internal\\.local/.*",
            TRACEWIRE_CAPTURE_FAILED_REQUESTS="1",
            TRACEWIRE_FAILED_REQUEST_STATUS_CODES="400-499,503",
            TRACEWIRE_FAILED_REQUEST_TARGETS="api.example.com",
            TRACEWIRE_REQUESTS_ENABLED="false",
            TRACEWIRE_LOGGING_RATE="0",
        )
    ):
        config = TracewireConfig()

    assert config.send_default_pii is True
    assert config.trace_propagation_targets == ["api.example.com", "^https://internal\\.local/.*"]
    assert config.capture_failed_requests is True
    assert config.failed_request_status_codes == [StatusCodeRange(400, 499), StatusCodeRange(503)]
    assert config.failed_request_targets == ["api.example.com"]
    assert config.requests_enabled is False
    assert config.logging_rate == 0


def test_empty_targets(clean_env):
    with override_env(dict(TRACEWIRE_TRACE_PROPAGATION_TARGETS="")):
        config = TracewireConfig()

    assert config.trace_propagation_targets == []


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, []),
        ("", []),
        ("500-599", [StatusCodeRange(500, 599)]),
        ("400-499, 418, ", [StatusCodeRange(400, 499), StatusCodeRange(418)]),
        ("abc,500-599,599-500", [StatusCodeRange(500, 599)]),
    ],
)
def test_parse_status_code_ranges(value, expected):
    assert parse_status_code_ranges(value) == expected
