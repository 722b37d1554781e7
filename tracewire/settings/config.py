import typing as t

from envier import Env

from tracewire.internal.utils.formats import parse_list
from tracewire.matching import StatusCodeRange


def parse_status_code_ranges(value: t.Union[str, None]) -> t.List[StatusCodeRange]:
    """Parse ``"400-499, 503"`` into status code ranges, skipping malformed entries."""
    from tracewire.internal.logger import get_logger

    ranges = []
    for fragment in parse_list(value):
        try:
            ranges.append(StatusCodeRange.parse(fragment))
        except ValueError:
            get_logger(__name__).warning("ignoring invalid status code range %r", fragment)
    return ranges


class TracewireConfig(Env):
    __prefix__ = "tracewire"

    send_default_pii = Env.var(bool, "send_default_pii", default=False)
    trace_propagation_targets = Env.var(list, "trace_propagation_targets", parser=parse_list, default=[".*"])

    capture_failed_requests = Env.var(bool, "capture_failed_requests", default=False)
    failed_request_status_codes = Env.var(
        list,
        "failed_request_status_codes",
        parser=parse_status_code_ranges,
        default=[StatusCodeRange(StatusCodeRange.DEFAULT_MIN, StatusCodeRange.DEFAULT_MAX)],
    )
    failed_request_targets = Env.var(list, "failed_request_targets", parser=parse_list, default=[".*"])

    requests_enabled = Env.var(bool, "requests_enabled", default=True)

    # 0 disables the rate limit of internal log records
    logging_rate = Env.var(int, "logging_rate", default=60)


config = TracewireConfig()
