"""
Request metrics: response time per route and HTTP status-class counts.

Views record through the active ``MetricsRecorder``. The default one reports
to OpenTelemetry; tests and embedders can swap it with ``set_recorder``.
"""
import functools
import logging
import time

from opentelemetry import metrics
from rest_framework.exceptions import APIException

logger = logging.getLogger(__name__)


class MetricsRecorder:
    """Interface for the observability collaborator."""

    def record_duration(self, ms: float, route: str) -> None:
        raise NotImplementedError

    def increment_class(self, status_class: str) -> None:
        raise NotImplementedError


class OpenTelemetryRecorder(MetricsRecorder):
    def __init__(self, meter_name="sales"):
        meter = metrics.get_meter(meter_name)
        self._durations = meter.create_histogram(
            "http.server.response_time",
            unit="ms",
            description="Response time of sales endpoints",
        )
        self._classes = meter.create_counter(
            "http.server.responses",
            description="Responses by HTTP status class",
        )

    def record_duration(self, ms, route):
        self._durations.record(ms, {"route": route})

    def increment_class(self, status_class):
        self._classes.add(1, {"status_class": status_class})


_recorder = None


def get_recorder() -> MetricsRecorder:
    global _recorder
    if _recorder is None:
        _recorder = OpenTelemetryRecorder()
    return _recorder


def set_recorder(recorder: MetricsRecorder | None) -> None:
    """Install ``recorder``; ``None`` restores the OpenTelemetry default."""
    global _recorder
    _recorder = recorder


def status_class(status_code: int) -> str:
    return f"{status_code // 100}xx"


def track_request(route):
    """Record duration and status class for every response of a view."""

    def decorator(view):
        @functools.wraps(view)
        def wrapper(request, *args, **kwargs):
            started = time.monotonic()
            status_code = 500
            try:
                response = view(request, *args, **kwargs)
                status_code = response.status_code
                return response
            except APIException as e:
                # DRF turns these into responses after the view returns
                status_code = e.status_code
                raise
            finally:
                recorder = get_recorder()
                try:
                    recorder.increment_class(status_class(status_code))
                    recorder.record_duration((time.monotonic() - started) * 1000, route)
                except Exception as e:
                    logger.warning(f"Failed to record metrics for {route}: {e}")

        return wrapper

    return decorator
