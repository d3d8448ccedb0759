"""
OpenTelemetry configuration for the notaventa service.
"""
import logging
from opentelemetry import metrics, trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.instrumentation.django import DjangoInstrumentor
from django.conf import settings

logger = logging.getLogger(__name__)


def setup_otel():
    """Initialize OpenTelemetry instrumentation."""
    otel_enabled = getattr(settings, "OTEL_ENABLED", False)
    if not otel_enabled:
        logger.info("OpenTelemetry is disabled. Skipping instrumentation.")
        return

    service_name = getattr(settings, "OTEL_SERVICE_NAME", "notaventa")
    otlp_endpoint = getattr(settings, "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318").rstrip("/")

    resource = Resource.create({"service.name": service_name})

    # Traces
    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    exporter = OTLPSpanExporter(endpoint=f"{otlp_endpoint}/v1/traces")
    tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
    logger.info(f"Using OTLP span exporter with endpoint: {otlp_endpoint}/v1/traces")

    DjangoInstrumentor().instrument()

    if settings.DATABASES["default"]["ENGINE"].endswith("postgresql"):
        from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor

        Psycopg2Instrumentor().instrument()

    # Metrics feed the response-time histogram and status-class counter
    # recorded by sales.metrics; without a provider they are no-ops.
    if getattr(settings, "OTEL_EXPORTER_METRICS_ENABLED", False):
        metric_reader = PeriodicExportingMetricReader(
            exporter=OTLPMetricExporter(endpoint=f"{otlp_endpoint}/v1/metrics"),
            export_interval_millis=15000,
        )
        metrics.set_meter_provider(MeterProvider(metric_readers=[metric_reader], resource=resource))
        logger.info(f"Using OTLP metric exporter with endpoint: {otlp_endpoint}/v1/metrics")

    logger.info(f"OpenTelemetry instrumentation enabled for service: {service_name}")
