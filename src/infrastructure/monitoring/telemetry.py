"""OpenTelemetry tracing for UniScout.

Tracing is off unless OTEL_ENABLED is set. Until ``setup_telemetry`` runs,
``trace_span`` records into the no-op tracer, so call sites never need to
check whether tracing is configured.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace import Status, StatusCode

try:
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    HAS_OTLP_EXPORTER = True
except ImportError:
    HAS_OTLP_EXPORTER = False

from src.shared.config.settings import Settings

logger = structlog.get_logger(__name__)

TRACER_NAME = "uniscout"

_provider: TracerProvider | None = None


def _build_exporter(settings: Settings) -> SpanExporter:
    """OTLP when an endpoint is configured and the exporter is installed."""
    endpoint = settings.monitoring.otel_exporter_otlp_endpoint
    if endpoint and HAS_OTLP_EXPORTER:
        logger.info("otlp_exporter_configured", endpoint=endpoint)
        return OTLPSpanExporter(
            endpoint=endpoint, insecure=settings.environment != "production"
        )

    if endpoint:
        logger.warning(
            "otlp_exporter_unavailable",
            endpoint=endpoint,
            hint="install the 'otlp' extra",
        )
    return ConsoleSpanExporter()


def setup_telemetry(settings: Settings) -> bool:
    """Install a tracer provider for the service.

    Returns:
        True if tracing was enabled
    """
    global _provider

    if not settings.monitoring.otel_enabled:
        logger.info("telemetry_disabled")
        return False
    if _provider is not None:
        return True

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.monitoring.otel_service_name,
                "service.version": settings.app_version,
                "deployment.environment": settings.environment,
            }
        )
    )
    provider.add_span_processor(BatchSpanProcessor(_build_exporter(settings)))
    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info("telemetry_initialized", service=settings.monitoring.otel_service_name)
    return True


def shutdown_telemetry() -> None:
    """Flush pending spans and stop the exporter."""
    global _provider

    if _provider is None:
        return
    _provider.shutdown()
    _provider = None
    logger.info("telemetry_shutdown")


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
) -> Generator[trace.Span]:
    """Run a block inside a span, marking the span failed if the block raises."""
    with get_tracer().start_as_current_span(
        name, kind=kind, attributes=attributes or {}
    ) as span:
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise
