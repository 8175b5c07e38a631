"""Unit tests for tracing setup."""

import pytest

from src.infrastructure.monitoring import setup_telemetry, shutdown_telemetry, trace_span
from src.shared.config.settings import MonitoringSettings, Settings


class TestTelemetry:
    def test_disabled_by_default(self):
        settings = Settings(monitoring=MonitoringSettings(otel_enabled=False))
        assert setup_telemetry(settings) is False

    def test_enable_and_shutdown(self):
        settings = Settings(
            monitoring=MonitoringSettings(
                otel_enabled=True, otel_exporter_otlp_endpoint=None
            )
        )
        try:
            assert setup_telemetry(settings) is True
            # Second call keeps the installed provider
            assert setup_telemetry(settings) is True
        finally:
            shutdown_telemetry()

    def test_trace_span_reraises(self):
        with pytest.raises(ValueError):
            with trace_span("failing.block", {"degree": "MBA"}):
                raise ValueError("bad")

    def test_trace_span_yields_span(self):
        with trace_span("ok.block") as span:
            assert span is not None
