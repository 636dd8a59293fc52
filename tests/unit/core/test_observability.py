"""Unit tests for petstore/core/observability.py module."""

from typing import cast

import pytest
from fastapi import FastAPI
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExportResult
from opentelemetry.trace import SpanContext, Status, StatusCode
from pytest_mock import MockerFixture, MockType

from petstore.core.config import ObservabilityConfig, Settings
from petstore.core.context import RequestContext
from petstore.core.observability import (
    LoguruSpanExporter,
    add_correlation_id_to_span,
    add_span_attributes,
    get_span_exporter,
    instrument_app,
    setup_tracing,
)


def settings_with(**observability: object) -> Settings:
    """Settings with the given observability options."""
    return Settings(observability_config=ObservabilityConfig(**observability))


@pytest.fixture
def recording_span(mocker: MockerFixture) -> MockType:
    """A span mock that reports itself as recording."""
    span = mocker.Mock()
    span.is_recording.return_value = True
    return cast("MockType", span)


@pytest.mark.unit
class TestGetSpanExporter:
    """Tests for exporter selection."""

    def test_console_uses_loguru(self) -> None:
        """Verify the console exporter logs through Loguru."""
        exporter = get_span_exporter(settings_with(exporter_type="console"))

        assert isinstance(exporter, LoguruSpanExporter)

    def test_otlp_uses_endpoint(self, mocker: MockerFixture) -> None:
        """Verify the OTLP exporter receives the configured endpoint."""
        otlp = mocker.patch("petstore.core.observability.OTLPSpanExporter")

        exporter = get_span_exporter(
            settings_with(exporter_type="otlp", exporter_endpoint="http://otel:4317")
        )

        assert exporter is otlp.return_value
        otlp.assert_called_once_with(endpoint="http://otel:4317", insecure=True)

    def test_otlp_default_endpoint(self) -> None:
        """Verify a missing endpoint falls back to the local collector."""
        exporter = get_span_exporter(settings_with(exporter_type="otlp"))

        assert isinstance(exporter, OTLPSpanExporter)

    def test_none_disables_export(self) -> None:
        """Verify the none exporter type yields no exporter."""
        assert get_span_exporter(settings_with(exporter_type="none")) is None


@pytest.mark.unit
class TestSetupTracing:
    """Tests for setup_tracing."""

    def test_disabled(self, mocker: MockerFixture) -> None:
        """Verify nothing is installed when tracing is off."""
        set_provider = mocker.patch("petstore.core.observability.trace")

        setup_tracing(settings_with(enable_tracing=False))

        set_provider.set_tracer_provider.assert_not_called()

    def test_enabled(self, mocker: MockerFixture) -> None:
        """Verify a sampled provider with a batch processor is installed."""
        trace_module = mocker.patch("petstore.core.observability.trace")
        processor = mocker.patch("petstore.core.observability.BatchSpanProcessor")
        sampler = mocker.patch("petstore.core.observability.TraceIdRatioBased")

        setup_tracing(settings_with(exporter_type="console", trace_sample_rate=0.5))

        sampler.assert_called_once_with(0.5)
        assert isinstance(processor.call_args.args[0], LoguruSpanExporter)
        trace_module.set_tracer_provider.assert_called_once()

    def test_enabled_without_exporter(self, mocker: MockerFixture) -> None:
        """Verify no span processor is added when export is disabled."""
        mocker.patch("petstore.core.observability.trace")
        processor = mocker.patch("petstore.core.observability.BatchSpanProcessor")

        setup_tracing(settings_with(exporter_type="none"))

        processor.assert_not_called()


@pytest.mark.unit
class TestInstrumentApp:
    """Tests for instrument_app."""

    def test_disabled(self, mocker: MockerFixture) -> None:
        """Verify the app is left alone when tracing is off."""
        instrumentor = mocker.patch("petstore.core.observability.FastAPIInstrumentor")

        instrument_app(FastAPI(), settings_with(enable_tracing=False))

        instrumentor.instrument_app.assert_not_called()

    def test_excludes_health_and_docs(self, mocker: MockerFixture) -> None:
        """Verify health and documentation URLs are not traced."""
        instrumentor = mocker.patch("petstore.core.observability.FastAPIInstrumentor")
        settings = Settings(redoc_url=None)
        app = FastAPI()

        instrument_app(app, settings)

        kwargs = instrumentor.instrument_app.call_args.kwargs
        assert kwargs["excluded_urls"] == "/health,/docs,/openapi.json"
        assert kwargs["server_request_hook"] is add_correlation_id_to_span


@pytest.mark.unit
class TestSpanHelpers:
    """Tests for span attribute helpers."""

    def test_correlation_id_from_context(self, recording_span: MockType) -> None:
        """Verify the context correlation ID wins over the header."""
        RequestContext.set_correlation_id("ctx-id")
        scope = {"headers": [(b"x-correlation-id", b"header-id")]}

        add_correlation_id_to_span(recording_span, scope)

        recording_span.set_attribute.assert_called_once_with("correlation_id", "ctx-id")

    def test_correlation_and_request_id_from_headers(
        self, recording_span: MockType
    ) -> None:
        """Verify header values are used when the context is empty."""
        scope = {
            "headers": [
                (b"x-correlation-id", b"header-id"),
                (b"x-request-id", b"req-1"),
            ]
        }

        add_correlation_id_to_span(recording_span, scope)

        recording_span.set_attribute.assert_any_call("correlation_id", "header-id")
        recording_span.set_attribute.assert_any_call("request_id", "req-1")

    def test_not_recording(self, recording_span: MockType) -> None:
        """Verify nothing is set on a non-recording span."""
        recording_span.is_recording.return_value = False

        add_correlation_id_to_span(recording_span, {"headers": []})

        recording_span.set_attribute.assert_not_called()

    def test_add_span_attributes(
        self, mocker: MockerFixture, recording_span: MockType
    ) -> None:
        """Verify attributes land on the current span."""
        mocker.patch(
            "petstore.core.observability.trace.get_current_span",
            return_value=recording_span,
        )

        add_span_attributes(pet_id=5, operation="get")

        recording_span.set_attribute.assert_any_call("pet_id", 5)
        recording_span.set_attribute.assert_any_call("operation", "get")


@pytest.mark.unit
class TestLoguruSpanExporter:
    """Tests for the development exporter."""

    def test_export_logs_span(
        self, mocker: MockerFixture, log_messages: list[dict[str, object]]
    ) -> None:
        """Verify finished spans are logged with ids and duration."""
        span = mocker.Mock(spec=ReadableSpan)
        span.name = "GET /api/pet/{pet_id}"
        span.get_span_context.return_value = SpanContext(
            trace_id=1, span_id=2, is_remote=False
        )
        span.attributes = {"pet_id": 5}
        span.start_time = 1_000_000
        span.end_time = 6_000_000
        span.status = Status(StatusCode.OK)

        result = LoguruSpanExporter().export([span])

        assert result is SpanExportResult.SUCCESS
        record = log_messages[-1]
        extra = cast("dict[str, object]", record["extra"])
        assert record["message"] == "Trace span completed: GET /api/pet/{pet_id}"
        assert extra["trace_id"] == f"0x{1:032x}"
        assert extra["duration_ms"] == 5
        assert extra["status"] == "OK"

    def test_export_skips_noisy_spans(
        self, mocker: MockerFixture, log_messages: list[dict[str, object]]
    ) -> None:
        """Verify ASGI send/receive spans are not logged."""
        span = mocker.Mock(spec=ReadableSpan)
        span.name = "http send"
        span.get_span_context.return_value = SpanContext(
            trace_id=1, span_id=2, is_remote=False
        )

        LoguruSpanExporter().export([span])

        assert log_messages == []
