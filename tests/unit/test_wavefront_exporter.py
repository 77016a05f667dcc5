"""Tests for exporter.py - WavefrontSpanExporter entry points."""

from __future__ import annotations

from uuid import UUID

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor, SpanExportResult

from wavefront_exporter.core.errors import ClosedExporterError
from wavefront_exporter.core.exporter import WavefrontSpanExporter
from wavefront_exporter.core.types import ExportResultCode
from tests.utils import create_test_span


class TestWavefrontSpanExporterExportRecords:
    """Tests for WavefrontSpanExporter.export_records."""

    def test_delivers_records_with_configured_tags(self, exporter, in_memory_sender):
        result = exporter.export_records([create_test_span(name="client.span")])

        assert result == ExportResultCode.SUCCESS
        record = in_memory_sender.get_records_by_name("client.span")[0]
        assert record.tags[:2] == [("application", "test-application"), ("service", "test-service")]

    def test_reports_retryable_failure(self, mocker):
        sender = mocker.MagicMock()
        sender.send_span.side_effect = ConnectionError("refused")
        exporter = WavefrontSpanExporter(sender)

        assert exporter.export_records([create_test_span()]) == ExportResultCode.FAILED_RETRYABLE

    def test_raises_after_shutdown(self, exporter):
        exporter.shutdown()

        with pytest.raises(ClosedExporterError):
            exporter.export_records([create_test_span()])


class TestWavefrontSpanExporterOpenTelemetry:
    """Tests for the OpenTelemetry SpanExporter integration."""

    def test_exports_spans_from_tracer_provider(self, exporter, in_memory_sender):
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        tracer = provider.get_tracer("test-lib", "1.2.3")

        with tracer.start_as_current_span("parent") as parent:
            with tracer.start_as_current_span("child") as child:
                child.set_attribute("http.status_code", 200)
                child.add_event("retry", {"attempt": 2})

        records = in_memory_sender.get_all_records()
        assert [r.name for r in records] == ["child", "parent"]

        child_record, parent_record = records
        parent_context = parent.get_span_context()
        assert child_record.parents == [UUID(int=parent_context.span_id)]
        assert parent_record.parents == [UUID(int=0)]
        assert child_record.trace_id == UUID(int=parent_context.trace_id)
        assert ("instrumentation.name", "test-lib") in child_record.tags
        assert ("instrumentation.version", "1.2.3") in child_record.tags
        assert ("http.status_code", "200") in child_record.tags
        assert child_record.span_logs[0].fields == {"attempt": "2"}

        provider.shutdown()
        assert in_memory_sender.closed is True

    def test_maps_retryable_failure_to_failure(self, mocker):
        sender = mocker.MagicMock()
        sender.send_span.side_effect = ConnectionError("refused")
        exporter = WavefrontSpanExporter(sender)
        provider = TracerProvider()
        tracer = provider.get_tracer("test")
        span = tracer.start_span("op")
        span.end()

        assert exporter.export([span]) == SpanExportResult.FAILURE

    def test_success_maps_to_success(self, exporter):
        tracer = TracerProvider().get_tracer("test")
        span = tracer.start_span("op")
        span.end()

        assert exporter.export([span]) == SpanExportResult.SUCCESS


class TestWavefrontSpanExporterLifecycle:
    """Tests for flush and shutdown behavior."""

    def test_force_flush_flushes_sender(self, exporter, in_memory_sender):
        assert exporter.force_flush() is True
        assert in_memory_sender.flush_count == 1

    def test_force_flush_returns_false_on_fault(self, mocker):
        sender = mocker.MagicMock()
        sender.flush.side_effect = ConnectionError("down")
        exporter = WavefrontSpanExporter(sender)

        assert exporter.force_flush() is False

    def test_shutdown_flushes_then_closes(self, mocker):
        sender = mocker.MagicMock()
        exporter = WavefrontSpanExporter(sender)

        exporter.shutdown()

        assert [c[0] for c in sender.method_calls] == ["flush", "close"]
        assert exporter.is_shutdown is True

    def test_shutdown_swallows_flush_and_close_faults(self, mocker, caplog):
        sender = mocker.MagicMock()
        sender.flush.side_effect = ConnectionError("flush failed")
        sender.close.side_effect = OSError("close failed")
        exporter = WavefrontSpanExporter(sender)

        exporter.shutdown()

        sender.close.assert_called_once()
        assert "Error flushing Wavefront sender" in caplog.text
        assert "Error closing Wavefront sender" in caplog.text

    def test_second_shutdown_is_a_no_op(self, mocker):
        sender = mocker.MagicMock()
        exporter = WavefrontSpanExporter(sender)

        exporter.shutdown()
        exporter.shutdown()

        sender.close.assert_called_once()

    def test_exposes_configuration(self, exporter, in_memory_sender):
        assert exporter.sender is in_memory_sender
        assert exporter.application == "test-application"
        assert exporter.service == "test-service"
        assert exporter.host is None
