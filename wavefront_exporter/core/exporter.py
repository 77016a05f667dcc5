"""OpenTelemetry span exporter that delivers spans to Wavefront."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Sequence

from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from .errors import ClosedExporterError
from .otel_converter import otel_span_to_span_record
from .session import ExportSession
from .translator import SpanTranslator
from .types import DEFAULT_APPLICATION, DEFAULT_SERVICE, ExportResultCode, SpanRecord

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import ReadableSpan

    from ..senders.base import WavefrontSender
    from .config import ExporterBuilder

logger = logging.getLogger(__name__)


class WavefrontSpanExporter(SpanExporter):
    """
    Translates finished spans and hands them to a Wavefront sender.

    Use ``WavefrontSpanExporter.builder()`` to configure a relay or direct
    connection, or pass a sender directly.

    Callers only see a two-valued outcome per batch. Individual spans dropped
    because of a non-transport fault are logged but do not fail the batch.
    """

    def __init__(
        self,
        sender: "WavefrontSender",
        application: str = DEFAULT_APPLICATION,
        service: str = DEFAULT_SERVICE,
        host: str | None = None,
    ) -> None:
        self._sender = sender
        self._translator = SpanTranslator(application, service, host)
        self._shutdown_lock = threading.Lock()
        self._is_shutdown = False

    def __repr__(self) -> str:
        return (
            f"WavefrontSpanExporter(sender={self._sender.name}, "
            f"application={self.application!r}, service={self.service!r})"
        )

    @staticmethod
    def builder() -> "ExporterBuilder":
        from .config import ExporterBuilder

        return ExporterBuilder()

    @property
    def sender(self) -> "WavefrontSender":
        return self._sender

    @property
    def application(self) -> str:
        return self._translator.application

    @property
    def service(self) -> str:
        return self._translator.service

    @property
    def host(self) -> str | None:
        return self._translator.host

    @property
    def is_shutdown(self) -> bool:
        return self._is_shutdown

    def export_records(self, spans: Sequence[SpanRecord]) -> ExportResultCode:
        """
        Export a batch of spans in order.

        Raises:
            ClosedExporterError: if the exporter was shut down
            InvalidIdentifier: if a span carries a malformed id
        """
        if self._is_shutdown:
            raise ClosedExporterError("Cannot export spans after the exporter was shut down")

        session = ExportSession(self._translator, self._sender)
        result = session.run(spans)
        if result is not ExportResultCode.SUCCESS or session.failed_count:
            logger.debug(
                f"Export finished with {result.name}: "
                f"{session.sent_count} sent, {session.failed_count} failed"
            )
        return result

    def export(self, spans: Sequence["ReadableSpan"]) -> SpanExportResult:
        records = [otel_span_to_span_record(span) for span in spans]
        result = self.export_records(records)
        if result is ExportResultCode.SUCCESS:
            return SpanExportResult.SUCCESS
        return SpanExportResult.FAILURE

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        if self._is_shutdown:
            return False
        try:
            self._sender.flush()
        except Exception as e:
            logger.warning("Error flushing Wavefront sender", exc_info=e)
            return False
        return True

    def shutdown(self) -> None:
        """Flush and close the sender. Never raises."""
        with self._shutdown_lock:
            if self._is_shutdown:
                logger.warning("Exporter already shut down, ignoring call")
                return
            self._is_shutdown = True

        try:
            self._sender.flush()
        except Exception as e:
            logger.warning("Error flushing Wavefront sender", exc_info=e)

        try:
            self._sender.close()
        except Exception as e:
            logger.warning("Error closing Wavefront sender", exc_info=e)
