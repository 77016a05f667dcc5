"""Translation of finished spans into Wavefront delivery records."""

from __future__ import annotations

from .attributes import extract_span_logs, extract_tags
from .identifiers import make_uuid
from .types import (
    DEFAULT_APPLICATION,
    DEFAULT_SERVICE,
    DeliveryRecord,
    SpanRecord,
    nanos_to_millis,
)


def translate_span(
    span: SpanRecord,
    application: str,
    service: str,
    host: str | None = None,
) -> DeliveryRecord:
    """
    Build the delivery record for one span.

    Timestamps are truncated to milliseconds. The parent list always holds
    exactly one UUID, so a root span reports the all-zero UUID as its parent.
    ``host`` is passed through; ``None`` lets the sender pick the source.

    Raises:
        InvalidIdentifier: if any of the span's ids is malformed
    """
    return DeliveryRecord(
        name=span.name,
        start_millis=nanos_to_millis(span.start_time_ns),
        duration_millis=nanos_to_millis(span.end_time_ns - span.start_time_ns),
        source=host,
        trace_id=make_uuid(span.trace_id),
        span_id=make_uuid(span.span_id),
        parents=[make_uuid(span.parent_span_id)],
        follows_from=[],
        tags=extract_tags(span, application, service),
        span_logs=extract_span_logs(span),
    )


class SpanTranslator:
    """Translates spans for one application/service pair."""

    def __init__(
        self,
        application: str = DEFAULT_APPLICATION,
        service: str = DEFAULT_SERVICE,
        host: str | None = None,
    ) -> None:
        self.application = application
        self.service = service
        self.host = host

    def __repr__(self) -> str:
        return f"SpanTranslator(application={self.application!r}, service={self.service!r})"

    def translate(self, span: SpanRecord) -> DeliveryRecord:
        return translate_span(span, self.application, self.service, self.host)
