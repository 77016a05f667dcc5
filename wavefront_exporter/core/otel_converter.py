"""Conversion of OpenTelemetry ReadableSpan objects into SpanRecord."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from opentelemetry.trace import SpanKind as OTelSpanKind

from .types import INVALID_SPAN_ID, SpanKind, SpanRecord, TimedEvent

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import ReadableSpan

logger = logging.getLogger(__name__)

_KIND_MAP = {
    OTelSpanKind.INTERNAL: SpanKind.INTERNAL,
    OTelSpanKind.SERVER: SpanKind.SERVER,
    OTelSpanKind.CLIENT: SpanKind.CLIENT,
    OTelSpanKind.PRODUCER: SpanKind.PRODUCER,
    OTelSpanKind.CONSUMER: SpanKind.CONSUMER,
}


def format_trace_id(trace_id: int) -> str:
    """Format a trace id as 32 lowercase hex characters."""
    return f"{trace_id:032x}"


def format_span_id(span_id: int) -> str:
    """Format a span id as 16 lowercase hex characters."""
    return f"{span_id:016x}"


def otel_span_kind_to_wavefront(kind: Any) -> SpanKind:
    """Map an OpenTelemetry span kind, falling back to UNSPECIFIED."""
    if isinstance(kind, OTelSpanKind):
        return _KIND_MAP.get(kind, SpanKind.UNSPECIFIED)
    if isinstance(kind, int):
        try:
            return _KIND_MAP.get(OTelSpanKind(kind), SpanKind.UNSPECIFIED)
        except ValueError:
            return SpanKind.UNSPECIFIED
    return SpanKind.UNSPECIFIED


def otel_span_to_span_record(span: "ReadableSpan") -> SpanRecord:
    """
    Convert a finished OpenTelemetry span.

    Root spans get ``INVALID_SPAN_ID`` as parent id. A span that was never
    ended is treated as having zero duration.
    """
    context = span.get_span_context()
    parent_span_id = format_span_id(span.parent.span_id) if span.parent is not None else INVALID_SPAN_ID

    start_time_ns = span.start_time or 0
    end_time_ns = span.end_time if span.end_time is not None else start_time_ns
    if span.end_time is None:
        logger.debug(f"Span {span.name} has no end time, exporting with zero duration")

    scope = span.instrumentation_scope
    events = tuple(
        TimedEvent(
            name=event.name,
            timestamp_ns=event.timestamp,
            attributes=dict(event.attributes or {}),
        )
        for event in span.events
    )

    return SpanRecord(
        name=span.name,
        trace_id=format_trace_id(context.trace_id),
        span_id=format_span_id(context.span_id),
        parent_span_id=parent_span_id,
        kind=otel_span_kind_to_wavefront(span.kind),
        start_time_ns=start_time_ns,
        end_time_ns=end_time_ns,
        attributes=dict(span.attributes or {}),
        events=events,
        instrumentation_name=scope.name if scope is not None else None,
        instrumentation_version=scope.version if scope is not None else None,
    )
