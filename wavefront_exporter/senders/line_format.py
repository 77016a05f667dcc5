"""Wavefront line protocol for spans and span logs."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Iterable
from uuid import UUID

if TYPE_CHECKING:
    from ..core.types import DeliveryRecord, SpanLog

SPAN_LOGS_TAG = "_spanLogs"


def sanitize_value(value: str) -> str:
    """Quote a name or tag value, escaping quotes and newlines."""
    return '"' + value.replace('"', '\\"').replace("\n", "\\n") + '"'


def _require(value: str | None, what: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{what} cannot be blank")
    return value


def span_to_line(record: "DeliveryRecord", default_source: str) -> str:
    """
    Format a delivery record as a single Wavefront span line.

    Raises:
        ValueError: if the span name, a tag key or a tag value is blank
    """
    name = _require(record.name, "Span name")
    source = record.source or default_source

    parts = [
        sanitize_value(name),
        "source=" + sanitize_value(source),
        f"traceId={record.trace_id}",
        f"spanId={record.span_id}",
    ]
    parts.extend(f"parent={parent}" for parent in record.parents)
    parts.extend(f"followsFrom={follows}" for follows in record.follows_from)

    tags = list(record.tags)
    if record.span_logs:
        tags.append((SPAN_LOGS_TAG, "true"))
    for key, value in tags:
        _require(key, "Tag keys")
        _require(value, f"Tag value for {key}")
        parts.append(f"{sanitize_value(key)}={sanitize_value(value)}")

    parts.append(str(record.start_millis))
    parts.append(str(record.duration_millis))
    return " ".join(parts) + "\n"


def _logs_to_json(span_logs: Iterable["SpanLog"]) -> list[dict]:
    return [{"timestamp": log.timestamp, "fields": dict(log.fields)} for log in span_logs]


def span_logs_to_line(
    trace_id: UUID,
    span_id: UUID,
    span_logs: Iterable["SpanLog"],
    span_line: str | None = None,
) -> str:
    """Format the span logs of one span as a JSON line."""
    payload: dict = {
        "traceId": str(trace_id),
        "spanId": str(span_id),
        "logs": _logs_to_json(span_logs),
    }
    if span_line is not None:
        payload["span"] = span_line.rstrip("\n")
    return json.dumps(payload) + "\n"


def record_to_lines(record: "DeliveryRecord", default_source: str) -> tuple[str, str | None]:
    """Return the span line and, when the span has logs, its span-log line."""
    span_line = span_to_line(record, default_source)
    if not record.span_logs:
        return span_line, None
    return span_line, span_logs_to_line(record.trace_id, record.span_id, record.span_logs, span_line)
