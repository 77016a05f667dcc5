"""Mapping of span attributes onto Wavefront tags and span logs."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .types import (
    APPLICATION_TAG,
    INSTRUMENTATION_NAME_TAG,
    INSTRUMENTATION_VERSION_TAG,
    SERVICE_TAG,
    SpanLog,
    SpanRecord,
    nanos_to_millis,
)

logger = logging.getLogger(__name__)


def attribute_to_string(value: Any) -> str | None:
    """
    Render an attribute value as a Wavefront tag value.

    Only ``int``, ``bool``, ``float`` and ``str`` are recognized. Any other
    kind is logged and skipped by returning ``None``.
    """
    # bool is a subclass of int, so it has to be matched first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return value

    logger.warning(f"Unknown attribute type: {type(value).__name__}. Skipping!")
    return None


def attributes_to_fields(attributes: Mapping[str, Any]) -> dict[str, str]:
    """Convert an attribute mapping, omitting values of unknown kind."""
    fields: dict[str, str] = {}
    for key, value in attributes.items():
        rendered = attribute_to_string(value)
        if rendered is not None:
            fields[key] = rendered
    return fields


def extract_tags(span: SpanRecord, application: str, service: str) -> list[tuple[str, str]]:
    """
    Build the ordered tag list for a span.

    ``application`` and ``service`` always come first, followed by the
    instrumentation scope tags when known, then one tag per attribute.
    """
    tags: list[tuple[str, str]] = [
        (APPLICATION_TAG, application),
        (SERVICE_TAG, service),
    ]
    if span.instrumentation_name is not None:
        tags.append((INSTRUMENTATION_NAME_TAG, span.instrumentation_name))
    if span.instrumentation_version is not None:
        tags.append((INSTRUMENTATION_VERSION_TAG, span.instrumentation_version))

    tags.extend(attributes_to_fields(span.attributes).items())
    return tags


def extract_span_logs(span: SpanRecord) -> list[SpanLog]:
    """One span log per event on the span."""
    # Every log is stamped with the span start, not the event time.
    start_millis = nanos_to_millis(span.start_time_ns)
    return [
        SpanLog(timestamp=start_millis, fields=attributes_to_fields(event.attributes))
        for event in span.events
    ]
