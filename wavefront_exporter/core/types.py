"""Core types and data structures for the Wavefront exporter."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID


INVALID_SPAN_ID = "0" * 16
INVALID_TRACE_ID = "0" * 32

APPLICATION_TAG = "application"
SERVICE_TAG = "service"
INSTRUMENTATION_NAME_TAG = "instrumentation.name"
INSTRUMENTATION_VERSION_TAG = "instrumentation.version"

DEFAULT_APPLICATION = "(unknown application)"
DEFAULT_SERVICE = "(unknown service)"


class SpanKind(Enum):
    """OpenTelemetry-compatible span kinds."""

    UNSPECIFIED = 0
    INTERNAL = 1
    SERVER = 2
    CLIENT = 3
    PRODUCER = 4
    CONSUMER = 5


class ExportResultCode(Enum):
    """Aggregate outcome of one export call."""

    SUCCESS = 0
    FAILED_RETRYABLE = 1


@dataclass(frozen=True)
class TimedEvent:
    """An event recorded on a span."""

    name: str
    timestamp_ns: int
    attributes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SpanRecord:
    """
    A finished span as handed to the exporter.

    Identifiers are lowercase hex strings: 32 characters for the trace id and
    16 for span ids. A span without a parent carries ``INVALID_SPAN_ID``.
    """

    # Identity
    name: str
    trace_id: str
    span_id: str
    parent_span_id: str = INVALID_SPAN_ID
    kind: SpanKind = SpanKind.INTERNAL

    # Timing
    start_time_ns: int = 0
    end_time_ns: int = 0

    # Data capture
    attributes: Mapping[str, Any] = field(default_factory=dict)
    events: Sequence[TimedEvent] = field(default_factory=tuple)

    # Instrumentation scope
    instrumentation_name: Optional[str] = None
    instrumentation_version: Optional[str] = None


@dataclass(frozen=True)
class SpanLog:
    """A timestamped attribute snapshot attached to a delivered span."""

    timestamp: int
    fields: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DeliveryRecord:
    """Backend-shaped representation of one span, ready for a sender."""

    name: str
    start_millis: int
    duration_millis: int
    source: Optional[str]
    trace_id: UUID
    span_id: UUID
    parents: List[UUID] = field(default_factory=list)
    follows_from: List[UUID] = field(default_factory=list)
    tags: List[Tuple[str, str]] = field(default_factory=list)
    span_logs: List[SpanLog] = field(default_factory=list)


NANOS_PER_MILLI = 1_000_000


def nanos_to_millis(nanos: int) -> int:
    """Convert nanoseconds to milliseconds, truncating toward zero."""
    if nanos < 0:
        return -(-nanos // NANOS_PER_MILLI)
    return nanos // NANOS_PER_MILLI
