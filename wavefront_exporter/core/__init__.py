"""Core module for the Wavefront exporter."""

from .attributes import attribute_to_string, extract_span_logs, extract_tags
from .config import (
    DirectClientBuilder,
    ExporterBuilder,
    ExporterConfig,
    ProxyClientBuilder,
    create_sender,
)
from .errors import (
    ClosedExporterError,
    ConfigurationError,
    InvalidIdentifier,
    WavefrontExporterError,
)
from .exporter import WavefrontSpanExporter
from .factory import ConfigProvider, MappingConfigProvider, exporter_from_config
from .identifiers import make_uuid, parse_hex
from .otel_converter import otel_span_to_span_record
from .session import ExportSession, SpanOutcome, SpanState
from .translator import SpanTranslator, translate_span
from .types import (
    DeliveryRecord,
    ExportResultCode,
    SpanKind,
    SpanLog,
    SpanRecord,
    TimedEvent,
)

__all__ = [
    # Exporter
    "WavefrontSpanExporter",
    "ExportSession",
    "SpanOutcome",
    "SpanState",
    # Config
    "ExporterBuilder",
    "ExporterConfig",
    "ProxyClientBuilder",
    "DirectClientBuilder",
    "create_sender",
    "ConfigProvider",
    "MappingConfigProvider",
    "exporter_from_config",
    # Translation
    "SpanTranslator",
    "translate_span",
    "attribute_to_string",
    "extract_tags",
    "extract_span_logs",
    "make_uuid",
    "parse_hex",
    "otel_span_to_span_record",
    # Types
    "DeliveryRecord",
    "ExportResultCode",
    "SpanKind",
    "SpanLog",
    "SpanRecord",
    "TimedEvent",
    # Errors
    "WavefrontExporterError",
    "ConfigurationError",
    "InvalidIdentifier",
    "ClosedExporterError",
]
