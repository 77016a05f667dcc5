"""OpenTelemetry span exporter for Wavefront."""

from .core import (
    ClosedExporterError,
    ConfigProvider,
    ConfigurationError,
    DeliveryRecord,
    ExporterBuilder,
    ExportResultCode,
    InvalidIdentifier,
    MappingConfigProvider,
    SpanLog,
    SpanRecord,
    TimedEvent,
    WavefrontSpanExporter,
    exporter_from_config,
)
from .core.logger import LogLevel, configure_logger, get_log_level, set_log_level
from .senders import (
    DirectClientConfig,
    DirectIngestionClient,
    InMemorySender,
    ProxyClient,
    ProxyClientConfig,
    WavefrontSender,
)
from .version import SDK_VERSION

__version__ = SDK_VERSION

__all__ = [
    # Exporter
    "WavefrontSpanExporter",
    "ExporterBuilder",
    "ExportResultCode",
    "exporter_from_config",
    "ConfigProvider",
    "MappingConfigProvider",
    # Types
    "SpanRecord",
    "TimedEvent",
    "DeliveryRecord",
    "SpanLog",
    # Errors
    "ConfigurationError",
    "InvalidIdentifier",
    "ClosedExporterError",
    # Logger
    "LogLevel",
    "configure_logger",
    "set_log_level",
    "get_log_level",
    # Senders
    "WavefrontSender",
    "ProxyClient",
    "ProxyClientConfig",
    "DirectIngestionClient",
    "DirectClientConfig",
    "InMemorySender",
]
