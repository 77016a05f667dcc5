"""Build an exporter from externally supplied key/value settings.

Keys (all optional unless noted):

- ``wavefront.proxy``: proxy host, selects relay mode
- ``wavefront.url``: ingestion URL, selects direct mode
- ``wavefront.token``: API token, required with ``wavefront.url``
- ``wavefront.traceport`` / ``wavefront.metricsport`` /
  ``wavefront.distributionport``: proxy ports
- ``wavefront.flushinterval``: flush interval in seconds
- ``wavefront.maxqueuesize`` / ``wavefront.batchsize`` /
  ``wavefront.messagesizebytes``: direct client limits
- ``wavefront.host``: span source
- ``application`` / ``service``: standard tags
"""

from __future__ import annotations

import logging
from typing import Mapping, Protocol, runtime_checkable

from ..senders.direct import DEFAULT_BATCH_SIZE, DEFAULT_MAX_QUEUE_SIZE, DEFAULT_MESSAGE_SIZE_BYTES
from ..senders.proxy import DEFAULT_METRICS_PORT, DEFAULT_TRACING_PORT
from .config import DEFAULT_FLUSH_INTERVAL_SECONDS, ExporterBuilder
from .errors import ConfigurationError
from .exporter import WavefrontSpanExporter
from .types import DEFAULT_APPLICATION, DEFAULT_SERVICE

logger = logging.getLogger(__name__)

PROXY = "wavefront.proxy"
WAVEFRONT_URL = "wavefront.url"
TOKEN = "wavefront.token"
TRACE_PORT = "wavefront.traceport"
METRICS_PORT = "wavefront.metricsport"
DISTRIBUTION_PORT = "wavefront.distributionport"
FLUSH_INTERVAL = "wavefront.flushinterval"
MAX_QUEUE_SIZE = "wavefront.maxqueuesize"
BATCH_SIZE = "wavefront.batchsize"
MESSAGE_SIZE_BYTES = "wavefront.messagesizebytes"
HOST = "wavefront.host"
APPLICATION = "application"
SERVICE = "service"


@runtime_checkable
class ConfigProvider(Protocol):
    """Read-only source of string settings."""

    def get_string(self, key: str, default: str | None = None) -> str | None: ...

    def get_int(self, key: str, default: int) -> int: ...


class MappingConfigProvider:
    """
    ``ConfigProvider`` over a plain mapping.

    With a ``prefix``, key ``k`` is looked up as ``"{prefix}.{k}"``.
    """

    def __init__(self, values: Mapping[str, str], prefix: str | None = None) -> None:
        self._values = dict(values)
        self._prefix = prefix

    def __repr__(self) -> str:
        return f"MappingConfigProvider(keys={len(self._values)}, prefix={self._prefix!r})"

    def _key(self, key: str) -> str:
        return f"{self._prefix}.{key}" if self._prefix else key

    def get_string(self, key: str, default: str | None = None) -> str | None:
        value = self._values.get(self._key(key))
        return value if value is not None else default

    def get_int(self, key: str, default: int) -> int:
        value = self._values.get(self._key(key))
        if value is None:
            return default
        try:
            return int(str(value).strip())
        except ValueError:
            raise ConfigurationError(f"Setting {key} must be an integer, got {value!r}") from None


def exporter_from_config(config: ConfigProvider | Mapping[str, str]) -> WavefrontSpanExporter:
    """
    Create an exporter from key/value settings.

    Raises:
        ConfigurationError: if both or neither of ``wavefront.proxy`` and
            ``wavefront.url`` are set, if ``wavefront.token`` is missing in
            direct mode, or if a numeric setting is invalid
    """
    provider = config if isinstance(config, ConfigProvider) else MappingConfigProvider(config)

    builder = (
        ExporterBuilder()
        .application(provider.get_string(APPLICATION, DEFAULT_APPLICATION))
        .service(provider.get_string(SERVICE, DEFAULT_SERVICE))
        .host(provider.get_string(HOST))
        .flush_interval_seconds(provider.get_int(FLUSH_INTERVAL, DEFAULT_FLUSH_INTERVAL_SECONDS))
    )

    proxy = provider.get_string(PROXY)
    url = provider.get_string(WAVEFRONT_URL)

    if proxy is not None:
        if url is not None:
            raise ConfigurationError(f"Settings {PROXY} and {WAVEFRONT_URL} are mutually exclusive")
        proxy_builder = (
            builder.proxy_client(proxy)
            .metrics_port(provider.get_int(METRICS_PORT, DEFAULT_METRICS_PORT))
            .tracing_port(provider.get_int(TRACE_PORT, DEFAULT_TRACING_PORT))
        )
        if provider.get_string(DISTRIBUTION_PORT) is not None:
            proxy_builder.distribution_port(provider.get_int(DISTRIBUTION_PORT, 0))
        logger.debug(f"Configuring Wavefront proxy exporter for {proxy}")
        return proxy_builder.build()

    if url is not None:
        token = provider.get_string(TOKEN)
        if token is None:
            raise ConfigurationError(f"Setting {TOKEN} must be specified for direct connections")
        logger.debug(f"Configuring Wavefront direct exporter for {url}")
        return (
            builder.direct_client(url, token)
            .max_queue_size(provider.get_int(MAX_QUEUE_SIZE, DEFAULT_MAX_QUEUE_SIZE))
            .batch_size(provider.get_int(BATCH_SIZE, DEFAULT_BATCH_SIZE))
            .message_size_bytes(provider.get_int(MESSAGE_SIZE_BYTES, DEFAULT_MESSAGE_SIZE_BYTES))
            .build()
        )

    raise ConfigurationError(f"Either {PROXY} or {WAVEFRONT_URL} needs to be specified")
