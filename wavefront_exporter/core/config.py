"""Exporter configuration and the builder that wires an exporter.

The transport is a tagged union: an ``ExporterConfig`` carries either a
``ProxyClientConfig`` (relay mode) or a ``DirectClientConfig`` (direct mode),
never both.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from ..senders.direct import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_QUEUE_SIZE,
    DEFAULT_MESSAGE_SIZE_BYTES,
    DirectClientConfig,
    DirectIngestionClient,
)
from ..senders.proxy import (
    DEFAULT_METRICS_PORT,
    DEFAULT_TRACING_PORT,
    ProxyClient,
    ProxyClientConfig,
    SocketFactory,
)
from .errors import ConfigurationError
from .types import DEFAULT_APPLICATION, DEFAULT_SERVICE

if TYPE_CHECKING:
    from ..senders.base import WavefrontSender
    from .exporter import WavefrontSpanExporter

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL_SECONDS = 5

TransportConfig = Union[ProxyClientConfig, DirectClientConfig]


@dataclass(frozen=True)
class ExporterConfig:
    """Validated, immutable exporter settings."""

    transport: TransportConfig
    application: str = DEFAULT_APPLICATION
    service: str = DEFAULT_SERVICE
    host: str | None = None
    """Span source; ``None`` lets the sender use the local hostname."""

    @property
    def is_direct(self) -> bool:
        return isinstance(self.transport, DirectClientConfig)

    @property
    def flush_interval_seconds(self) -> int:
        return self.transport.flush_interval_seconds


def create_sender(config: ExporterConfig) -> "WavefrontSender":
    """Construct the sender for the configured transport."""
    transport = config.transport
    if isinstance(transport, ProxyClientConfig):
        return ProxyClient(transport)
    if isinstance(transport, DirectClientConfig):
        return DirectIngestionClient(transport)
    raise ConfigurationError(f"Unsupported transport: {type(transport).__name__}")


def _require_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"Setting {name} must be a positive integer, got {value!r}")
    return value


def _require_port(name: str, value: int) -> int:
    _require_positive(name, value)
    if value > 65535:
        raise ConfigurationError(f"Setting {name} must be a valid port, got {value}")
    return value


class ProxyClientBuilder:
    """Relay-mode settings. Returned by ``ExporterBuilder.proxy_client``."""

    def __init__(self, host: str, parent: "ExporterBuilder") -> None:
        self._parent = parent
        self.host = host
        self.metrics_port_value = DEFAULT_METRICS_PORT
        self.distribution_port_value: int | None = None
        self.tracing_port_value = DEFAULT_TRACING_PORT
        self.socket_factory_value: SocketFactory | None = None

    def metrics_port(self, metrics_port: int) -> ProxyClientBuilder:
        self._parent._check_mutable()
        self.metrics_port_value = metrics_port
        return self

    def distribution_port(self, distribution_port: int) -> ProxyClientBuilder:
        self._parent._check_mutable()
        self.distribution_port_value = distribution_port
        return self

    def tracing_port(self, tracing_port: int) -> ProxyClientBuilder:
        self._parent._check_mutable()
        self.tracing_port_value = tracing_port
        return self

    def socket_factory(self, socket_factory: SocketFactory) -> ProxyClientBuilder:
        self._parent._check_mutable()
        self.socket_factory_value = socket_factory
        return self

    def flush_interval_seconds(self, flush_interval_seconds: int) -> ProxyClientBuilder:
        self._parent.flush_interval_seconds(flush_interval_seconds)
        return self

    def to_transport(self, flush_interval_seconds: int) -> ProxyClientConfig:
        if not self.host or not self.host.strip():
            raise ConfigurationError("Proxy host must not be blank")
        if self.distribution_port_value is not None:
            _require_port("distribution port", self.distribution_port_value)
        return ProxyClientConfig(
            host=self.host,
            metrics_port=_require_port("metrics port", self.metrics_port_value),
            distribution_port=self.distribution_port_value,
            tracing_port=_require_port("tracing port", self.tracing_port_value),
            flush_interval_seconds=flush_interval_seconds,
            socket_factory=self.socket_factory_value,
        )

    def build(self) -> "WavefrontSpanExporter":
        return self._parent.build()


class DirectClientBuilder:
    """Direct-mode settings. Returned by ``ExporterBuilder.direct_client``."""

    def __init__(self, url: str, token: str | None, parent: "ExporterBuilder") -> None:
        self._parent = parent
        self.url = url
        self.token = token
        self.max_queue_size_value = DEFAULT_MAX_QUEUE_SIZE
        self.batch_size_value = DEFAULT_BATCH_SIZE
        self.message_size_bytes_value = DEFAULT_MESSAGE_SIZE_BYTES

    def max_queue_size(self, max_queue_size: int) -> DirectClientBuilder:
        self._parent._check_mutable()
        self.max_queue_size_value = max_queue_size
        return self

    def batch_size(self, batch_size: int) -> DirectClientBuilder:
        self._parent._check_mutable()
        self.batch_size_value = batch_size
        return self

    def message_size_bytes(self, message_size_bytes: int) -> DirectClientBuilder:
        self._parent._check_mutable()
        self.message_size_bytes_value = message_size_bytes
        return self

    def flush_interval_seconds(self, flush_interval_seconds: int) -> DirectClientBuilder:
        self._parent.flush_interval_seconds(flush_interval_seconds)
        return self

    def to_transport(self, flush_interval_seconds: int) -> DirectClientConfig:
        if not self.url or not self.url.strip():
            raise ConfigurationError("Wavefront URL must not be blank")
        if not self.token or not self.token.strip():
            raise ConfigurationError("An API token must be specified for direct connections")
        return DirectClientConfig(
            server=self.url,
            token=self.token,
            max_queue_size=_require_positive("max queue size", self.max_queue_size_value),
            batch_size=_require_positive("batch size", self.batch_size_value),
            flush_interval_seconds=flush_interval_seconds,
            message_size_bytes=_require_positive("message size", self.message_size_bytes_value),
        )

    def build(self) -> "WavefrontSpanExporter":
        return self._parent.build()


class ExporterBuilder:
    """
    Builds a ``WavefrontSpanExporter``.

    Exactly one of ``proxy_client`` or ``direct_client`` must be selected.
    Both or neither fails with ``ConfigurationError`` when building. Once
    built, the builder is frozen: ``build`` keeps returning the same exporter
    and any further setter call raises ``ConfigurationError``.

    Example::

        exporter = (
            WavefrontSpanExporter.builder()
            .application("shop")
            .service("checkout")
            .proxy_client("localhost")
            .tracing_port(30001)
            .build()
        )
    """

    def __init__(self) -> None:
        self._application = DEFAULT_APPLICATION
        self._service = DEFAULT_SERVICE
        self._host: str | None = None
        self._flush_interval_seconds = DEFAULT_FLUSH_INTERVAL_SECONDS
        self._proxy: ProxyClientBuilder | None = None
        self._direct: DirectClientBuilder | None = None
        self._exporter: WavefrontSpanExporter | None = None

    def _check_mutable(self) -> None:
        if self._exporter is not None:
            raise ConfigurationError("Exporter already built, configuration is frozen")

    def application(self, application: str) -> ExporterBuilder:
        self._check_mutable()
        self._application = application
        return self

    def service(self, service: str) -> ExporterBuilder:
        self._check_mutable()
        self._service = service
        return self

    def host(self, host: str | None) -> ExporterBuilder:
        self._check_mutable()
        self._host = host
        return self

    def flush_interval_seconds(self, flush_interval_seconds: int) -> ExporterBuilder:
        self._check_mutable()
        self._flush_interval_seconds = flush_interval_seconds
        return self

    def proxy_client(self, host: str) -> ProxyClientBuilder:
        """Select relay mode, forwarding spans to the proxy on ``host``."""
        self._check_mutable()
        self._proxy = ProxyClientBuilder(host, self)
        return self._proxy

    def direct_client(self, url: str, token: str | None) -> DirectClientBuilder:
        """Select direct mode, reporting to ``url`` with API ``token``."""
        self._check_mutable()
        self._direct = DirectClientBuilder(url, token, self)
        return self._direct

    def to_config(self) -> ExporterConfig:
        """
        Validate the collected settings.

        Raises:
            ConfigurationError: if the settings are missing or contradictory
        """
        if self._proxy is not None and self._direct is not None:
            raise ConfigurationError("Proxy and direct connections are mutually exclusive")
        if self._proxy is None and self._direct is None:
            raise ConfigurationError("Either a proxy or a direct connection must be specified")

        flush_interval = _require_positive("flush interval", self._flush_interval_seconds)
        mode = self._proxy if self._proxy is not None else self._direct
        assert mode is not None
        return ExporterConfig(
            transport=mode.to_transport(flush_interval),
            application=self._application,
            service=self._service,
            host=self._host,
        )

    def build(self) -> "WavefrontSpanExporter":
        if self._exporter is not None:
            return self._exporter

        from .exporter import WavefrontSpanExporter

        config = self.to_config()
        sender = create_sender(config)
        self._exporter = WavefrontSpanExporter(
            sender,
            application=config.application,
            service=config.service,
            host=config.host,
        )
        logger.debug(f"Built Wavefront exporter using {sender.name} sender for {sender.client_id}")
        return self._exporter
