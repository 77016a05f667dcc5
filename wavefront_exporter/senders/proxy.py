"""Relay-mode client that forwards spans to a local Wavefront proxy.

Spans are written as text lines to the proxy's tracing port over TCP. Writes
go through a buffered stream which a background thread flushes at a fixed
interval.
"""

from __future__ import annotations

import logging
import socket
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO, Callable, override

from .base import WavefrontSender
from .line_format import record_to_lines

if TYPE_CHECKING:
    from ..core.types import DeliveryRecord

logger = logging.getLogger(__name__)

DEFAULT_METRICS_PORT = 2878
DEFAULT_TRACING_PORT = 30000
DEFAULT_FLUSH_INTERVAL_SECONDS = 5
DEFAULT_CONNECT_TIMEOUT = 5.0

SocketFactory = Callable[[str, int], socket.socket]


def default_socket_factory(host: str, port: int) -> socket.socket:
    """Open a TCP connection to ``host:port``."""
    return socket.create_connection((host, port), timeout=DEFAULT_CONNECT_TIMEOUT)


@dataclass(frozen=True)
class ProxyClientConfig:
    """Configuration for the relay (proxy) client."""

    host: str
    metrics_port: int = DEFAULT_METRICS_PORT
    distribution_port: int | None = None
    tracing_port: int = DEFAULT_TRACING_PORT
    flush_interval_seconds: int = DEFAULT_FLUSH_INTERVAL_SECONDS
    socket_factory: SocketFactory | None = None
    """Called as ``factory(host, port)``; defaults to a plain TCP connection."""


class ProxyClient(WavefrontSender):
    """
    Sends spans to a Wavefront proxy.

    The connection is opened on first use and re-opened on the next send after
    a socket error. Socket errors are raised to the caller as
    ``ConnectionError``.
    """

    def __init__(self, config: ProxyClientConfig) -> None:
        self._config = config
        self._socket_factory = config.socket_factory or default_socket_factory
        self._default_source = socket.gethostname()
        self._socket: socket.socket | None = None
        self._writer: BinaryIO | None = None
        self._lock = threading.Lock()
        self._failures = 0
        self._closed = False

        self._shutdown_event = threading.Event()
        self._flush_thread: threading.Thread | None = None

    def __repr__(self) -> str:
        return f"ProxyClient(client_id={self.client_id})"

    @property
    @override
    def name(self) -> str:
        return "proxy"

    @property
    @override
    def client_id(self) -> str:
        return f"{self._config.host}:{self._config.tracing_port}"

    @property
    @override
    def failure_count(self) -> int:
        return self._failures

    @property
    def config(self) -> ProxyClientConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._writer is not None

    @override
    def send_span(self, record: "DeliveryRecord") -> None:
        span_line, logs_line = record_to_lines(record, self._default_source)
        data = span_line.encode("utf-8")
        if logs_line is not None:
            data += logs_line.encode("utf-8")

        with self._lock:
            if self._closed:
                raise ConnectionError(f"Proxy client {self.client_id} is closed")
            try:
                writer = self._ensure_connected()
                writer.write(data)
            except OSError as e:
                self._handle_socket_error()
                raise ConnectionError(f"Failed to send span to proxy {self.client_id}: {e}") from e

    @override
    def flush(self) -> None:
        with self._lock:
            self._flush_locked()

    @override
    def close(self) -> None:
        self._shutdown_event.set()
        if self._flush_thread is not None and self._flush_thread is not threading.current_thread():
            self._flush_thread.join(timeout=self._config.flush_interval_seconds + 1)

        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                self._flush_locked()
            finally:
                self._disconnect()
        logger.debug(f"Proxy client {self.client_id} closed")

    def _flush_locked(self) -> None:
        if self._writer is None:
            return
        try:
            self._writer.flush()
        except OSError as e:
            self._handle_socket_error()
            raise ConnectionError(f"Failed to flush spans to proxy {self.client_id}: {e}") from e

    def _ensure_connected(self) -> BinaryIO:
        if self._writer is not None:
            return self._writer

        logger.debug(f"Connecting to Wavefront proxy at {self.client_id}")
        sock = self._socket_factory(self._config.host, self._config.tracing_port)
        self._socket = sock
        self._writer = sock.makefile("wb")
        self._start_flush_thread()
        return self._writer

    def _handle_socket_error(self) -> None:
        self._failures += 1
        self._disconnect()

    def _disconnect(self) -> None:
        writer, sock = self._writer, self._socket
        self._writer = None
        self._socket = None
        if writer is not None:
            try:
                writer.close()
            except OSError:
                logger.debug(f"Ignoring error while closing writer for {self.client_id}")
        if sock is not None:
            try:
                sock.close()
            except OSError:
                logger.debug(f"Ignoring error while closing socket for {self.client_id}")

    def _start_flush_thread(self) -> None:
        if self._flush_thread is not None and self._flush_thread.is_alive():
            return
        self._flush_thread = threading.Thread(
            target=self._flush_loop,
            daemon=True,
            name="wavefront-proxy-flusher",
        )
        self._flush_thread.start()

    def _flush_loop(self) -> None:
        """Background thread that periodically flushes the buffered stream."""
        while not self._shutdown_event.wait(timeout=self._config.flush_interval_seconds):
            try:
                self.flush()
            except ConnectionError as e:
                logger.warning(f"Periodic flush to proxy failed: {e}")
