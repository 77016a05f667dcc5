"""Direct-mode client that reports spans to the Wavefront ingestion API.

Span lines and span-log lines are queued in memory and reported in batches
by a background thread, using gzip-compressed HTTP POSTs authenticated with an
API token.
"""

from __future__ import annotations

import asyncio
import gzip
import logging
import socket
import sys
import threading
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, override

import aiohttp

from .base import WavefrontSender
from .line_format import record_to_lines

if TYPE_CHECKING:
    from ..core.types import DeliveryRecord

logger = logging.getLogger(__name__)

REPORT_PATH = "/report"
TRACE_FORMAT = "trace"
SPAN_LOGS_FORMAT = "spanLogs"

DEFAULT_MAX_QUEUE_SIZE = 50_000
DEFAULT_BATCH_SIZE = 10_000
DEFAULT_FLUSH_INTERVAL_SECONDS = 5
DEFAULT_MESSAGE_SIZE_BYTES = sys.maxsize
DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class DirectClientConfig:
    """Configuration for the direct ingestion client."""

    server: str
    token: str
    max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE
    batch_size: int = DEFAULT_BATCH_SIZE
    flush_interval_seconds: int = DEFAULT_FLUSH_INTERVAL_SECONDS
    message_size_bytes: int = DEFAULT_MESSAGE_SIZE_BYTES
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


class DirectIngestionClient(WavefrontSender):
    """
    Reports spans straight to a Wavefront cluster.

    ``send_span`` only queues; network faults surface from ``flush`` and
    ``close`` as ``ConnectionError``, and from the background thread as log
    lines. A span that arrives while the queue is full is dropped.
    """

    def __init__(self, config: DirectClientConfig) -> None:
        self._config = config
        self._base_url = config.server.rstrip("/")
        self._default_source = socket.gethostname()
        self._span_queue: deque[str] = deque()
        self._span_log_queue: deque[str] = deque()
        self._lock = threading.Lock()
        self._flush_lock = threading.Lock()
        self._dropped_spans = 0
        self._failures = 0
        self._closed = False

        self._shutdown_event = threading.Event()
        self._flush_thread = threading.Thread(
            target=self._flush_loop,
            daemon=True,
            name="wavefront-direct-flusher",
        )
        self._flush_thread.start()
        logger.debug("DirectIngestionClient initialized")

    def __repr__(self) -> str:
        return f"DirectIngestionClient(url={self._base_url})"

    @property
    @override
    def name(self) -> str:
        return "direct"

    @property
    @override
    def client_id(self) -> str:
        return self._base_url

    @property
    @override
    def failure_count(self) -> int:
        return self._failures

    @property
    def config(self) -> DirectClientConfig:
        return self._config

    @property
    def dropped_span_count(self) -> int:
        return self._dropped_spans

    @property
    def queue_size(self) -> int:
        with self._lock:
            return len(self._span_queue)

    @override
    def send_span(self, record: "DeliveryRecord") -> None:
        span_line, logs_line = record_to_lines(record, self._default_source)

        with self._lock:
            if self._closed:
                raise ConnectionError(f"Direct client for {self._base_url} is closed")
            if len(self._span_queue) >= self._config.max_queue_size:
                self._dropped_spans += 1
                logger.warning(
                    f"Span queue full ({self._config.max_queue_size}), dropping span. "
                    f"Total dropped: {self._dropped_spans}"
                )
                return

            self._span_queue.append(span_line)
            if logs_line is not None:
                if len(self._span_log_queue) >= self._config.max_queue_size:
                    logger.warning("Span log queue full, dropping span logs")
                else:
                    self._span_log_queue.append(logs_line)

    @override
    def flush(self) -> None:
        """
        Report everything queued so far.

        Raises:
            ConnectionError: if any batch failed to be reported
        """
        with self._flush_lock:
            errors = self._flush_queue(self._span_queue, TRACE_FORMAT)
            errors += self._flush_queue(self._span_log_queue, SPAN_LOGS_FORMAT)

        if errors:
            raise ConnectionError(
                f"Failed to report {len(errors)} batch(es) to {self._base_url}: {errors[0]}"
            ) from errors[0]

    @override
    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._shutdown_event.set()
        if self._flush_thread is not threading.current_thread():
            self._flush_thread.join(timeout=self._config.timeout_seconds)

        self.flush()
        logger.debug(f"DirectIngestionClient closed. Dropped {self._dropped_spans} spans total.")

    def _flush_loop(self) -> None:
        """Background thread that periodically reports queued spans."""
        while not self._shutdown_event.wait(timeout=self._config.flush_interval_seconds):
            try:
                self.flush()
            except ConnectionError as e:
                logger.warning(f"Periodic report to Wavefront failed: {e}")

    def _take_batch(self, queue: deque[str]) -> list[str]:
        """Pop the next batch, bounded by line count and payload size."""
        batch: list[str] = []
        size = 0
        with self._lock:
            while queue and len(batch) < self._config.batch_size:
                line_size = len(queue[0].encode("utf-8"))
                if line_size > self._config.message_size_bytes:
                    queue.popleft()
                    self._dropped_spans += 1
                    logger.warning(
                        f"Dropping line of {line_size} bytes, larger than the "
                        f"{self._config.message_size_bytes} byte message limit"
                    )
                    continue
                if batch and size + line_size > self._config.message_size_bytes:
                    break
                batch.append(queue.popleft())
                size += line_size
        return batch

    def _flush_queue(self, queue: deque[str], data_format: str) -> list[Exception]:
        errors: list[Exception] = []
        while True:
            batch = self._take_batch(queue)
            if not batch:
                return errors
            try:
                self._run_report(data_format, batch)
                logger.debug(f"Reported {len(batch)} {data_format} lines to {self._base_url}")
            except OSError as e:
                self._failures += 1
                logger.error(f"Failed to report {len(batch)} {data_format} lines: {e}")
                errors.append(e)

    def _run_report(self, data_format: str, lines: list[str]) -> None:
        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(self._report(data_format, lines))
        finally:
            loop.close()

    async def _report(self, data_format: str, lines: list[str]) -> None:
        """POST one gzip-compressed batch to the ingestion endpoint."""
        url = f"{self._base_url}{REPORT_PATH}"
        body = gzip.compress("".join(lines).encode("utf-8"))
        headers = {
            "Authorization": f"Bearer {self._config.token}",
            "Content-Type": "application/octet-stream",
            "Content-Encoding": "gzip",
        }

        timeout = aiohttp.ClientTimeout(total=self._config.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    url, params={"f": data_format}, data=body, headers=headers
                ) as response:
                    if response.status >= 300:
                        error_text = await response.text()
                        raise ConnectionError(
                            f"Report failed (status {response.status}): {error_text}"
                        )
        except aiohttp.ClientError as e:
            raise ConnectionError(f"Report to {url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TimeoutError(f"Report to {url} timed out") from e
