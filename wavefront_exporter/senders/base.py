"""Base interface for delivery clients that ship spans to Wavefront."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.types import DeliveryRecord


class WavefrontSender(ABC):
    """
    A client that transmits delivery records to Wavefront.

    Implementations own their buffering, retry and network behavior and must
    tolerate ``send_span`` being called from several threads.

    Transport faults are raised as ``OSError`` subclasses (``ConnectionError``,
    ``TimeoutError``). Anything else raised by ``send_span`` is treated as an
    unexpected fault by the exporter.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name of the transport, used in log lines."""

    @property
    @abstractmethod
    def client_id(self) -> str:
        """Identifier of the endpoint this client delivers to."""

    @property
    def failure_count(self) -> int:
        """Number of transport failures seen so far."""
        return 0

    @abstractmethod
    def send_span(self, record: "DeliveryRecord") -> None:
        """Queue or transmit a single span."""

    @abstractmethod
    def flush(self) -> None:
        """Transmit anything buffered but not yet sent."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection and background resources."""
