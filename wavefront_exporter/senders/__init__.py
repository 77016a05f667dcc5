"""Delivery clients for the Wavefront exporter."""

from .base import WavefrontSender
from .direct import DirectClientConfig, DirectIngestionClient
from .memory import InMemorySender
from .proxy import ProxyClient, ProxyClientConfig, default_socket_factory

__all__ = [
    # Base
    "WavefrontSender",
    # Senders
    "ProxyClient",
    "ProxyClientConfig",
    "DirectIngestionClient",
    "DirectClientConfig",
    "InMemorySender",
    # Helpers
    "default_socket_factory",
]
