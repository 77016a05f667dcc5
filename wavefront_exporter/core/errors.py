"""Exception types raised by the Wavefront exporter.

Transport faults are not wrapped: senders raise the builtin
``ConnectionError`` / ``TimeoutError`` / ``OSError`` family, and the export
session classifies anything in that family as retryable.
"""


class WavefrontExporterError(Exception):
    """Base class for all exporter errors."""


class ConfigurationError(WavefrontExporterError):
    """Raised when exporter settings are missing or contradictory.

    Detected while building the exporter and never retried.
    """


class InvalidIdentifier(WavefrontExporterError, ValueError):
    """Raised when a trace or span id is not a valid hex identifier."""

    def __init__(self, identifier: str, reason: str) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Invalid identifier {identifier!r}: {reason}")


class ClosedExporterError(WavefrontExporterError):
    """Raised when spans are exported after the exporter was shut down."""
