"""Pytest configuration and fixtures for Wavefront exporter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from wavefront_exporter.core.exporter import WavefrontSpanExporter
    from wavefront_exporter.senders import InMemorySender


@pytest.fixture
def in_memory_sender() -> InMemorySender:
    """Create a fresh InMemorySender for testing."""
    from wavefront_exporter.senders import InMemorySender

    return InMemorySender()


@pytest.fixture
def exporter(in_memory_sender: InMemorySender) -> WavefrontSpanExporter:
    """Exporter wired to the in-memory sender."""
    from wavefront_exporter.core.exporter import WavefrontSpanExporter

    return WavefrontSpanExporter(
        in_memory_sender,
        application="test-application",
        service="test-service",
    )
