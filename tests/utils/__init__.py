"""Test utilities for the Wavefront exporter."""

from .test_helpers import TEST_START_NS, TEST_TRACE_ID, LineServer, create_test_record, create_test_span

__all__ = [
    "create_test_span",
    "create_test_record",
    "LineServer",
    "TEST_TRACE_ID",
    "TEST_START_NS",
]
