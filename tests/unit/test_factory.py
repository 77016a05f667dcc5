"""Tests for factory.py - exporter creation from key/value settings."""

from __future__ import annotations

import pytest

from wavefront_exporter.core.errors import ConfigurationError
from wavefront_exporter.core.factory import MappingConfigProvider, exporter_from_config
from wavefront_exporter.senders.direct import DirectIngestionClient
from wavefront_exporter.senders.proxy import ProxyClient
from tests.utils import LineServer, create_test_span


class TestMappingConfigProvider:
    """Tests for MappingConfigProvider."""

    def test_returns_values_and_defaults(self):
        provider = MappingConfigProvider({"a": "1", "b": "text"})

        assert provider.get_string("b") == "text"
        assert provider.get_string("missing") is None
        assert provider.get_string("missing", "fallback") == "fallback"
        assert provider.get_int("a", 0) == 1
        assert provider.get_int("missing", 7) == 7

    def test_applies_prefix(self):
        provider = MappingConfigProvider({"exporter.wavefront.proxy": "localhost"}, prefix="exporter")

        assert provider.get_string("wavefront.proxy") == "localhost"
        assert provider.get_string("exporter.wavefront.proxy") is None

    def test_rejects_non_integer_values(self):
        provider = MappingConfigProvider({"wavefront.traceport": "thirty"})

        with pytest.raises(ConfigurationError, match="wavefront.traceport"):
            provider.get_int("wavefront.traceport", 30000)


class TestExporterFromConfig:
    """Tests for exporter_from_config function."""

    def test_creates_proxy_exporter(self):
        exporter = exporter_from_config(
            {
                "wavefront.proxy": "localhost",
                "wavefront.traceport": "50000",
                "wavefront.metricsport": "2879",
                "wavefront.distributionport": "40000",
                "wavefront.flushinterval": "3",
                "application": "test-application",
                "service": "test-service",
            }
        )

        try:
            assert isinstance(exporter.sender, ProxyClient)
            transport = exporter.sender.config
            assert transport.tracing_port == 50000
            assert transport.metrics_port == 2879
            assert transport.distribution_port == 40000
            assert transport.flush_interval_seconds == 3
            assert exporter.application == "test-application"
            assert exporter.service == "test-service"
        finally:
            exporter.shutdown()

    def test_uses_defaults(self):
        exporter = exporter_from_config({"wavefront.proxy": "localhost"})

        try:
            transport = exporter.sender.config
            assert transport.tracing_port == 30000
            assert transport.metrics_port == 2878
            assert transport.flush_interval_seconds == 5
            assert exporter.application == "(unknown application)"
            assert exporter.service == "(unknown service)"
            assert exporter.host is None
        finally:
            exporter.shutdown()

    def test_creates_direct_exporter(self):
        exporter = exporter_from_config(
            {
                "wavefront.url": "https://example.wavefront.com",
                "wavefront.token": "secret",
                "wavefront.batchsize": "100",
                "wavefront.host": "web-01",
            }
        )

        try:
            assert isinstance(exporter.sender, DirectIngestionClient)
            assert exporter.sender.config.batch_size == 100
            assert exporter.sender.config.token == "secret"
            assert exporter.host == "web-01"
        finally:
            exporter.shutdown()

    def test_accepts_config_provider(self):
        provider = MappingConfigProvider({"exporter.wavefront.proxy": "localhost"}, prefix="exporter")

        exporter = exporter_from_config(provider)

        try:
            assert isinstance(exporter.sender, ProxyClient)
        finally:
            exporter.shutdown()

    def test_proxy_and_url_are_mutually_exclusive(self):
        with pytest.raises(ConfigurationError, match="mutually exclusive"):
            exporter_from_config(
                {"wavefront.proxy": "localhost", "wavefront.url": "https://example.wavefront.com"}
            )

    def test_direct_requires_token(self):
        with pytest.raises(ConfigurationError, match="wavefront.token"):
            exporter_from_config({"wavefront.url": "https://example.wavefront.com"})

    def test_requires_proxy_or_url(self):
        with pytest.raises(ConfigurationError, match="Either"):
            exporter_from_config({"application": "app"})


class TestExporterFromConfigReporting:
    """End-to-end relay reporting against a local listener."""

    def test_reports_spans_to_proxy(self):
        with LineServer() as server:
            exporter = exporter_from_config(
                {
                    "wavefront.proxy": "127.0.0.1",
                    "wavefront.traceport": str(server.port),
                    "application": "test-application",
                    "service": "test-service",
                }
            )
            exporter.export_records(
                [
                    create_test_span(name="client.span", span_id="0000000000000000"),
                    create_test_span(name="server.span", span_id="1111111111111111"),
                ]
            )
            exporter.shutdown()
            lines = server.wait()

        assert len(lines) == 2
        assert lines[0].startswith('"client.span" source=')
        assert lines[1].startswith('"server.span" source=')
        assert '"application"="test-application"' in lines[0]
        assert "spanId=00000000-0000-0000-1111-111111111111" in lines[1]
