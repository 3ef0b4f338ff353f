"""Unit tests for src/core/observability.py."""

import pytest
from pytest_mock import MockerFixture

from src.core.config import Settings
from src.core.context import RequestContext
from src.core.observability import (
    LoguruSpanExporter,
    add_correlation_id_to_span,
    get_span_exporter,
    setup_tracing,
)


def _settings(**observability: object) -> Settings:
    return Settings(_env_file=None, observability_config=observability)


@pytest.mark.unit
class TestSpanExporters:
    """Exporter selection."""

    def test_console_uses_loguru(self) -> None:
        exporter = get_span_exporter(_settings(exporter_type="console"))

        assert isinstance(exporter, LoguruSpanExporter)

    def test_none_disables_export(self) -> None:
        assert get_span_exporter(_settings(exporter_type="none")) is None

    def test_otlp_uses_configured_endpoint(self, mocker: MockerFixture) -> None:
        otlp = mocker.patch("src.core.observability.OTLPSpanExporter")

        get_span_exporter(
            _settings(exporter_type="otlp", exporter_endpoint="http://collector:4317")
        )

        otlp.assert_called_once_with(endpoint="http://collector:4317", insecure=True)


@pytest.mark.unit
class TestTracingSetup:
    """Tracer provider configuration."""

    def test_disabled_tracing_leaves_provider_alone(self, mocker: MockerFixture) -> None:
        set_provider = mocker.patch("src.core.observability.trace.set_tracer_provider")

        setup_tracing(_settings(enable_tracing=False))

        set_provider.assert_not_called()

    def test_enabled_tracing_sets_provider(self, mocker: MockerFixture) -> None:
        set_provider = mocker.patch("src.core.observability.trace.set_tracer_provider")

        setup_tracing(_settings(enable_tracing=True, exporter_type="none"))

        set_provider.assert_called_once()

    def test_span_gets_request_identifiers(self, mocker: MockerFixture) -> None:
        span = mocker.Mock()
        RequestContext.set_correlation_id("corr-1")

        add_correlation_id_to_span(span, {"headers": [(b"x-request-id", b"req-1")]})

        span.set_attribute.assert_any_call("correlation_id", "corr-1")
        span.set_attribute.assert_any_call("request_id", "req-1")
