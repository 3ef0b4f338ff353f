"""OpenTelemetry tracing for requests and queries.

``ObservabilityConfig.exporter_type`` picks where finished spans go:
``console`` logs them through Loguru, ``otlp`` sends them to a collector and
``none`` keeps tracing (and so trace IDs) without exporting anything.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from loguru import logger
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SpanExporter,
    SpanExportResult,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from src.core.context import RequestContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fastapi import FastAPI

    from src.core.config import Settings

DEFAULT_OTLP_ENDPOINT: Final = "http://localhost:4317"
UNTRACED_URLS: Final = "/health,/docs,/redoc,/openapi.json"
NANOSECONDS_PER_MILLISECOND: Final = 1_000_000

# ASGI and driver-level spans that only repeat their parent
_SKIPPED_SPANS: Final = frozenset({"connect", "http send", "http receive", "cursor.execute"})


class LoguruSpanExporter(SpanExporter):
    """Write one debug log line per finished span."""

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        for span in spans:
            ctx = span.get_span_context()
            if ctx is None or span.name in _SKIPPED_SPANS:
                continue
            elapsed = (
                (span.end_time - span.start_time) // NANOSECONDS_PER_MILLISECOND
                if span.start_time and span.end_time
                else None
            )
            logger.bind(
                trace_id=trace.format_trace_id(ctx.trace_id),
                span_id=trace.format_span_id(ctx.span_id),
                correlation_id=(span.attributes or {}).get(
                    "correlation_id", RequestContext.get_correlation_id()
                ),
                duration_ms=elapsed,
                status=span.status.status_code.name,
            ).debug("Span {} finished", span.name)
        return SpanExportResult.SUCCESS


def get_span_exporter(settings: Settings) -> SpanExporter | None:
    """Return the exporter named by ``exporter_type``, or None for ``none``."""
    config = settings.observability_config
    match config.exporter_type:
        case "console":
            return LoguruSpanExporter()
        case "otlp":
            endpoint = config.exporter_endpoint or DEFAULT_OTLP_ENDPOINT
            logger.info("Exporting spans to {}", endpoint)
            return OTLPSpanExporter(
                endpoint=endpoint, insecure=settings.environment == "development"
            )
        case _:
            return None


def setup_tracing(settings: Settings) -> None:
    """Install a sampled tracer provider unless tracing is disabled."""
    config = settings.observability_config
    if not config.enable_tracing:
        logger.info("Tracing disabled")
        return

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.app_name,
                "service.version": settings.app_version,
                "deployment.environment": settings.environment,
            }
        ),
        sampler=TraceIdRatioBased(config.trace_sample_rate),
    )
    if exporter := get_span_exporter(settings):
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    logger.info(
        "Tracing enabled ({} exporter, sample rate {})",
        config.exporter_type,
        config.trace_sample_rate,
    )


def add_correlation_id_to_span(span: trace.Span, scope: dict[str, Any]) -> None:
    """Tag the server span with the request's correlation and request IDs.

    Installed as the FastAPI instrumentation's ``server_request_hook``, which
    runs before the middleware, so the request ID is read from the headers.
    """
    if correlation_id := RequestContext.get_correlation_id():
        span.set_attribute("correlation_id", correlation_id)
    for name, value in scope.get("headers", []):
        if name == b"x-request-id" and value:
            span.set_attribute("request_id", value.decode("latin-1"))


def instrument_app(app: FastAPI, settings: Settings) -> None:
    """Trace every request to ``app`` and every SQLAlchemy query."""
    if not settings.observability_config.enable_tracing:
        return

    FastAPIInstrumentor.instrument_app(
        app, excluded_urls=UNTRACED_URLS, server_request_hook=add_correlation_id_to_span
    )
    sqlalchemy = SQLAlchemyInstrumentor()
    if not sqlalchemy.is_instrumented_by_opentelemetry:
        sqlalchemy.instrument(enable_commenter=True)
