from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, SERVICE_NAMESPACE, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace import Span, Tracer

from jobintel.core.config import Settings

INSTRUMENTATION_NAME = "jobintel"
PIPELINE_SPAN_PREFIX = "job_discovery"
_PLAIN_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_CORRELATED_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s trace_id=%(trace_id)s span_id=%(span_id)s %(message)s"

AttributeValue = str | int | float | bool

_BASE_LOG_RECORD_FACTORY = logging.getLogRecordFactory()
_LOG_CORRELATION_INSTALLED = False
# Provider owned by jobintel when the host did not install it globally.
_PIPELINE_PROVIDER: TracerProvider | None = None


@dataclass(slots=True)
class TelemetryRuntime:
    enabled: bool
    provider: TracerProvider | None


def setup_telemetry(
    settings: Settings,
    *,
    span_processor: SpanProcessor | None = None,
    set_global: bool = True,
) -> TelemetryRuntime:
    """Configure ``jobintel`` logging and, when enabled, tracing for discovery runs.

    With ``set_global=False`` the provider only receives ``job_discovery.*`` spans and
    the host application's global tracer provider is left untouched.
    """
    global _PIPELINE_PROVIDER
    _configure_logging(settings)
    if not settings.otel_enabled:
        return TelemetryRuntime(enabled=False, provider=None)

    provider = TracerProvider(
        resource=Resource.create(
            {
                SERVICE_NAME: settings.otel_service_name,
                SERVICE_NAMESPACE: INSTRUMENTATION_NAME,
                DEPLOYMENT_ENVIRONMENT: settings.environment,
            }
        ),
        sampler=ParentBased(TraceIdRatioBased(settings.otel_trace_sample_ratio)),
    )
    if span_processor is not None:
        provider.add_span_processor(span_processor)
    else:
        exporter = _build_exporter(settings)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
    if set_global:
        trace.set_tracer_provider(provider)
    _PIPELINE_PROVIDER = provider
    return TelemetryRuntime(enabled=True, provider=provider)


def shutdown_telemetry(runtime: TelemetryRuntime) -> None:
    global _PIPELINE_PROVIDER
    if not runtime.enabled or runtime.provider is None:
        return
    runtime.provider.force_flush()
    runtime.provider.shutdown()
    if _PIPELINE_PROVIDER is runtime.provider:
        _PIPELINE_PROVIDER = None


def pipeline_tracer() -> Tracer:
    if _PIPELINE_PROVIDER is not None:
        return _PIPELINE_PROVIDER.get_tracer(INSTRUMENTATION_NAME)
    return trace.get_tracer(INSTRUMENTATION_NAME)


@contextmanager
def pipeline_span(stage: str, **attributes: AttributeValue) -> Iterator[Span]:
    with pipeline_tracer().start_as_current_span(f"{PIPELINE_SPAN_PREFIX}.{stage}") as span:
        set_pipeline_attributes(span, **attributes)
        yield span


def set_pipeline_attributes(span: Span, **attributes: AttributeValue | None) -> None:
    for key, value in attributes.items():
        if value is None:
            continue
        span.set_attribute(f"{PIPELINE_SPAN_PREFIX}.{key}", value)


def _configure_logging(settings: Settings) -> None:
    if settings.otel_log_correlation:
        _install_log_correlation()
    logging.getLogger(INSTRUMENTATION_NAME).setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=_CORRELATED_LOG_FORMAT if _LOG_CORRELATION_INSTALLED else _PLAIN_LOG_FORMAT,
    )


def _build_exporter(settings: Settings) -> OTLPSpanExporter | None:
    endpoint = settings.otel_exporter_otlp_endpoint or os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
    if endpoint is None:
        endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        logging.getLogger(__name__).info(
            "no OTLP endpoint configured; job discovery spans stay in-process service=%s",
            settings.otel_service_name,
        )
        return None

    headers = _parse_headers(settings.otel_exporter_otlp_headers or os.getenv("OTEL_EXPORTER_OTLP_HEADERS"))
    if headers:
        return OTLPSpanExporter(endpoint=endpoint, headers=headers)
    return OTLPSpanExporter(endpoint=endpoint)


def _parse_headers(raw: str | None) -> dict[str, str]:
    if raw is None:
        return {}
    parsed: dict[str, str] = {}
    for item in raw.split(","):
        key, separator, value = item.partition("=")
        if separator and key.strip():
            parsed[key.strip()] = value.strip()
    return parsed


def _install_log_correlation() -> None:
    global _LOG_CORRELATION_INSTALLED
    if _LOG_CORRELATION_INSTALLED:
        return

    def record_factory(*args: object, **kwargs: object) -> logging.LogRecord:
        record = _BASE_LOG_RECORD_FACTORY(*args, **kwargs)
        context = trace.get_current_span().get_span_context()
        record.trace_id = format(context.trace_id, "032x") if context.is_valid else "0" * 32
        record.span_id = format(context.span_id, "016x") if context.is_valid else "0" * 16
        return record

    logging.setLogRecordFactory(record_factory)
    _LOG_CORRELATION_INSTALLED = True
