"""OpenTelemetry tracing for the mailcraft engine.

Spans opened by the attach workflow go through the global tracer provider, so they
are exported once setup_telemetry() has run and are no-ops otherwise.
"""

import atexit
import socket
import uuid
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import TYPE_CHECKING, Optional

from opentelemetry import trace
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from opentelemetry.semconv.resource import ResourceAttributes

from mailcraft.config import TelemetryConfig

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

    from mailcraft.engine import Engine

_MISSING_EXPORTERS_MSG = (
    "Telemetry is enabled but no exporters are configured. "
    "Set endpoint or console_export=True to export traces."
)


def _service_instance_id(telemetry_config: TelemetryConfig) -> str:
    """Return the configured instance id, or hostname plus a short random suffix."""
    if telemetry_config.service_instance_id:
        return telemetry_config.service_instance_id
    return f"{socket.gethostname()}-{str(uuid.uuid4())[:8]}"


def build_resource(service_name: str, telemetry_config: TelemetryConfig) -> Resource:
    attributes: dict[str, str] = {
        ResourceAttributes.SERVICE_NAME: service_name,
        ResourceAttributes.SERVICE_INSTANCE_ID: _service_instance_id(telemetry_config),
    }
    try:
        attributes[ResourceAttributes.SERVICE_VERSION] = get_version("mailcraft")
    except PackageNotFoundError:
        pass
    if telemetry_config.deployment_environment:
        attributes[ResourceAttributes.DEPLOYMENT_ENVIRONMENT] = (
            telemetry_config.deployment_environment
        )
    return Resource.create(attributes)


def _add_exporters(provider: TracerProvider, telemetry_config: TelemetryConfig) -> None:
    if telemetry_config.endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        otlp_exporter = OTLPSpanExporter(
            endpoint=telemetry_config.endpoint, timeout=telemetry_config.timeout
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    if telemetry_config.console_export:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))


def setup_telemetry(app: "Engine", telemetry_config: TelemetryConfig) -> Optional["Tracer"]:
    """Enable tracing of requests and attach operations.

    Args:
        app: Engine to instrument
        telemetry_config: Exporter settings

    Returns:
        Tracer for the engine if telemetry is enabled, None otherwise

    Raises:
        ValueError: If telemetry is enabled without any exporter
    """
    if not telemetry_config.enabled:
        return None
    if not telemetry_config.endpoint and not telemetry_config.console_export:
        raise ValueError(_MISSING_EXPORTERS_MSG)

    service_name = app.config.get("APP_NAME", "mailcraft")
    provider = TracerProvider(resource=build_resource(service_name, telemetry_config))
    _add_exporters(provider, telemetry_config)

    trace.set_tracer_provider(provider)
    FlaskInstrumentor().instrument_app(app)

    @app.teardown_appcontext
    def flush_telemetry(_exc: Optional[BaseException] = None) -> None:
        provider.force_flush()

    atexit.register(provider.shutdown)

    return trace.get_tracer(__name__)
