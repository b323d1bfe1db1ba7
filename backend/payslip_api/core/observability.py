from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import settings


def configure_observability() -> None:
    """Install tracer and meter providers; export over OTLP only when an endpoint is set."""
    resource = Resource.create(
        {
            "service.name": "payslip-api",
            "service.version": settings.version,
            "deployment.env": settings.env,
        }
    )
    tracer_provider = TracerProvider(resource=resource)
    metric_readers = []
    if settings.otlp_endpoint:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint))
        )
        metric_readers.append(
            PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=settings.otlp_endpoint))
        )
    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=metric_readers))


class PayslipMetrics:
    """Counters emitted by the payslip store."""

    def __init__(self) -> None:
        meter = metrics.get_meter("payslip_api.store")
        self.created = meter.create_counter(
            "payslips_created",
            unit="1",
            description="Payslips persisted",
        )
        self.duplicates = meter.create_counter(
            "payslip_duplicates_rejected",
            unit="1",
            description="Payslip creations rejected for a natural-key or id conflict",
        )

    def record_created(self, month_year: str) -> None:
        self.created.add(1, {"month_year": month_year})

    def record_duplicate(self, kind: str) -> None:
        self.duplicates.add(1, {"kind": kind})
