"""One-time OpenTelemetry SDK setup with a Prometheus reader.

Requires the ``prometheus`` extra. The reader registers its collector with
``prometheus_client``; serving ``/metrics`` is left to the application, e.g.
``prometheus_client.start_http_server(9464)``.
"""

import threading
from dataclasses import dataclass, field

from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource

from metricbind.adapters.opentelemetry import OpenTelemetryMeter
from metricbind.core.logs import get_logger
from metricbind.core.models import Attributes

logger = get_logger(__name__)


@dataclass(frozen=True)
class PrometheusSetup:
    """Backend configuration.

    Attributes:
        meter_name: Name of the meter (instrumentation scope).
        resource_attributes: Attributes describing the process, e.g.
            ``attrs("service.name", "checkout")``.
        schema_url: Optional semantic conventions schema URL of the resource.
        set_global: Also install the provider as the global MeterProvider.
    """

    meter_name: str
    resource_attributes: Attributes = field(default_factory=tuple)
    schema_url: str | None = None
    set_global: bool = False


_lock = threading.Lock()
_configured: dict[PrometheusSetup, OpenTelemetryMeter] = {}


def setup_prometheus(config: PrometheusSetup) -> OpenTelemetryMeter:
    """Create a MeterProvider exporting through Prometheus and wrap its meter.

    Calling this again with an equal config returns the same meter, so the
    collector is registered only once.

    Args:
        config: Backend configuration.

    Returns:
        Meter to pass to ``bind(..., meter=...)``.
    """
    with _lock:
        existing = _configured.get(config)
        if existing is not None:
            return existing

        resource = Resource.create(dict(config.resource_attributes), config.schema_url)
        reader = PrometheusMetricReader()
        provider = MeterProvider(resource=resource, metric_readers=[reader])
        if config.set_global:
            metrics.set_meter_provider(provider)

        meter = OpenTelemetryMeter(provider.get_meter(config.meter_name))
        _configured[config] = meter
        logger.info(
            "configured Prometheus metrics for meter %r with %d resource attribute(s)",
            config.meter_name,
            len(config.resource_attributes),
        )
        return meter
