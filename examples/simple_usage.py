"""Bind a flat blueprint and serve it through Prometheus.

Run with:
    pip install -e ".[prometheus]"
    python examples/simple_usage.py

Endpoints:
    http://localhost:8080/metrics - Prometheus text format
"""

import time
from dataclasses import dataclass

from prometheus_client import start_http_server

from metricbind import (
    Attribute,
    F64Histogram,
    F64UpDownCounter,
    I64Counter,
    I64Gauge,
    attrs,
    instrument,
    must_bind,
)
from metricbind.adapters.prometheus import PrometheusSetup, setup_prometheus


@dataclass
class Samplers:
    counter: I64Counter = instrument("i_am_a_counter")
    gauge: I64Gauge = instrument("i_am_a_gauge")
    up_down_counter: F64UpDownCounter = instrument("i_am_a_updowncounter")
    # Histograms may declare explicit bucket boundaries.
    histogram: F64Histogram = instrument("i_am_a_histogram", buckets="1.0,2.0,3.0")


def main() -> None:
    meter = setup_prometheus(
        PrometheusSetup("some-service", resource_attributes=attrs("version", "0.0.1"))
    )
    samplers = must_bind(Samplers, Attribute("layer", "1"), meter=meter)

    start_http_server(8080)
    call_site = attrs("your", "attr")
    for i in range(10):
        samplers.counter.add(i, call_site)
        samplers.gauge.record(i, call_site)
        samplers.histogram.record(float(i), call_site)
        samplers.up_down_counter.add(float(i), call_site)
        time.sleep(1)

    # Keep serving after the loop.
    while True:
        time.sleep(60)


if __name__ == "__main__":
    main()
