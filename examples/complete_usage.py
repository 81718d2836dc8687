"""Two layers of a nested blueprint exported side by side.

Run with:
    pip install -e ".[prometheus]"
    python examples/complete_usage.py

Every identifier appears twice in http://localhost:8080/metrics, once per
``layer`` label. Nested instruments also carry ``sub="nested"`` and
embedded ones ``sub="embedded"``.
"""

import logging
import threading
import time
from dataclasses import dataclass

from prometheus_client import start_http_server

from metricbind import (
    Attribute,
    F64Counter,
    F64Gauge,
    F64Histogram,
    F64UpDownCounter,
    I64Counter,
    I64Gauge,
    I64Histogram,
    attrs,
    instrument,
    iter_leaves,
    must_bind,
    subtree,
)
from metricbind.adapters.prometheus import PrometheusSetup, setup_prometheus


@dataclass
class MoreNest:
    counter: F64Counter = instrument("example_more_nested_counter")


@dataclass
class Nested:
    counter: F64Counter = instrument("example_nested_counter")
    gauge: F64Gauge = instrument("example_nested_gauge")
    more_nest: MoreNest = subtree()


@dataclass
class Embedded:
    histogram: I64Histogram = instrument("example_embedded_histogram")
    up_down_counter: F64UpDownCounter = instrument("example_embedded_updowncounter")


@dataclass
class Samplers:
    counter: I64Counter = instrument("i_am_a_counter")
    gauge: I64Gauge = instrument("i_am_a_gauge")
    up_down_counter: F64UpDownCounter = instrument("i_am_a_updowncounter")
    histogram: F64Histogram = instrument("i_am_a_histogram", buckets="1.0,2.0,3.0")
    # Nested blueprints add their attrs to everything below them.
    nested: Nested = subtree(attrs="sub,nested")
    # Optional blueprints are allocated by the binder as well.
    embedded: Embedded | None = subtree(attrs="sub,embedded")


def drive(samplers: Samplers) -> None:
    call_site = attrs("your", "attr")
    for i in range(10):
        samplers.counter.add(i, call_site)
        samplers.gauge.record(i, call_site)
        samplers.histogram.record(float(i), call_site)
        samplers.up_down_counter.add(float(i), call_site)

        samplers.nested.counter.add(float(i), call_site)
        samplers.nested.gauge.record(float(i), call_site)
        samplers.nested.more_nest.counter.add(float(i), call_site)

        embedded = samplers.embedded
        if embedded is not None:
            embedded.up_down_counter.add(float(i), call_site)
            embedded.histogram.record(i, call_site)
        time.sleep(1)


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    for leaf in iter_leaves(Samplers):
        print(f"{leaf.path:40} {leaf.spec.name:18} {leaf.identifier}")

    meter = setup_prometheus(
        PrometheusSetup("some-service", resource_attributes=attrs("version", "0.0.1"))
    )
    layer1 = must_bind(Samplers, Attribute("layer", "1"), meter=meter)
    layer2 = must_bind(Samplers, Attribute("layer", "2"), meter=meter)

    start_http_server(8080)
    workers = [threading.Thread(target=drive, args=(s,)) for s in (layer1, layer2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    while True:
        time.sleep(60)


if __name__ == "__main__":
    main()
