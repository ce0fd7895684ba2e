"""Request-scoped metric registry for one scrape."""

import logging
from collections.abc import Iterable

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from brother_exporter.errors import DuplicateMetricError, FetchError
from brother_exporter.fetcher import PrinterClient
from brother_exporter.publisher import (
    METRIC_PREFIX,
    SUCCESS_HELP,
    SUCCESS_METRIC,
    MetricSet,
    field_help,
    publish,
)

logger = logging.getLogger(__name__)


class ScrapeRegistry:
    """Gauges of all printers polled during one scrape request.

    Sets added here share one host-labelled gauge per metric name inside
    a registry owned by a single request. It is never reused.
    """

    def __init__(self):
        self.registry = CollectorRegistry()
        self._gauges: dict[str, Gauge] = {}
        self._seen: set[tuple[str, str]] = set()
        self.metric_sets: list[MetricSet] = []

    def add(self, metric_set: MetricSet) -> None:
        """Add the gauges of one printer.

        Raises:
            DuplicateMetricError: If a gauge with the same name and host
                was already added to this scrape
        """
        for name, _ in metric_set.gauges():
            if (name, metric_set.target) in self._seen:
                raise DuplicateMetricError(
                    f"{name}{{host={metric_set.target!r}}} registered twice"
                )

        for name, value in metric_set.gauges():
            gauge = self._gauges.get(name)
            if gauge is None:
                gauge = Gauge(name, self._help(name), ["host"], registry=self.registry)
                self._gauges[name] = gauge
            gauge.labels(host=metric_set.target).set(value)
            self._seen.add((name, metric_set.target))

        self.metric_sets.append(metric_set)

    @staticmethod
    def _help(name: str) -> str:
        if name == SUCCESS_METRIC:
            return SUCCESS_HELP
        return field_help(name[len(METRIC_PREFIX):])


def new_registry() -> ScrapeRegistry:
    """Create an empty request-scoped registry."""
    return ScrapeRegistry()


def collect_target(target: str, client: PrinterClient) -> MetricSet:
    """Fetch one printer and publish its gauges."""
    try:
        result = client.fetch(target)
    except FetchError as e:
        return publish(target, e)
    return publish(target, result)


def scrape(targets: Iterable[str], client: PrinterClient) -> CollectorRegistry:
    """Poll every target in turn into a brand-new registry.

    Args:
        targets: Printer addresses, polled sequentially
        client: Printer client used for every fetch

    Returns:
        Registry holding the gauges of all targets

    Raises:
        DuplicateMetricError: If the same gauge is produced twice for a host
    """
    scrape_registry = new_registry()
    for target in targets:
        scrape_registry.add(collect_target(target, client))
    logger.debug(f"Scraped {len(scrape_registry.metric_sets)} printer(s)")
    return scrape_registry.registry


def render(registry: CollectorRegistry) -> bytes:
    """Render a registry in the Prometheus text exposition format."""
    return generate_latest(registry)
