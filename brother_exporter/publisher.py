"""Turn fetched printer information into gauge values."""

import logging
from typing import Optional, Union

from pydantic import BaseModel, Field

from brother_exporter.errors import DuplicateMetricError, FetchError

logger = logging.getLogger(__name__)


METRIC_PREFIX = "brother_"
SUCCESS_METRIC = "brother_success"
SUCCESS_HELP = "Indicates if the last scrape was successful (1) or not (0)."

FetchResult = Union[dict[str, str], FetchError]


class MetricSet(BaseModel):
    """Gauges produced for one printer in one scrape."""

    target: str
    success: float = 0.0
    values: dict[str, float] = Field(default_factory=dict)

    def gauges(self) -> list[tuple[str, float]]:
        """All gauges of the set, success first."""
        return [(SUCCESS_METRIC, self.success), *self.values.items()]

    def get(self, name: str) -> Optional[float]:
        """Get a gauge value by metric name."""
        if name == SUCCESS_METRIC:
            return self.success
        return self.values.get(name)


def field_help(field_name: str) -> str:
    """Help text for a per-field gauge."""
    return f"Metric {field_name} for Brother printer"


def parse_float(value: str) -> Optional[float]:
    """Parse a raw CSV value as a float.

    Args:
        value: Raw value like "120", "45.5", "1e3"

    Returns:
        Float value, or None if the value is not numeric
    """
    try:
        return float(value)
    except ValueError:
        return None


def publish(target: str, result: FetchResult) -> MetricSet:
    """Build the gauges for one printer from its fetch result.

    Fetch failures are contained: they produce a set holding only
    ``brother_success = 0`` and a warning in the log. Fields whose value
    is not numeric are skipped.

    Args:
        target: Printer address
        result: Normalized fields from the fetcher, or the error it raised

    Returns:
        MetricSet for the printer

    Raises:
        DuplicateMetricError: If a field maps onto the success gauge name
    """
    if isinstance(result, FetchError):
        logger.warning(f"Error collecting data for {target}: {result}")
        return MetricSet(target=target, success=0.0)

    values: dict[str, float] = {}
    for field_name, raw in result.items():
        value = parse_float(raw)
        if value is None:
            continue

        name = f"{METRIC_PREFIX}{field_name}"
        if name == SUCCESS_METRIC:
            raise DuplicateMetricError(
                f"field {field_name!r} of {target} collides with {SUCCESS_METRIC}"
            )
        values[name] = value

    return MetricSet(target=target, success=1.0, values=values)
