"""Value objects decoded from rule configuration text."""
from dataclasses import dataclass
from typing import Optional, Union

from models.enums import DurationUnit, Weekday


@dataclass(frozen=True)
class MetricDefinition:
    value: str
    label: str
    unit: str = ""


METRIC_CATALOG = (
    MetricDefinition("CPU", "CPU Utilization", "%"),
    MetricDefinition("Memory", "Memory Usage", "%"),
    MetricDefinition("Disk", "Disk Usage", "%"),
    MetricDefinition("Bandwidth", "Bandwidth Usage", "%"),
    MetricDefinition("Latency", "Network Latency", "ms"),
    MetricDefinition("Packet Loss", "Packet Loss", "%"),
    MetricDefinition("Interface Errors", "Interface Errors", "/min"),
    MetricDefinition("Response Time", "Response Time", "ms"),
    MetricDefinition("Temperature", "Temperature", "°C"),
)

_CATALOG_BY_NAME = {m.value: m for m in METRIC_CATALOG}


def get_metric(name) -> Optional[MetricDefinition]:
    """Look up a catalog entry by its metric name (case-sensitive)."""
    return _CATALOG_BY_NAME.get(name)


def metric_unit(name) -> str:
    metric = get_metric(name)
    return metric.unit if metric else ""


@dataclass
class Condition:
    """A threshold comparison. `operator` and `value` are "" for unparseable text."""
    metric: str = ""
    operator: str = ""
    value: Union[int, str] = ""

    @property
    def is_numeric(self):
        return isinstance(self.value, int)


@dataclass
class Duration:
    value: int = 2
    unit: str = DurationUnit.HOURS.value


@dataclass
class Schedule:
    """Weekly recurrence. Timezone is always UTC."""
    day: str = Weekday.SUNDAY.value
    hour: int = 2
    minute: int = 0
    timezone: str = "UTC"
