from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from check_newrelic.core.exceptions import ValidationError
from check_newrelic.services.normalization import DataType


@dataclass(frozen=True)
class MetricDescriptor:
    """Maps a command-line selector to the name New Relic reports it under."""

    selector: str
    display_name: str
    data_type: DataType = DataType.FLOAT


_catalog: Dict[str, MetricDescriptor] = {}


def _register(descriptor: MetricDescriptor) -> None:
    if descriptor.selector in _catalog:
        raise ValueError(f"Metric '{descriptor.selector}' is already registered.")
    _catalog[descriptor.selector] = descriptor


for _descriptor in (
    MetricDescriptor("cpu", "CPU"),
    MetricDescriptor("memory", "Memory"),
    MetricDescriptor("errors", "Errors"),
    MetricDescriptor("response", "Response Time", DataType.INT),
    MetricDescriptor("throughput", "Throughput"),
    MetricDescriptor("db", "DB"),
):
    _register(_descriptor)

METRIC_SELECTORS: List[str] = list(_catalog)


def get_descriptor(selector: str | None) -> MetricDescriptor:
    key = (selector or "").strip().lower()
    if key not in _catalog:
        raise ValidationError("Invalid argument for --metric")
    return _catalog[key]
