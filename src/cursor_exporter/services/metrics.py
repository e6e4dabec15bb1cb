"""Metric descriptors and the base class for domain collectors."""

from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from prometheus_client.core import GaugeMetricFamily

if TYPE_CHECKING:
    from prometheus_client.metrics_core import Metric

DEFAULT_NAMESPACE = "cursor"


@dataclass(frozen=True)
class MetricDescriptor:
    """Static metadata for one gauge family."""

    name: str
    documentation: str
    labels: tuple[str, ...] = ()

    def family(self) -> GaugeMetricFamily:
        """A fresh, empty family to fill with samples for one scrape."""
        return GaugeMetricFamily(self.name, self.documentation, labels=list(self.labels))


class DomainCollector(ABC):
    """Turns one data source into metric families.

    Subclasses call the API client once per ``collect()``. A client error
    is logged and yields no families; it is not raised.
    """

    name: str = ""

    def __init__(self, descriptors: tuple[MetricDescriptor, ...]) -> None:
        self._descriptors = descriptors

    @property
    def descriptors(self) -> tuple[MetricDescriptor, ...]:
        return self._descriptors

    def describe(self) -> list[Metric]:
        return [descriptor.family() for descriptor in self._descriptors]

    @abstractmethod
    def collect(self) -> list[Metric]: ...


def only_populated(*families: Metric) -> list[Metric]:
    """Drop families that received no samples this scrape."""
    return [family for family in families if family.samples]


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)
