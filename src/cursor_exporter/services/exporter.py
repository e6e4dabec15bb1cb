"""Scrape orchestration across the four domain collectors."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram
from prometheus_client.registry import Collector
from result import Err, Ok, Result

from cursor_exporter.services.daily_usage import DailyUsageCollector
from cursor_exporter.services.metrics import DEFAULT_NAMESPACE
from cursor_exporter.services.spending import SpendingCollector
from cursor_exporter.services.team_members import TeamMembersCollector
from cursor_exporter.services.usage_events import UsageEventsCollector

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from prometheus_client.metrics_core import Metric

    from cursor_exporter.data.protocols import UsageDataSource
    from cursor_exporter.services.metrics import DomainCollector

logger = logging.getLogger(__name__)


class CursorExporter(Collector):
    """Runs every domain collector on each scrape and adds self-observability.

    Collectors run sequentially in a fixed order. A collector that raises
    contributes nothing to the snapshot and bumps the scrape error counter;
    the remaining collectors still run.
    """

    def __init__(
        self,
        client: UsageDataSource,
        namespace: str = DEFAULT_NAMESPACE,
        *,
        collectors: Sequence[DomainCollector] | None = None,
    ) -> None:
        self.client = client
        if collectors is None:
            collectors = (
                TeamMembersCollector(client, namespace),
                DailyUsageCollector(client, namespace),
                SpendingCollector(client, namespace),
                UsageEventsCollector(client, namespace),
            )
        self.collectors = tuple(collectors)

        self.scrape_duration = Histogram(
            f"{namespace}_exporter_scrape_duration_seconds",
            "Time spent scraping Cursor Admin API",
            registry=None,
        )
        self.scrape_errors = Counter(
            f"{namespace}_exporter_scrape_errors_total",
            "Total number of scrape errors",
            registry=None,
        )

    def describe(self) -> Iterator[Metric]:
        for collector in self.collectors:
            yield from collector.describe()
        yield from self.scrape_duration.describe()
        yield from self.scrape_errors.describe()

    def collect(self) -> Iterator[Metric]:
        start = time.perf_counter()
        logger.debug("Starting Cursor metrics collection")

        families: list[Metric] = []
        for collector in self.collectors:
            result = collect_isolated(collector)
            if isinstance(result, Err):
                self.scrape_errors.inc()
                continue
            families.extend(result.ok_value)

        duration = time.perf_counter() - start
        self.scrape_duration.observe(duration)
        logger.debug("Completed Cursor metrics collection in %.3fs", duration)

        yield from families
        yield from self.scrape_duration.collect()
        yield from self.scrape_errors.collect()


def collect_isolated(collector: DomainCollector) -> Result[list[Metric], str]:
    """Run one collector to completion, turning any fault into Err."""
    logger.debug("Starting %s collection", collector.name)
    try:
        families = list(collector.collect())
    except Exception as exc:
        logger.exception("Fault during %s collection", collector.name)
        return Err(f"{collector.name} collection failed: {exc}")
    logger.debug("Completed %s collection", collector.name)
    return Ok(families)
