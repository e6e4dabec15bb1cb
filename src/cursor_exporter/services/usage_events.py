"""Granular usage-event and token metrics."""

from __future__ import annotations

import datetime as dt
import logging
from collections import Counter
from typing import TYPE_CHECKING

from result import Err

from cursor_exporter.services.metrics import (
    DEFAULT_NAMESPACE,
    DomainCollector,
    MetricDescriptor,
    only_populated,
    utcnow,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client.metrics_core import Metric

    from cursor_exporter.data.protocols import UsageDataSource

logger = logging.getLogger(__name__)

LOOKBACK_DAYS = 30
PAGE_SIZE = 5000


class UsageEventsCollector(DomainCollector):
    """Event counts and token sums over the last ``LOOKBACK_DAYS`` days."""

    name = "usage_events"

    def __init__(
        self,
        client: UsageDataSource,
        namespace: str = DEFAULT_NAMESPACE,
        *,
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> None:
        self._client = client
        self._clock = clock
        self.total_events = MetricDescriptor(
            f"{namespace}_usage_events_total", "Total number of usage events"
        )
        self.events_by_type = MetricDescriptor(
            f"{namespace}_usage_events_by_type_total",
            "Number of usage events by type",
            ("event_type",),
        )
        self.events_by_user = MetricDescriptor(
            f"{namespace}_usage_events_by_user_total",
            "Number of usage events by user",
            ("user_email",),
        )
        self.events_by_model = MetricDescriptor(
            f"{namespace}_usage_events_by_model_total",
            "Number of usage events by model",
            ("model",),
        )
        self.tokens_consumed = MetricDescriptor(
            f"{namespace}_tokens_consumed_total", "Total tokens consumed"
        )
        self.tokens_by_model = MetricDescriptor(
            f"{namespace}_tokens_consumed_by_model_total", "Tokens consumed by model", ("model",)
        )
        self.tokens_by_user = MetricDescriptor(
            f"{namespace}_tokens_consumed_by_user_total", "Tokens consumed by user", ("user_email",)
        )
        super().__init__(
            (
                self.total_events,
                self.events_by_type,
                self.events_by_user,
                self.events_by_model,
                self.tokens_consumed,
                self.tokens_by_model,
                self.tokens_by_user,
            )
        )

    def collect(self) -> list[Metric]:
        end_date = self._clock().date()
        start_date = end_date - dt.timedelta(days=LOOKBACK_DAYS)

        result = self._client.get_usage_events("", PAGE_SIZE, start_date, end_date)
        if isinstance(result, Err):
            logger.error("Failed to get usage events: %s", result.err_value)
            return []
        events = result.ok_value

        type_counts: Counter[str] = Counter()
        user_counts: Counter[str] = Counter()
        model_counts: Counter[str] = Counter()
        model_tokens: Counter[str] = Counter()
        user_tokens: Counter[str] = Counter()
        for event in events:
            type_counts[event.event_type] += 1
            user_counts[event.user_email] += 1
            model_counts[event.model] += 1
            model_tokens[event.model] += event.tokens_consumed
            user_tokens[event.user_email] += event.tokens_consumed

        total_events = self.total_events.family()
        total_events.add_metric([], len(events))
        tokens_consumed = self.tokens_consumed.family()
        tokens_consumed.add_metric([], sum(event.tokens_consumed for event in events))

        return only_populated(
            total_events,
            _fill(self.events_by_type, type_counts),
            _fill(self.events_by_user, user_counts),
            _fill(self.events_by_model, model_counts),
            tokens_consumed,
            _fill(self.tokens_by_model, model_tokens),
            _fill(self.tokens_by_user, user_tokens),
        )


def _fill(descriptor: MetricDescriptor, values: Counter[str]) -> Metric:
    family = descriptor.family()
    for label, value in values.items():
        family.add_metric([label], value)
    return family
