"""Daily coding-activity metrics."""

from __future__ import annotations

import datetime as dt
import logging
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


class DailyUsageCollector(DomainCollector):
    """Per-day activity gauges for the last ``LOOKBACK_DAYS`` days."""

    name = "daily_usage"

    def __init__(
        self,
        client: UsageDataSource,
        namespace: str = DEFAULT_NAMESPACE,
        *,
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> None:
        self._client = client
        self._clock = clock

        def per_date(suffix: str, doc: str) -> MetricDescriptor:
            return MetricDescriptor(f"{namespace}_daily_{suffix}", doc, ("date",))

        self.lines_added = per_date("lines_added_total", "Total lines of code added per day")
        self.lines_deleted = per_date("lines_deleted_total", "Total lines of code deleted per day")
        self.acceptance_rate = per_date(
            "suggestion_acceptance_rate", "AI suggestion acceptance rate per day"
        )
        self.tabs_used = per_date("tabs_used_total", "Total tabs used per day")
        self.composer_used = per_date("composer_used_total", "Total composer usage per day")
        self.chat_requests = per_date("chat_requests_total", "Total chat requests per day")
        self.model_usage = MetricDescriptor(
            f"{namespace}_daily_model_usage", "Most used model per day", ("date", "model")
        )
        self.extension_usage = MetricDescriptor(
            f"{namespace}_daily_extension_usage",
            "Most used extension per day",
            ("date", "extension"),
        )
        super().__init__(
            (
                self.lines_added,
                self.lines_deleted,
                self.acceptance_rate,
                self.tabs_used,
                self.composer_used,
                self.chat_requests,
                self.model_usage,
                self.extension_usage,
            )
        )

    def collect(self) -> list[Metric]:
        end_date = self._clock().date()
        start_date = end_date - dt.timedelta(days=LOOKBACK_DAYS)

        result = self._client.get_daily_usage(start_date, end_date)
        if isinstance(result, Err):
            logger.error("Failed to get daily usage: %s", result.err_value)
            return []

        lines_added = self.lines_added.family()
        lines_deleted = self.lines_deleted.family()
        acceptance_rate = self.acceptance_rate.family()
        tabs_used = self.tabs_used.family()
        composer_used = self.composer_used.family()
        chat_requests = self.chat_requests.family()
        model_usage = self.model_usage.family()
        extension_usage = self.extension_usage.family()

        for daily in result.ok_value:
            day = daily.date.isoformat()
            lines_added.add_metric([day], daily.lines_added)
            lines_deleted.add_metric([day], daily.lines_deleted)
            acceptance_rate.add_metric([day], daily.suggestion_acceptance_rate)
            tabs_used.add_metric([day], daily.tabs_used)
            composer_used.add_metric([day], daily.composer_used)
            chat_requests.add_metric([day], daily.chat_requests)
            if daily.most_used_model:
                model_usage.add_metric([day, daily.most_used_model], 1)
            if daily.most_used_extension:
                extension_usage.add_metric([day, daily.most_used_extension], 1)

        return only_populated(
            lines_added,
            lines_deleted,
            acceptance_rate,
            tabs_used,
            composer_used,
            chat_requests,
            model_usage,
            extension_usage,
        )
