"""Per-member spend metrics."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from result import Err

from cursor_exporter.services.metrics import (
    DEFAULT_NAMESPACE,
    DomainCollector,
    MetricDescriptor,
    only_populated,
)

if TYPE_CHECKING:
    from prometheus_client.metrics_core import Metric

    from cursor_exporter.data.protocols import UsageDataSource

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000


class SpendingCollector(DomainCollector):
    name = "spending"

    def __init__(self, client: UsageDataSource, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._client = client
        self.total_spending = MetricDescriptor(
            f"{namespace}_spending_total_cents", "Total spending in cents"
        )
        self.spending_by_member = MetricDescriptor(
            f"{namespace}_spending_by_member_cents",
            "Spending by team member in cents",
            ("member_email", "date"),
        )
        self.premium_requests_by_member = MetricDescriptor(
            f"{namespace}_premium_requests_by_member_total",
            "Premium requests by team member",
            ("member_email", "date"),
        )
        self.total_premium_requests = MetricDescriptor(
            f"{namespace}_premium_requests_total", "Total premium requests"
        )
        super().__init__(
            (
                self.total_spending,
                self.spending_by_member,
                self.premium_requests_by_member,
                self.total_premium_requests,
            )
        )

    def collect(self) -> list[Metric]:
        result = self._client.get_spending(PAGE_SIZE)
        if isinstance(result, Err):
            logger.error("Failed to get spending data: %s", result.err_value)
            return []

        by_member = self.spending_by_member.family()
        premium_by_member = self.premium_requests_by_member.family()
        total_spend = 0
        total_premium = 0
        seen: set[tuple[str, str]] = set()
        for spend in result.ok_value:
            key = (spend.member_email, spend.date.isoformat())
            if key in seen:
                logger.warning("Duplicate spend record for %s on %s, keeping the first", *key)
                continue
            seen.add(key)
            total_spend += spend.spend_cents
            total_premium += spend.premium_requests
            labels = list(key)
            by_member.add_metric(labels, spend.spend_cents)
            premium_by_member.add_metric(labels, spend.premium_requests)

        total_spending = self.total_spending.family()
        total_spending.add_metric([], total_spend)
        total_premium_requests = self.total_premium_requests.family()
        total_premium_requests.add_metric([], total_premium)

        return only_populated(by_member, premium_by_member, total_spending, total_premium_requests)
