"""Team roster metrics."""

from __future__ import annotations

import logging
from collections import Counter
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


class TeamMembersCollector(DomainCollector):
    """Total head count plus head count per role."""

    name = "team_members"

    def __init__(self, client: UsageDataSource, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._client = client
        self.total_members = MetricDescriptor(
            f"{namespace}_team_members_total", "Total number of team members"
        )
        self.members_by_role = MetricDescriptor(
            f"{namespace}_team_members_by_role", "Number of team members by role", ("role",)
        )
        super().__init__((self.total_members, self.members_by_role))

    def collect(self) -> list[Metric]:
        result = self._client.list_team_members()
        if isinstance(result, Err):
            logger.error("Failed to get team members: %s", result.err_value)
            return []
        members = result.ok_value

        total = self.total_members.family()
        total.add_metric([], len(members))

        by_role = self.members_by_role.family()
        for role, count in Counter(member.role for member in members).items():
            by_role.add_metric([role], count)

        return only_populated(total, by_role)
