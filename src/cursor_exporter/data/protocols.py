"""Protocol definitions for Admin API data sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import datetime as dt

    from result import Result

    from cursor_exporter.models.records import (
        DailyUsageRecord,
        SpendingRecord,
        TeamMember,
        UsageEvent,
    )


class UsageDataSource(Protocol):
    """Interface shared by the paginated and legacy API clients.

    Every call is self-contained and either returns all records or an error
    message, never a partial result.
    """

    def list_team_members(self) -> Result[list[TeamMember], str]: ...

    def get_daily_usage(
        self, start_date: dt.date, end_date: dt.date
    ) -> Result[list[DailyUsageRecord], str]: ...

    def get_spending(self, page_size: int) -> Result[list[SpendingRecord], str]: ...

    def get_usage_events(
        self,
        user_email: str = "",
        page_size: int = 100,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> Result[list[UsageEvent], str]: ...
