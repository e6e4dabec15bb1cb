"""Client for the paginated Admin API (``/teams/...``).

This variant posts JSON bodies, encodes dates as epoch milliseconds and
returns daily usage as raw rows that still have to be bucketed per day.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from result import Err, Ok, Result

from cursor_exporter.data._helpers import DEFAULT_MAX_PAGES, page_limit_error, unique_members
from cursor_exporter.data.aggregation import (
    aggregate_daily_rows,
    day_end_ms,
    day_start_ms,
    ms_to_date,
    ms_to_datetime,
)
from cursor_exporter.models.records import (
    DailyUsageRecord,
    SpendingRecord,
    TeamMember,
    UsageEvent,
)
from cursor_exporter.models.wire import (
    DailyUsageResponse,
    SpendResponse,
    TeamMembersResponse,
    UsageEventPayload,
    UsageEventsResponse,
)

if TYPE_CHECKING:
    import datetime as dt

    from cursor_exporter.data.transport import CursorTransport

logger = logging.getLogger(__name__)


class PaginatedCursorClient:
    """Admin API client for the ``/teams`` endpoints."""

    def __init__(self, transport: CursorTransport, *, max_pages: int = DEFAULT_MAX_PAGES) -> None:
        self._transport = transport
        self._max_pages = max_pages

    def list_team_members(self) -> Result[list[TeamMember], str]:
        with self._transport.session() as api:
            body = api.get("/teams/members")
        if isinstance(body, Err):
            return Err(f"failed to get team members: {body.err_value}")

        try:
            response = TeamMembersResponse.model_validate(body.ok_value)
        except ValidationError as exc:
            return Err(f"failed to decode team members response: {exc}")
        return Ok(unique_members(response.team_members))

    def get_daily_usage(
        self, start_date: dt.date, end_date: dt.date
    ) -> Result[list[DailyUsageRecord], str]:
        """Fetch usage rows for [start_date, end_date] and bucket them per UTC day."""
        request = {"startDate": day_start_ms(start_date), "endDate": day_end_ms(end_date)}
        with self._transport.session() as api:
            body = api.post("/teams/daily-usage-data", request)
        if isinstance(body, Err):
            return Err(f"failed to get daily usage: {body.err_value}")

        try:
            response = DailyUsageResponse.model_validate(body.ok_value)
            return Ok(aggregate_daily_rows(response.data))
        except (ValidationError, OverflowError) as exc:
            return Err(f"failed to decode daily usage response: {exc}")

    def get_spending(self, page_size: int) -> Result[list[SpendingRecord], str]:
        """Walk every spend page until ``totalPages`` is reached."""
        records: list[SpendingRecord] = []
        with self._transport.session() as api:
            for page in range(1, self._max_pages + 1):
                body = api.post("/teams/spend", {"page": page, "pageSize": page_size})
                if isinstance(body, Err):
                    return Err(f"failed to get spending data: {body.err_value}")

                try:
                    response = SpendResponse.model_validate(body.ok_value)
                    cycle_date = ms_to_date(response.subscription_cycle_start)
                    records.extend(
                        SpendingRecord(
                            member_email=spend.email,
                            spend_cents=spend.spend_cents,
                            premium_requests=spend.fast_premium_requests,
                            date=cycle_date,
                        )
                        for spend in response.team_member_spend
                    )
                except (ValidationError, OverflowError) as exc:
                    return Err(f"failed to decode spending response: {exc}")

                if page >= response.total_pages:
                    return Ok(records)
        return Err(f"failed to get spending data: {page_limit_error(self._max_pages)}")

    def get_usage_events(
        self,
        user_email: str = "",
        page_size: int = 100,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> Result[list[UsageEvent], str]:
        """Walk every usage-event page until ``hasNextPage`` is false."""
        request: dict[str, Any] = {"pageSize": page_size}
        if user_email:
            request["email"] = user_email
        if start_date is not None:
            request["startDate"] = day_start_ms(start_date)
        if end_date is not None:
            request["endDate"] = day_end_ms(end_date)

        events: list[UsageEvent] = []
        with self._transport.session() as api:
            for page in range(1, self._max_pages + 1):
                body = api.post("/teams/filtered-usage-events", {**request, "page": page})
                if isinstance(body, Err):
                    return Err(f"failed to get usage events: {body.err_value}")

                try:
                    response = UsageEventsResponse.model_validate(body.ok_value)
                    events.extend(
                        event
                        for payload in response.usage_events
                        if (event := _to_usage_event(payload)) is not None
                    )
                except ValidationError as exc:
                    return Err(f"failed to decode usage events response: {exc}")

                if not response.pagination.has_next_page:
                    return Ok(events)
        return Err(f"failed to get usage events: {page_limit_error(self._max_pages)}")


def _to_usage_event(payload: UsageEventPayload) -> UsageEvent | None:
    try:
        timestamp = ms_to_datetime(int(payload.timestamp))
    except (ValueError, OverflowError):
        logger.warning("Skipping usage event with unparseable timestamp %r", payload.timestamp)
        return None

    tokens = payload.token_usage.total if payload.token_usage is not None else 0
    return UsageEvent(
        event_type=payload.kind_label,
        user_email=payload.user_email,
        tokens_consumed=tokens,
        model=payload.model,
        timestamp=timestamp,
    )
