"""Client for the legacy flat-response Admin API (``/admin/...``)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from result import Err, Ok, Result

from cursor_exporter.data._helpers import (
    DEFAULT_MAX_PAGES,
    as_utc,
    page_limit_error,
    unique_members,
)
from cursor_exporter.models.records import (
    DailyUsageRecord,
    SpendingRecord,
    TeamMember,
    UsageEvent,
)
from cursor_exporter.models.wire import (
    LegacyDailyUsageResponse,
    LegacySpendingResponse,
    LegacyTeamMembersResponse,
    LegacyUsageEventsResponse,
)

if TYPE_CHECKING:
    import datetime as dt

    from cursor_exporter.data.transport import CursorTransport

logger = logging.getLogger(__name__)


class LegacyCursorClient:
    """Admin API client for the ``/admin`` endpoints.

    Responses are already aggregated per day; lists are paged with
    ``limit``/``offset`` and report a ``total`` item count.
    """

    def __init__(self, transport: CursorTransport, *, max_pages: int = DEFAULT_MAX_PAGES) -> None:
        self._transport = transport
        self._max_pages = max_pages

    def list_team_members(self) -> Result[list[TeamMember], str]:
        with self._transport.session() as api:
            body = api.get("/admin/team/members")
        if isinstance(body, Err):
            return Err(f"failed to get team members: {body.err_value}")

        try:
            response = LegacyTeamMembersResponse.model_validate(body.ok_value)
        except ValidationError as exc:
            return Err(f"failed to decode team members response: {exc}")
        return Ok(unique_members(response.members))

    def get_daily_usage(
        self, start_date: dt.date, end_date: dt.date
    ) -> Result[list[DailyUsageRecord], str]:
        params = {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()}
        with self._transport.session() as api:
            body = api.get("/admin/usage/daily", params)
        if isinstance(body, Err):
            return Err(f"failed to get daily usage: {body.err_value}")

        try:
            response = LegacyDailyUsageResponse.model_validate(body.ok_value)
            records = [DailyUsageRecord(**usage.model_dump()) for usage in response.usage]
        except ValidationError as exc:
            return Err(f"failed to decode daily usage response: {exc}")
        records.sort(key=lambda record: record.date)
        return Ok(records)

    def get_spending(self, page_size: int) -> Result[list[SpendingRecord], str]:
        records: list[SpendingRecord] = []
        offset = 0
        with self._transport.session() as api:
            for _ in range(self._max_pages):
                body = api.get("/admin/spending", {"limit": page_size, "offset": offset})
                if isinstance(body, Err):
                    return Err(f"failed to get spending data: {body.err_value}")

                try:
                    response = LegacySpendingResponse.model_validate(body.ok_value)
                    records.extend(
                        SpendingRecord(**item.model_dump()) for item in response.spending
                    )
                except ValidationError as exc:
                    return Err(f"failed to decode spending response: {exc}")

                offset += len(response.spending)
                if not response.spending or offset >= response.total:
                    return Ok(records)
        return Err(f"failed to get spending data: {page_limit_error(self._max_pages)}")

    def get_usage_events(
        self,
        user_email: str = "",
        page_size: int = 100,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> Result[list[UsageEvent], str]:
        """Page through usage events.

        The legacy endpoint has no date filter, so events outside
        [start_date, end_date] are dropped here.
        """
        params: dict[str, Any] = {"limit": page_size}
        if user_email:
            params["user_email"] = user_email

        events: list[UsageEvent] = []
        offset = 0
        with self._transport.session() as api:
            for _ in range(self._max_pages):
                body = api.get("/admin/usage/events", {**params, "offset": offset})
                if isinstance(body, Err):
                    return Err(f"failed to get usage events: {body.err_value}")

                try:
                    response = LegacyUsageEventsResponse.model_validate(body.ok_value)
                    page = [
                        UsageEvent(
                            event_type=item.event_type,
                            user_email=item.user_email,
                            tokens_consumed=item.tokens_consumed,
                            model=item.model,
                            timestamp=as_utc(item.timestamp),
                        )
                        for item in response.events
                    ]
                except (ValidationError, OverflowError) as exc:
                    return Err(f"failed to decode usage events response: {exc}")

                events.extend(e for e in page if _in_window(e, start_date, end_date))
                offset += len(response.events)
                if not response.events or offset >= response.total:
                    return Ok(events)
        return Err(f"failed to get usage events: {page_limit_error(self._max_pages)}")


def _in_window(event: UsageEvent, start_date: dt.date | None, end_date: dt.date | None) -> bool:
    day = event.timestamp.date()
    if start_date is not None and day < start_date:
        return False
    return end_date is None or day <= end_date
