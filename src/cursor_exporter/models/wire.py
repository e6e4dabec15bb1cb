"""Raw JSON payload shapes of the two Admin API variants.

The paginated API speaks camelCase with millisecond epochs; the legacy API
speaks snake_case with ISO dates. Both treat a JSON ``null`` scalar as the
zero value, so ``_Payload`` drops nulls before validation and lets field
defaults apply.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class _CamelPayload(_Payload):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


# ── Paginated API (/teams/...) ──


class TeamMemberPayload(_Payload):
    name: str = ""
    email: str = ""
    role: str = ""


class TeamMembersResponse(_CamelPayload):
    team_members: list[TeamMemberPayload] = Field(default_factory=list)


class DailyUsageRow(_CamelPayload):
    """One row of /teams/daily-usage-data; several rows may share a day."""

    date: int
    total_lines_added: int = 0
    total_lines_deleted: int = 0
    total_accepts: int = 0
    total_rejects: int = 0
    total_tabs_accepted: int = 0
    composer_requests: int = 0
    chat_requests: int = 0
    most_used_model: str = ""
    tab_most_used_extension: str = ""


class DailyUsageResponse(_CamelPayload):
    data: list[DailyUsageRow] = Field(default_factory=list)


class MemberSpendPayload(_CamelPayload):
    email: str = ""
    spend_cents: int = 0
    fast_premium_requests: int = 0


class SpendResponse(_CamelPayload):
    team_member_spend: list[MemberSpendPayload] = Field(default_factory=list)
    subscription_cycle_start: int = 0
    total_pages: int = 0


class TokenUsagePayload(_CamelPayload):
    input_tokens: int = 0
    output_tokens: int = 0
    cache_write_tokens: int = 0
    cache_read_tokens: int = 0

    @property
    def total(self) -> int:
        return (
            self.input_tokens
            + self.output_tokens
            + self.cache_read_tokens
            + self.cache_write_tokens
        )


class UsageEventPayload(_CamelPayload):
    timestamp: str | int = ""  # epoch milliseconds, usually string-encoded
    model: str = ""
    kind_label: str = ""
    token_usage: TokenUsagePayload | None = None
    user_email: str = ""


class PaginationPayload(_CamelPayload):
    has_next_page: bool = False


class UsageEventsResponse(_CamelPayload):
    usage_events: list[UsageEventPayload] = Field(default_factory=list)
    pagination: PaginationPayload = Field(default_factory=PaginationPayload)


# ── Legacy API (/admin/...) ──


class LegacyTeamMembersResponse(_Payload):
    members: list[TeamMemberPayload] = Field(default_factory=list)


class LegacyDailyUsagePayload(_Payload):
    date: dt.date
    lines_added: int = 0
    lines_deleted: int = 0
    suggestion_acceptance_rate: float = 0.0
    tabs_used: int = 0
    composer_used: int = 0
    chat_requests: int = 0
    most_used_model: str = ""
    most_used_extension: str = ""


class LegacyDailyUsageResponse(_Payload):
    usage: list[LegacyDailyUsagePayload] = Field(default_factory=list)


class LegacySpendingPayload(_Payload):
    member_email: str = ""
    spend_cents: int = 0
    premium_requests: int = 0
    date: dt.date


class LegacySpendingResponse(_Payload):
    spending: list[LegacySpendingPayload] = Field(default_factory=list)
    total: int = 0


class LegacyUsageEventPayload(_Payload):
    event_type: str = ""
    user_email: str = ""
    tokens_consumed: int = 0
    model: str = ""
    timestamp: dt.datetime


class LegacyUsageEventsResponse(_Payload):
    events: list[LegacyUsageEventPayload] = Field(default_factory=list)
    total: int = 0
