"""Normalized records returned by every API client variant."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class TeamMember(_Record):
    """A member of the Cursor team."""

    name: str = ""
    email: str = ""
    role: str = ""  # open set, e.g. owner, member, free-owner


class DailyUsageRecord(_Record):
    """Team-wide activity for one calendar day."""

    date: dt.date
    lines_added: int = 0
    lines_deleted: int = 0
    suggestion_acceptance_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    tabs_used: int = 0
    composer_used: int = 0
    chat_requests: int = 0
    most_used_model: str = ""
    most_used_extension: str = ""


class SpendingRecord(_Record):
    """Spend of one member in one billing cycle."""

    member_email: str
    spend_cents: int = Field(default=0, ge=0)
    premium_requests: int = Field(default=0, ge=0)
    date: dt.date


class UsageEvent(_Record):
    """A single metered usage event."""

    event_type: str = ""
    user_email: str = ""
    tokens_consumed: int = Field(default=0, ge=0)
    model: str = ""
    timestamp: dt.datetime
