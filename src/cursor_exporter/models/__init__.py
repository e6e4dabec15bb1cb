"""Pydantic models for the Cursor exporter."""

from cursor_exporter.models.records import (
    DailyUsageRecord,
    SpendingRecord,
    TeamMember,
    UsageEvent,
)

__all__ = [
    "DailyUsageRecord",
    "SpendingRecord",
    "TeamMember",
    "UsageEvent",
]
