"""Date helpers and day-bucket aggregation for daily usage rows."""

from __future__ import annotations

import datetime as dt
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cursor_exporter.models.records import DailyUsageRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cursor_exporter.models.wire import DailyUsageRow

_EPOCH = dt.date(1970, 1, 1)
_MS_PER_DAY = 86_400_000


def day_start_ms(day: dt.date) -> int:
    """Epoch milliseconds of 00:00:00.000 UTC on ``day``."""
    return (day - _EPOCH).days * _MS_PER_DAY


def day_end_ms(day: dt.date) -> int:
    """Epoch milliseconds of 23:59:59.999 UTC on ``day`` (inclusive end)."""
    return day_start_ms(day) + _MS_PER_DAY - 1


def ms_to_datetime(epoch_ms: int) -> dt.datetime:
    return dt.datetime(1970, 1, 1, tzinfo=dt.UTC) + dt.timedelta(milliseconds=epoch_ms)


def ms_to_date(epoch_ms: int) -> dt.date:
    """UTC calendar day of an epoch-millisecond instant."""
    return _EPOCH + dt.timedelta(days=epoch_ms // _MS_PER_DAY)


@dataclass
class _DayTotals:
    """Accumulated counters for one calendar day."""

    lines_added: int = 0
    lines_deleted: int = 0
    accepts: int = 0
    rejects: int = 0
    tabs_used: int = 0
    composer_used: int = 0
    chat_requests: int = 0
    model_counts: Counter[str] = field(default_factory=Counter)
    extension_counts: Counter[str] = field(default_factory=Counter)

    def add(self, row: DailyUsageRow) -> None:
        self.lines_added += row.total_lines_added
        self.lines_deleted += row.total_lines_deleted
        self.accepts += row.total_accepts
        self.rejects += row.total_rejects
        self.tabs_used += row.total_tabs_accepted
        self.composer_used += row.composer_requests
        self.chat_requests += row.chat_requests
        if row.most_used_model:
            self.model_counts[row.most_used_model] += 1
        if row.tab_most_used_extension:
            self.extension_counts[row.tab_most_used_extension] += 1

    @property
    def acceptance_rate(self) -> float:
        suggestions = self.accepts + self.rejects
        if suggestions <= 0:
            return 0.0
        return self.accepts / suggestions

    def to_record(self, day: dt.date) -> DailyUsageRecord:
        return DailyUsageRecord(
            date=day,
            lines_added=self.lines_added,
            lines_deleted=self.lines_deleted,
            suggestion_acceptance_rate=self.acceptance_rate,
            tabs_used=self.tabs_used,
            composer_used=self.composer_used,
            chat_requests=self.chat_requests,
            most_used_model=most_frequent(self.model_counts),
            most_used_extension=most_frequent(self.extension_counts),
        )


def most_frequent(counts: Counter[str]) -> str:
    """Return the value with the highest count, or '' when there is none.

    Ties go to the value seen first: a Counter keeps insertion order and the
    scan only replaces the leader on a strictly greater count.
    """
    best = ""
    best_count = 0
    for value, count in counts.items():
        if count > best_count:
            best, best_count = value, count
    return best


def aggregate_daily_rows(rows: Iterable[DailyUsageRow]) -> list[DailyUsageRecord]:
    """Fold raw usage rows into one record per UTC day, oldest first."""
    by_day: dict[dt.date, _DayTotals] = {}
    for row in rows:
        day = ms_to_date(row.date)
        totals = by_day.get(day)
        if totals is None:
            totals = by_day[day] = _DayTotals()
        totals.add(row)

    return [by_day[day].to_record(day) for day in sorted(by_day)]
