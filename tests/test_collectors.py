"""Tests for the four domain collectors."""

from __future__ import annotations

import datetime as dt

import pytest
from fakes import FakeDataSource, sample_values
from result import Err, Ok

from cursor_exporter.models.records import (
    DailyUsageRecord,
    SpendingRecord,
    TeamMember,
    UsageEvent,
)
from cursor_exporter.services.daily_usage import DailyUsageCollector
from cursor_exporter.services.spending import SpendingCollector
from cursor_exporter.services.team_members import TeamMembersCollector
from cursor_exporter.services.usage_events import UsageEventsCollector


def _sum_family(values: dict, name: str) -> float:
    return sum(value for (sample, _), value in values.items() if sample == name)


def _event(user: str, model: str, tokens: int, kind: str = "Usage-based") -> UsageEvent:
    return UsageEvent(
        event_type=kind,
        user_email=user,
        tokens_consumed=tokens,
        model=model,
        timestamp=dt.datetime(2023, 1, 10, tzinfo=dt.UTC),
    )


class TestTeamMembersCollector:
    def test_total_and_per_role(self, fake_source: FakeDataSource) -> None:
        fake_source.members = Ok(
            [
                TeamMember(name="A", email="a@example.com", role="owner"),
                TeamMember(name="B", email="b@example.com", role="member"),
                TeamMember(name="C", email="c@example.com", role="member"),
                TeamMember(name="D", email="d@example.com", role="free-owner"),
            ]
        )
        values = sample_values(TeamMembersCollector(fake_source).collect())

        assert values[("cursor_team_members_total", ())] == 4
        assert values[("cursor_team_members_by_role", (("role", "member"),))] == 2
        assert values[("cursor_team_members_by_role", (("role", "owner"),))] == 1
        assert values[("cursor_team_members_by_role", (("role", "free-owner"),))] == 1

    def test_empty_roster_emits_only_total(self, fake_source: FakeDataSource) -> None:
        families = TeamMembersCollector(fake_source).collect()
        assert sample_values(families) == {("cursor_team_members_total", ()): 0}

    def test_client_error_yields_nothing(
        self, fake_source: FakeDataSource, caplog: pytest.LogCaptureFixture
    ) -> None:
        fake_source.members = Err("API request failed with status 401: Unauthorized")
        assert TeamMembersCollector(fake_source).collect() == []
        assert "Failed to get team members" in caplog.text

    def test_describe_is_static(self, fake_source: FakeDataSource) -> None:
        names = [family.name for family in TeamMembersCollector(fake_source).describe()]
        assert names == ["cursor_team_members_total", "cursor_team_members_by_role"]
        assert fake_source.calls == []


class TestDailyUsageCollector:
    def test_uses_thirty_day_window(self, fake_source: FakeDataSource, fixed_clock) -> None:
        DailyUsageCollector(fake_source, clock=fixed_clock).collect()
        assert fake_source.calls == [
            ("get_daily_usage", (dt.date(2023, 1, 1), dt.date(2023, 1, 31)))
        ]

    def test_samples_per_day(self, fake_source: FakeDataSource, fixed_clock) -> None:
        fake_source.daily = Ok(
            [
                DailyUsageRecord(
                    date=dt.date(2023, 1, 1),
                    lines_added=100,
                    lines_deleted=50,
                    suggestion_acceptance_rate=0.85,
                    tabs_used=25,
                    composer_used=10,
                    chat_requests=15,
                    most_used_model="gpt-4",
                    most_used_extension="typescript",
                ),
                DailyUsageRecord(date=dt.date(2023, 1, 2), lines_added=7),
            ]
        )
        values = sample_values(DailyUsageCollector(fake_source, clock=fixed_clock).collect())

        day1 = (("date", "2023-01-01"),)
        assert values[("cursor_daily_lines_added_total", day1)] == 100
        assert values[("cursor_daily_lines_deleted_total", day1)] == 50
        assert values[("cursor_daily_suggestion_acceptance_rate", day1)] == 0.85
        assert values[("cursor_daily_tabs_used_total", day1)] == 25
        assert values[("cursor_daily_composer_used_total", day1)] == 10
        assert values[("cursor_daily_chat_requests_total", day1)] == 15
        model = (("date", "2023-01-01"), ("model", "gpt-4"))
        extension = (("date", "2023-01-01"), ("extension", "typescript"))
        assert values[("cursor_daily_model_usage", model)] == 1
        assert values[("cursor_daily_extension_usage", extension)] == 1
        # Day two has no model or extension indicator.
        assert len(values) == 6 + 2 + 6

    def test_client_error_yields_nothing(self, fake_source: FakeDataSource, fixed_clock) -> None:
        fake_source.daily = Err("boom")
        assert DailyUsageCollector(fake_source, clock=fixed_clock).collect() == []


class TestSpendingCollector:
    def test_per_member_and_totals(self, fake_source: FakeDataSource) -> None:
        cycle = dt.date(2023, 1, 1)
        fake_source.spending = Ok(
            [
                SpendingRecord(
                    member_email="a@example.com",
                    spend_cents=1500,
                    premium_requests=5,
                    date=cycle,
                ),
                SpendingRecord(
                    member_email="b@example.com",
                    spend_cents=2500,
                    premium_requests=8,
                    date=cycle,
                ),
            ]
        )
        values = sample_values(SpendingCollector(fake_source).collect())

        labels = (("date", "2023-01-01"), ("member_email", "a@example.com"))
        assert values[("cursor_spending_by_member_cents", labels)] == 1500
        assert values[("cursor_premium_requests_by_member_total", labels)] == 5
        assert values[("cursor_spending_total_cents", ())] == 4000
        assert values[("cursor_premium_requests_total", ())] == 13
        assert fake_source.calls == [("get_spending", (1000,))]

    def test_duplicate_member_and_date_keeps_first(
        self, fake_source: FakeDataSource, caplog: pytest.LogCaptureFixture
    ) -> None:
        cycle = dt.date(2023, 1, 1)
        fake_source.spending = Ok(
            [
                SpendingRecord(member_email="a@example.com", spend_cents=100, date=cycle),
                SpendingRecord(member_email="a@example.com", spend_cents=999, date=cycle),
            ]
        )
        families = SpendingCollector(fake_source).collect()

        by_member = [s for f in families for s in f.samples if s.name.endswith("_by_member_cents")]
        assert [s.value for s in by_member] == [100]
        assert sample_values(families)[("cursor_spending_total_cents", ())] == 100
        assert "Duplicate spend record for a@example.com" in caplog.text

    def test_no_records_still_reports_zero_totals(self, fake_source: FakeDataSource) -> None:
        values = sample_values(SpendingCollector(fake_source).collect())
        assert values == {
            ("cursor_spending_total_cents", ()): 0,
            ("cursor_premium_requests_total", ()): 0,
        }


class TestUsageEventsCollector:
    def test_counts_and_token_sums(self, fake_source: FakeDataSource, fixed_clock) -> None:
        fake_source.events = Ok(
            [
                _event("a@example.com", "gpt-4", 165, kind="Included in Business"),
                _event("a@example.com", "claude-3", 40),
                _event("b@example.com", "gpt-4", 10),
            ]
        )
        values = sample_values(UsageEventsCollector(fake_source, clock=fixed_clock).collect())

        assert values[("cursor_usage_events_total", ())] == 3
        assert values[("cursor_usage_events_by_type_total", (("event_type", "Usage-based"),))] == 2
        user_a = (("user_email", "a@example.com"),)
        assert values[("cursor_usage_events_by_user_total", user_a)] == 2
        assert values[("cursor_usage_events_by_model_total", (("model", "gpt-4"),))] == 2
        assert values[("cursor_tokens_consumed_total", ())] == 215
        assert values[("cursor_tokens_consumed_by_model_total", (("model", "gpt-4"),))] == 175
        assert values[("cursor_tokens_consumed_by_model_total", (("model", "claude-3"),))] == 40
        user_b = (("user_email", "b@example.com"),)
        assert values[("cursor_tokens_consumed_by_user_total", user_a)] == 205
        assert values[("cursor_tokens_consumed_by_user_total", user_b)] == 10

    def test_per_key_token_sums_add_up_to_total(
        self, fake_source: FakeDataSource, fixed_clock
    ) -> None:
        fake_source.events = Ok(
            [_event(f"u{i % 3}@example.com", f"m{i % 4}", i * 7) for i in range(20)]
        )
        values = sample_values(UsageEventsCollector(fake_source, clock=fixed_clock).collect())

        total = values[("cursor_tokens_consumed_total", ())]
        by_model = _sum_family(values, "cursor_tokens_consumed_by_model_total")
        by_user = _sum_family(values, "cursor_tokens_consumed_by_user_total")
        assert total == sum(i * 7 for i in range(20))
        assert by_model == total
        assert by_user == total

    def test_fixed_window_and_page_size(self, fake_source: FakeDataSource, fixed_clock) -> None:
        UsageEventsCollector(fake_source, clock=fixed_clock).collect()
        assert fake_source.calls == [
            ("get_usage_events", ("", 5000, dt.date(2023, 1, 1), dt.date(2023, 1, 31)))
        ]

    def test_custom_namespace(self, fake_source: FakeDataSource, fixed_clock) -> None:
        collector = UsageEventsCollector(fake_source, "acme", clock=fixed_clock)
        assert all(d.name.startswith("acme_") for d in collector.descriptors)
