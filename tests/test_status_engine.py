#!/usr/bin/env python3
"""
Tests for the maintenance status engine.

Covers:
1. Date axis - due date from last completion plus interval days
2. Hours axis - due hours measured against the item's selected meter
3. Whichever comes first - DATE_OR_HOURS takes the worse axis
4. Due text and urgency score
5. List sorting and overall aircraft status
"""

import os
import time
from datetime import date, datetime, timedelta

import pytest

from airmx import (
    ComputedStatus,
    CurrentHours,
    HourMode,
    MaintenanceItem,
    StatusType,
    Thresholds,
    compute_all_statuses,
    compute_item_status,
    get_overall_status,
    get_status_color,
    get_status_label,
)
from airmx.status_engine import (
    add_days,
    calc_urgency_score,
    combine_statuses,
    days_between,
    format_due_text,
    parse_timestamp,
    start_of_day,
    status_from_remaining,
)

TODAY = date(2025, 6, 1)


def days_ago(days: int) -> str:
    return (TODAY - timedelta(days=days)).isoformat()


@pytest.fixture
def current():
    return CurrentHours(hobbs=1243.6, tach=1189.2, updated_at="2025-05-30T12:00:00")


@pytest.fixture
def thresholds():
    return Thresholds([30, 10, 3], [10, 5, 1])


def compute(item, current, thresholds, hour_mode=HourMode.BOTH):
    return compute_item_status(item, current, thresholds, hour_mode, today=TODAY)


# =============================================================================
# Unit Tests: Helpers
# =============================================================================


class TestDateHelpers:
    """Tests for day normalization and arithmetic."""

    def test_start_of_day_drops_time(self):
        assert start_of_day(datetime(2025, 6, 1, 18, 30)) == datetime(2025, 6, 1)

    def test_start_of_day_from_date(self):
        assert start_of_day(date(2025, 6, 1)) == datetime(2025, 6, 1)

    def test_parse_date_only_is_midnight(self):
        assert parse_timestamp("2024-07-01") == datetime(2024, 7, 1)

    def test_parse_timestamp_keeps_time(self):
        assert parse_timestamp("2024-07-01T14:30:00") == datetime(2024, 7, 1, 14, 30)

    def test_add_days_crosses_leap_day(self):
        assert add_days(datetime(2024, 2, 28), 2) == datetime(2024, 3, 1)

    def test_days_between_whole_days(self):
        assert days_between(datetime(2025, 6, 1), datetime(2025, 6, 24)) == 23

    def test_days_between_rounds_partial_day_up(self):
        assert days_between(datetime(2025, 6, 1), datetime(2025, 6, 1, 1)) == 1

    def test_days_between_negative(self):
        assert days_between(datetime(2025, 6, 1), datetime(2025, 4, 27)) == -35


@pytest.fixture
def new_york_tz():
    """Run the test with America/New_York as the local timezone."""
    old_tz = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if old_tz is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = old_tz
    time.tzset()


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
class TestDaylightSaving:
    """Remaining days count elapsed time across clock changes."""

    def test_fall_back_adds_an_hour(self, new_york_tz):
        # Clocks go back on 2026-11-01
        assert days_between(datetime(2026, 10, 30), datetime(2026, 11, 5)) == 7

    def test_spring_forward_loses_an_hour(self, new_york_tz):
        # Clocks go forward on 2026-03-08
        assert days_between(datetime(2026, 3, 5), datetime(2026, 3, 10, 0, 30)) == 5

    def test_item_due_after_fall_back(self, new_york_tz, current, thresholds):
        item = MaintenanceItem("1", "Annual Inspection", "DATE", interval_days=365,
                               last_completed_at="2025-11-05T00:00:00")
        result = compute_item_status(item, current, thresholds, HourMode.BOTH,
                                     today=date(2026, 10, 30))
        assert result.due_date == datetime(2026, 11, 5)
        assert result.days_remaining == 7
        assert result.due_text == "due in 7 days"

    def test_date_only_unaffected_in_summer(self, new_york_tz):
        assert days_between(datetime(2025, 6, 1), datetime(2025, 6, 24)) == 23


class TestStatusFromRemaining:
    """Tests for the threshold ladder."""

    def test_negative_is_overdue(self):
        assert status_from_remaining(-1, [30, 10, 3]) == StatusType.OVERDUE
        assert status_from_remaining(-0.1, [10, 5, 1]) == StatusType.OVERDUE

    def test_within_largest_threshold_is_due_soon(self):
        assert status_from_remaining(30, [30, 10, 3]) == StatusType.DUE_SOON
        assert status_from_remaining(0, [30, 10, 3]) == StatusType.DUE_SOON

    def test_beyond_thresholds_is_good(self):
        assert status_from_remaining(31, [30, 10, 3]) == StatusType.GOOD

    def test_threshold_order_irrelevant(self):
        assert status_from_remaining(23, [3, 30, 10]) == StatusType.DUE_SOON

    def test_no_thresholds(self):
        assert status_from_remaining(0, []) == StatusType.GOOD
        assert status_from_remaining(-1, []) == StatusType.OVERDUE


class TestCombineStatuses:
    """Tests for worse-of combination."""

    def test_overdue_dominates(self):
        assert combine_statuses(StatusType.GOOD, StatusType.OVERDUE) == StatusType.OVERDUE
        assert combine_statuses(StatusType.OVERDUE, StatusType.DUE_SOON) == StatusType.OVERDUE

    def test_due_soon_beats_good(self):
        assert combine_statuses(StatusType.DUE_SOON, StatusType.GOOD) == StatusType.DUE_SOON

    def test_good_and_good(self):
        assert combine_statuses(StatusType.GOOD, StatusType.GOOD) == StatusType.GOOD


class TestFormatDueText:
    """Tests for format_due_text."""

    def test_today_and_tomorrow(self):
        assert format_due_text(0) == "due today"
        assert format_due_text(1) == "due tomorrow"

    def test_days(self):
        assert format_due_text(2) == "due in 2 days"
        assert format_due_text(29) == "due in 29 days"

    def test_months(self):
        assert format_due_text(30) == "due in 1 month"
        assert format_due_text(45) == "due in 2 months"
        assert format_due_text(75) == "due in 3 months"
        assert format_due_text(365) == "due in 12 months"

    def test_days_overdue(self):
        assert format_due_text(-35) == "35 days overdue"

    def test_hours(self):
        assert format_due_text(None, 6.4) == "due in 6.4 hours"
        assert format_due_text(None, 0) == "due in 0.0 hours"
        assert format_due_text(None, -3.6) == "3.6 hours overdue"

    def test_both_axes_joined(self):
        assert format_due_text(23, 6.4) == "due in 23 days or due in 6.4 hours"

    def test_neither_axis(self):
        assert format_due_text() == "status unknown"


class TestUrgencyScore:
    """Tests for calc_urgency_score."""

    def test_exact_values(self):
        assert calc_urgency_score(StatusType.OVERDUE, -35) == 11035
        assert calc_urgency_score(StatusType.DUE_SOON, 23) == 5977
        assert calc_urgency_score(StatusType.DUE_SOON, None, 6.4) == pytest.approx(5093.6)
        assert calc_urgency_score(StatusType.GOOD, 365) == 635
        assert calc_urgency_score(StatusType.GOOD) == 0

    def test_far_future_capped(self):
        assert calc_urgency_score(StatusType.GOOD, 5000, 500) == 0

    def test_tiers_order(self):
        overdue = calc_urgency_score(StatusType.OVERDUE, 0, 0)
        due_soon = calc_urgency_score(StatusType.DUE_SOON, 0, 0)
        good = calc_urgency_score(StatusType.GOOD, 0, 0)
        assert overdue > due_soon > good


# =============================================================================
# Integration Tests: compute_item_status
# =============================================================================


class TestDateAxis:
    """Calendar-based items."""

    def test_annual_due_soon(self, current, thresholds):
        item = MaintenanceItem("1", "Annual Inspection", "DATE", interval_days=365,
                               last_completed_at=days_ago(342))
        result = compute(item, current, thresholds)
        assert result.days_remaining == 23
        assert result.status == StatusType.DUE_SOON
        assert result.due_text == "due in 23 days"
        assert result.hours_remaining is None
        assert result.due_hours is None

    def test_overdue(self, current, thresholds):
        item = MaintenanceItem("3", "ELT Battery", "DATE", interval_days=365,
                               last_completed_at=days_ago(400))
        result = compute(item, current, thresholds)
        assert result.days_remaining == -35
        assert result.status == StatusType.OVERDUE
        assert "35 days overdue" in result.due_text

    def test_due_date_is_completion_plus_interval(self, current, thresholds):
        item = MaintenanceItem("1", "Annual", "DATE", interval_days=365,
                               last_completed_at="2024-06-24")
        result = compute(item, current, thresholds)
        assert result.due_date == datetime(2025, 6, 24)

    def test_zero_days_on_due_date(self, current, thresholds):
        item = MaintenanceItem("1", "Annual", "DATE", interval_days=365,
                               last_completed_at=days_ago(365))
        result = compute(item, current, thresholds)
        assert result.due_date.date() == TODAY
        assert result.days_remaining == 0
        assert result.status == StatusType.DUE_SOON
        assert result.due_text == "due today"

    def test_time_of_today_ignored(self, current, thresholds):
        item = MaintenanceItem("1", "Annual", "DATE", interval_days=365,
                               last_completed_at=days_ago(342))
        evening = datetime(2025, 6, 1, 23, 59)
        result = compute_item_status(item, current, thresholds, HourMode.BOTH, evening)
        assert result.days_remaining == 23

    def test_completion_time_of_day_rounds_up(self, current, thresholds):
        """A due moment later in the day counts as a whole extra day."""
        item = MaintenanceItem("1", "Annual", "DATE", interval_days=365,
                               last_completed_at="2024-06-01T14:00:00")
        result = compute(item, current, thresholds)
        assert result.days_remaining == 1
        assert result.due_text == "due tomorrow"

    def test_good_beyond_thresholds(self, current, thresholds):
        item = MaintenanceItem("4", "Transponder Check", "DATE", interval_days=730,
                               last_completed_at=days_ago(365))
        result = compute(item, current, thresholds)
        assert result.days_remaining == 365
        assert result.status == StatusType.GOOD
        assert result.due_text == "due in 12 months"

    def test_missing_last_completed_is_unknown(self, current, thresholds):
        item = MaintenanceItem("1", "Annual", "DATE", interval_days=365)
        result = compute(item, current, thresholds)
        assert result.status == StatusType.GOOD
        assert result.due_date is None
        assert result.days_remaining is None
        assert result.due_text == "status unknown"
        assert result.urgency_score == 0

    def test_missing_interval_is_unknown(self, current, thresholds):
        item = MaintenanceItem("1", "Annual", "DATE", last_completed_at=days_ago(10))
        result = compute(item, current, thresholds)
        assert result.due_date is None
        assert result.due_text == "status unknown"

    def test_zero_interval_skips_axis(self, current, thresholds):
        item = MaintenanceItem("1", "Annual", "DATE", interval_days=0,
                               last_completed_at=days_ago(10))
        result = compute(item, current, thresholds)
        assert result.days_remaining is None

    def test_hour_fields_ignored_for_date_rule(self, current, thresholds):
        item = MaintenanceItem("1", "Annual", "DATE", interval_days=365,
                               interval_hours=50, last_completed_at=days_ago(100),
                               last_completed_hours=1000)
        result = compute(item, current, thresholds)
        assert result.hours_remaining is None
        assert result.due_hours is None
        assert result.status == StatusType.GOOD


class TestHoursAxis:
    """Hour-based items."""

    def test_oil_change_due_soon(self, current, thresholds):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               hour_source="HOBBS", last_completed_hours=1200)
        result = compute(item, current, thresholds)
        assert result.due_hours == 1250
        assert result.hours_remaining == pytest.approx(6.4)
        assert result.status == StatusType.DUE_SOON
        assert result.due_text == "due in 6.4 hours"
        assert result.due_date is None

    def test_hour_source_defaults_to_hobbs(self, current, thresholds):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               last_completed_hours=1200)
        result = compute(item, current, thresholds)
        assert result.hours_remaining == pytest.approx(6.4)

    def test_tach_source(self, current, thresholds):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               hour_source="TACH", last_completed_hours=1200)
        result = compute(item, current, thresholds)
        assert result.hours_remaining == pytest.approx(60.8)
        assert result.status == StatusType.GOOD

    def test_overdue_hours(self, current, thresholds):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               last_completed_hours=1190)
        result = compute(item, current, thresholds)
        assert result.hours_remaining == pytest.approx(-3.6)
        assert result.status == StatusType.OVERDUE
        assert result.due_text == "3.6 hours overdue"

    def test_zero_hours_remaining_is_due_soon(self, thresholds):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               last_completed_hours=1200)
        result = compute(item, CurrentHours(hobbs=1250), thresholds)
        assert result.hours_remaining == 0
        assert result.status == StatusType.DUE_SOON

    def test_missing_meter_reading(self, thresholds):
        """Due hours are known but nothing is remaining without a reading."""
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               hour_source="TACH", last_completed_hours=1200)
        result = compute(item, CurrentHours(hobbs=1243.6), thresholds)
        assert result.due_hours == 1250
        assert result.hours_remaining is None
        assert result.status == StatusType.GOOD
        assert result.due_text == "status unknown"

    def test_missing_last_completed_hours(self, current, thresholds):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50)
        result = compute(item, current, thresholds)
        assert result.due_hours is None
        assert result.due_text == "status unknown"

    def test_zero_last_completed_hours_counts(self, thresholds):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               last_completed_hours=0)
        result = compute(item, CurrentHours(hobbs=45), thresholds)
        assert result.hours_remaining == 5
        assert result.status == StatusType.DUE_SOON

    def test_hour_mode_does_not_select_meter(self, current, thresholds):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               hour_source="HOBBS", last_completed_hours=1200)
        by_tach_mode = compute(item, current, thresholds, HourMode.TACH)
        by_hobbs_mode = compute(item, current, thresholds, HourMode.HOBBS)
        assert by_tach_mode.hours_remaining == by_hobbs_mode.hours_remaining


class TestWhicheverComesFirst:
    """DATE_OR_HOURS items combine both axes."""

    def test_due_soon_by_date_good_by_hours(self, current, thresholds):
        item = MaintenanceItem("5", "100-Hour", "DATE_OR_HOURS", interval_days=365,
                               interval_hours=200, last_completed_at=days_ago(342),
                               last_completed_hours=1100)
        result = compute(item, current, thresholds)
        assert result.days_remaining == 23
        assert result.hours_remaining == pytest.approx(56.4)
        assert result.status == StatusType.DUE_SOON
        assert result.due_text == "due in 23 days or due in 56.4 hours"

    def test_overdue_by_hours_good_by_date(self, current, thresholds):
        item = MaintenanceItem("5", "100-Hour", "DATE_OR_HOURS", interval_days=365,
                               interval_hours=100, last_completed_at=days_ago(30),
                               last_completed_hours=1100)
        result = compute(item, current, thresholds)
        assert result.status == StatusType.OVERDUE

    def test_only_date_axis_populated(self, current, thresholds):
        item = MaintenanceItem("5", "100-Hour", "DATE_OR_HOURS", interval_days=365,
                               interval_hours=100, last_completed_at=days_ago(342))
        result = compute(item, current, thresholds)
        assert result.hours_remaining is None
        assert result.status == StatusType.DUE_SOON
        assert result.due_text == "due in 23 days"

    def test_neither_axis_populated(self, current, thresholds):
        item = MaintenanceItem("5", "100-Hour", "DATE_OR_HOURS")
        result = compute(item, current, thresholds)
        assert result.status == StatusType.GOOD
        assert result.due_text == "status unknown"


class TestEngineProperties:
    """Properties that hold across inputs."""

    def test_status_never_improves_as_days_shrink(self, current, thresholds):
        previous = StatusType.GOOD
        for ago in range(300, 420):
            item = MaintenanceItem("1", "Annual", "DATE", interval_days=365,
                                   last_completed_at=days_ago(ago))
            status = compute(item, current, thresholds).status
            assert status.severity >= previous.severity
            previous = status

    def test_status_never_improves_as_hours_shrink(self, thresholds):
        previous = StatusType.GOOD
        item = MaintenanceItem("2", "Oil", "HOURS", interval_hours=50,
                               last_completed_hours=1200)
        for tenth in range(12300, 12600):
            status = compute(item, CurrentHours(hobbs=tenth / 10), thresholds).status
            assert status.severity >= previous.severity
            previous = status

    def test_completing_on_due_date_reproduces_interval(self, current, thresholds):
        item = MaintenanceItem("5", "100-Hour", "DATE_OR_HOURS", interval_days=365,
                               interval_hours=100, last_completed_at=days_ago(200),
                               last_completed_hours=1150)
        first = compute(item, current, thresholds)

        again = MaintenanceItem("5", "100-Hour", "DATE_OR_HOURS", interval_days=365,
                                interval_hours=100,
                                last_completed_at=first.due_date.isoformat(),
                                last_completed_hours=first.due_hours)
        second = compute_item_status(
            again, CurrentHours(hobbs=first.due_hours), thresholds, HourMode.BOTH,
            today=first.due_date,
        )
        assert second.days_remaining == 365
        assert second.hours_remaining == 100
        assert second.due_date == add_days(first.due_date, 365)
        assert second.due_hours == first.due_hours + 100

    def test_does_not_modify_item(self, current, thresholds):
        item = MaintenanceItem("1", "Annual", "DATE", interval_days=365,
                               last_completed_at="2024-06-24")
        compute(item, current, thresholds)
        assert item.last_completed_at == "2024-06-24"
        assert item.interval_days == 365


# =============================================================================
# Aggregation
# =============================================================================


class TestComputeAllStatuses:
    """Tests for compute_all_statuses."""

    def test_sorted_by_urgency(self, current, thresholds):
        items = [
            MaintenanceItem("4", "Transponder", "DATE", interval_days=730,
                            last_completed_at=days_ago(365)),
            MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                            last_completed_hours=1200),
            MaintenanceItem("3", "ELT Battery", "DATE", interval_days=365,
                            last_completed_at=days_ago(400)),
            MaintenanceItem("1", "Annual", "DATE", interval_days=365,
                            last_completed_at=days_ago(342)),
        ]
        results = compute_all_statuses(items, current, thresholds, HourMode.BOTH, TODAY)
        assert [r.item.id for r in results] == ["3", "1", "2", "4"]
        scores = [r.urgency_score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_input_order(self, current, thresholds):
        items = [
            MaintenanceItem(str(i), f"Item {i}", "DATE", interval_days=365,
                            last_completed_at=days_ago(100))
            for i in range(5)
        ]
        results = compute_all_statuses(items, current, thresholds, HourMode.BOTH, TODAY)
        assert [r.item.id for r in results] == ["0", "1", "2", "3", "4"]

    def test_empty(self, current, thresholds):
        assert compute_all_statuses([], current, thresholds, HourMode.BOTH, TODAY) == []


class TestGetOverallStatus:
    """Tests for get_overall_status."""

    @staticmethod
    def make(status):
        item = MaintenanceItem("x", "x", "DATE")
        return ComputedStatus(item=item, status=status)

    def test_empty_is_good(self):
        assert get_overall_status([]) == StatusType.GOOD

    def test_any_overdue(self):
        statuses = [self.make(StatusType.GOOD), self.make(StatusType.OVERDUE),
                    self.make(StatusType.DUE_SOON)]
        assert get_overall_status(statuses) == StatusType.OVERDUE

    def test_due_soon_without_overdue(self):
        statuses = [self.make(StatusType.GOOD), self.make(StatusType.DUE_SOON)]
        assert get_overall_status(statuses) == StatusType.DUE_SOON

    def test_all_good(self):
        assert get_overall_status([self.make(StatusType.GOOD)]) == StatusType.GOOD


class TestPresentation:
    """Tests for get_status_color / get_status_label."""

    def test_default_colors(self):
        assert get_status_color(StatusType.GOOD) == "#34C759"
        assert get_status_color(StatusType.DUE_SOON) == "#FFD60A"
        assert get_status_color(StatusType.OVERDUE) == "#FF3B30"

    def test_custom_palette(self):
        palette = {"statusGreen": "green", "statusYellow": "yellow", "statusRed": "red"}
        assert get_status_color(StatusType.OVERDUE, palette) == "red"
        assert get_status_color(StatusType.GOOD, palette) == "green"

    def test_labels(self):
        assert get_status_label(StatusType.GOOD) == "GOOD"
        assert get_status_label(StatusType.DUE_SOON) == "DUE SOON"
        assert get_status_label(StatusType.OVERDUE) == "OVERDUE"
        assert get_status_label(None) == "UNKNOWN"
