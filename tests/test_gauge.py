#!/usr/bin/env python3
"""Tests for remaining-gauge calculations."""

import pytest

from airmx import ComputedStatus, MaintenanceItem, StatusType, compute_gauge_data, gauge_for


class TestComputeGaugeData:
    """Tests for compute_gauge_data."""

    def test_hours_gauge_when_hours_lower(self):
        gauge = compute_gauge_data(100, 6.4, 365, 50, StatusType.DUE_SOON)
        assert gauge.label == "6.4 hrs"
        assert gauge.percent == pytest.approx(6.4 / 50)
        assert gauge.gauge_status == "yellow"

    def test_date_gauge_when_date_lower(self):
        gauge = compute_gauge_data(10, 40, 365, 50, StatusType.DUE_SOON)
        assert gauge.label == "10 days"
        assert gauge.percent == pytest.approx(10 / 365)

    def test_tie_prefers_hours(self):
        gauge = compute_gauge_data(50, 10, 100, 20, StatusType.GOOD)
        assert gauge.label == "10.0 hrs"
        assert gauge.percent == pytest.approx(0.5)

    def test_date_only(self):
        gauge = compute_gauge_data(23, None, 365, None, StatusType.DUE_SOON)
        assert gauge.label == "23 days"
        assert gauge.percent == pytest.approx(23 / 365)

    def test_hours_only(self):
        gauge = compute_gauge_data(None, 25, None, 50, StatusType.GOOD)
        assert gauge.label == "25.0 hrs"
        assert gauge.percent == pytest.approx(0.5)
        assert gauge.gauge_status == "green"

    def test_no_info(self):
        gauge = compute_gauge_data()
        assert gauge.label == "N/A"
        assert gauge.percent == 0
        assert gauge.gauge_status == "green"

    def test_zero_interval_ignored(self):
        gauge = compute_gauge_data(10, None, 0, None, StatusType.GOOD)
        assert gauge.label == "N/A"

    def test_overdue_forced_empty(self):
        gauge = compute_gauge_data(-35, None, 365, None, StatusType.OVERDUE)
        assert gauge.percent == 0
        assert gauge.gauge_status == "red"
        assert gauge.label == "-35 days"

    def test_capped_at_full(self):
        gauge = compute_gauge_data(400, None, 365, None, StatusType.GOOD)
        assert gauge.percent == 1


class TestGaugeFor:
    """Tests for gauge_for wrapper."""

    def test_uses_item_intervals(self):
        item = MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                               last_completed_hours=1200)
        svc = ComputedStatus(item=item, status=StatusType.DUE_SOON,
                             due_hours=1250, hours_remaining=10)
        gauge = gauge_for(svc)
        assert gauge.label == "10.0 hrs"
        assert gauge.percent == pytest.approx(0.2)
