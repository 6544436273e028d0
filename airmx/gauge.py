"""Remaining-life gauge data for a maintenance item."""

from dataclasses import dataclass
from typing import Optional

from .computed_status import ComputedStatus
from .status import StatusType

_GAUGE_STATUS = {
    StatusType.GOOD: "green",
    StatusType.DUE_SOON: "yellow",
    StatusType.OVERDUE: "red",
}


@dataclass
class GaugeData:
    """Label, fill fraction (0..1) and colour key for a remaining gauge."""

    label: str
    percent: float
    gauge_status: str


def _hours_label(hours_remaining: float) -> str:
    return f"{hours_remaining:.1f} hrs"


def _days_label(days_remaining: float) -> str:
    return f"{round(days_remaining)} days"


def compute_gauge_data(
    days_remaining: Optional[float] = None,
    hours_remaining: Optional[float] = None,
    interval_days: Optional[float] = None,
    interval_hours: Optional[float] = None,
    status: Optional[StatusType] = None,
) -> GaugeData:
    """
    Fraction of the interval still remaining.

    When both axes are known the one with less life left is shown, preferring
    hours on a tie. Overdue items always show an empty gauge.
    """
    gauge_status = _GAUGE_STATUS.get(status, "green")

    has_date = days_remaining is not None and bool(interval_days) and interval_days > 0
    has_hours = (
        hours_remaining is not None and bool(interval_hours) and interval_hours > 0
    )

    if has_date and has_hours:
        date_percent = max(0, days_remaining / interval_days)
        hours_percent = max(0, hours_remaining / interval_hours)
        if hours_percent <= date_percent:
            label, percent = _hours_label(hours_remaining), hours_percent
        else:
            label, percent = _days_label(days_remaining), date_percent
    elif has_hours:
        label = _hours_label(hours_remaining)
        percent = max(0, hours_remaining / interval_hours)
    elif has_date:
        label = _days_label(days_remaining)
        percent = max(0, days_remaining / interval_days)
    else:
        label, percent = "N/A", 0

    if status == StatusType.OVERDUE:
        percent = 0

    return GaugeData(label=label, percent=min(1, percent), gauge_status=gauge_status)


def gauge_for(computed: ComputedStatus) -> GaugeData:
    """Gauge data for a computed item status."""
    return compute_gauge_data(
        computed.days_remaining,
        computed.hours_remaining,
        computed.item.interval_days,
        computed.item.interval_hours,
        computed.status,
    )
