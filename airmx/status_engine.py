"""
Maintenance status engine.

Given an item's rule, its last-completed markers, the aircraft's current
meter readings and warning thresholds, derives:
- status (good / due soon / overdue)
- due date and/or due hours, with the remaining margin on each axis
- a human-readable due text
- an urgency score used only for ordering

Everything here is pure. "Today" is passed in by the caller; when it is
omitted the local date is used.
"""

import math
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from .computed_status import ComputedStatus
from .current_hours import CurrentHours
from .maintenance_item import MaintenanceItem
from .rule import HourMode, RuleType
from .status import StatusType
from .thresholds import Thresholds

SECONDS_PER_DAY = 24 * 60 * 60

DEFAULT_STATUS_COLORS = {
    "statusGreen": "#34C759",
    "statusYellow": "#FFD60A",
    "statusRed": "#FF3B30",
}

_STATUS_LABELS = {
    StatusType.GOOD: "GOOD",
    StatusType.DUE_SOON: "DUE SOON",
    StatusType.OVERDUE: "OVERDUE",
}


# =============================================================================
# Date helpers
# =============================================================================


def start_of_day(today: Optional[Union[date, datetime]] = None) -> datetime:
    """Midnight of the given day (local date.today() when omitted)."""
    if today is None:
        today = date.today()
    if isinstance(today, datetime):
        today = today.date()
    return datetime.combine(today, time.min)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 date or timestamp into a naive local datetime.

    Date-only strings are read as local midnight. Timezone-aware values are
    converted to local time.
    """
    parsed = isoparse(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def add_days(start: datetime, days: int) -> datetime:
    """Calendar-day addition; time of day is kept."""
    return start + relativedelta(days=days)


def days_between(start: datetime, end: datetime) -> int:
    """
    Whole days from start to end, rounding any partial day up.

    Both are naive local times. Elapsed time is measured between their real
    instants, so a daylight-saving change in between adds or removes an hour.
    """
    elapsed = end.timestamp() - start.timestamp()
    return math.ceil(elapsed / SECONDS_PER_DAY)


# =============================================================================
# Status helpers
# =============================================================================


def status_from_remaining(remaining: float, thresholds: Iterable[float]) -> StatusType:
    """
    Place a remaining margin on the threshold ladder.

    Negative margin is overdue; a margin within any threshold is due soon.
    """
    if remaining < 0:
        return StatusType.OVERDUE
    for threshold in sorted(thresholds, reverse=True):
        if remaining <= threshold:
            return StatusType.DUE_SOON
    return StatusType.GOOD


def combine_statuses(first: StatusType, second: StatusType) -> StatusType:
    """Worse of two statuses (overdue > due soon > good)."""
    return first if first.severity >= second.severity else second


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_due_text(
    days_remaining: Optional[int] = None, hours_remaining: Optional[float] = None
) -> str:
    """Describe when an item is due, e.g. 'due in 23 days or due in 6.4 hours'."""
    parts = []

    if days_remaining is not None:
        if days_remaining < 0:
            parts.append(f"{abs(days_remaining)} days overdue")
        elif days_remaining == 0:
            parts.append("due today")
        elif days_remaining == 1:
            parts.append("due tomorrow")
        elif days_remaining < 30:
            parts.append(f"due in {days_remaining} days")
        else:
            months = _round_half_up(days_remaining / 30)
            parts.append(f"due in {months} month{'s' if months > 1 else ''}")

    if hours_remaining is not None:
        if hours_remaining < 0:
            parts.append(f"{abs(hours_remaining):.1f} hours overdue")
        else:
            parts.append(f"due in {hours_remaining:.1f} hours")

    if not parts:
        return "status unknown"
    return " or ".join(parts)


def calc_urgency_score(
    status: StatusType,
    days_remaining: Optional[int] = None,
    hours_remaining: Optional[float] = None,
) -> float:
    """Sort key for prioritizing items; higher = more urgent. No display meaning."""
    score = 0
    if status == StatusType.OVERDUE:
        score += 10000
    elif status == StatusType.DUE_SOON:
        score += 5000

    if days_remaining is not None:
        score += 1000 - min(days_remaining, 1000)
    if hours_remaining is not None:
        score += 100 - min(hours_remaining, 100)
    return score


# =============================================================================
# Engine
# =============================================================================


def compute_item_status(
    item: MaintenanceItem,
    current: CurrentHours,
    thresholds: Thresholds,
    hour_mode: HourMode,
    today: Optional[Union[date, datetime]] = None,
) -> ComputedStatus:
    """
    Compute the status of a single maintenance item.

    Logic:
    - Date axis (DATE, DATE_OR_HOURS): due = last completed + interval days,
      needs both intervalDays and lastCompletedAt
    - Hours axis (HOURS, DATE_OR_HOURS): due = last completed hours + interval,
      remaining measured against the meter named by item.hour_source
    - DATE_OR_HOURS takes the worse of the two axes (whichever comes first)
    - An axis with missing data is skipped; the item never raises for it

    hour_mode is accepted for callers but does not select the meter.
    """
    midnight = start_of_day(today)

    due_date = None
    due_hours = None
    days_remaining = None
    hours_remaining = None
    date_status = StatusType.GOOD
    hours_status = StatusType.GOOD

    if item.uses_date and item.interval_days and item.last_completed_at:
        last_completed = parse_timestamp(item.last_completed_at)
        due_date = add_days(last_completed, item.interval_days)
        days_remaining = days_between(midnight, due_date)
        date_status = status_from_remaining(
            days_remaining, thresholds.date_threshold_days
        )

    if (
        item.uses_hours
        and item.interval_hours is not None
        and item.last_completed_hours is not None
    ):
        due_hours = item.last_completed_hours + item.interval_hours
        source_hours = current.reading_for(item.hour_source)
        if source_hours is not None:
            hours_remaining = due_hours - source_hours
            hours_status = status_from_remaining(
                hours_remaining, thresholds.hour_thresholds
            )

    if item.rule_type == RuleType.DATE:
        status = date_status
    elif item.rule_type == RuleType.HOURS:
        status = hours_status
    else:
        status = combine_statuses(date_status, hours_status)

    return ComputedStatus(
        item=item,
        status=status,
        due_date=due_date,
        due_hours=due_hours,
        days_remaining=days_remaining,
        hours_remaining=hours_remaining,
        due_text=format_due_text(days_remaining, hours_remaining),
        urgency_score=calc_urgency_score(status, days_remaining, hours_remaining),
    )


def compute_all_statuses(
    items: Iterable[MaintenanceItem],
    current: CurrentHours,
    thresholds: Thresholds,
    hour_mode: HourMode,
    today: Optional[Union[date, datetime]] = None,
) -> List[ComputedStatus]:
    """Compute every item's status, most urgent first (stable for ties)."""
    statuses = [
        compute_item_status(item, current, thresholds, hour_mode, today)
        for item in items
    ]
    return sorted(statuses, key=lambda s: s.urgency_score, reverse=True)


def get_overall_status(statuses: Iterable[ComputedStatus]) -> StatusType:
    """Aircraft-level status: the worst item status, good when empty."""
    overall = StatusType.GOOD
    for computed in statuses:
        overall = combine_statuses(overall, computed.status)
    return overall


def get_status_color(
    status: StatusType, colors: Optional[Dict[str, str]] = None
) -> str:
    """Colour for a status from a palette with statusGreen/Yellow/Red keys."""
    palette = colors or DEFAULT_STATUS_COLORS
    if status == StatusType.GOOD:
        return palette["statusGreen"]
    if status == StatusType.OVERDUE:
        return palette["statusRed"]
    return palette["statusYellow"]


def get_status_label(status: StatusType) -> str:
    """Display label for a status."""
    return _STATUS_LABELS.get(status, "UNKNOWN")
