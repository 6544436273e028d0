"""
Notification decisions for maintenance status changes.

Decides which items should alert by diffing current statuses against the
status last notified per item id. Delivery is left to the caller.
"""

import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .computed_status import ComputedStatus
from .status import StatusType


class NotificationState:
    """Statuses last notified, keyed by maintenance item id."""

    def __init__(
            self,
            last_notified_status: Optional[Dict[str, StatusType]] = None,
            last_weekly_digest: Optional[str] = None,
    ):
        self.last_notified_status = dict(last_notified_status or {})
        self.last_weekly_digest = last_weekly_digest


def get_status_changes(
    statuses: Iterable[ComputedStatus], state: NotificationState
) -> List[ComputedStatus]:
    """
    Statuses that warrant a new notification.

    - Entering OVERDUE from anything else (including never seen)
    - Entering DUE_SOON from GOOD or never seen
    """
    changed = []
    for computed in statuses:
        previous = state.last_notified_status.get(computed.item.id)
        if computed.status == StatusType.OVERDUE:
            if previous != StatusType.OVERDUE:
                changed.append(computed)
        elif computed.status == StatusType.DUE_SOON:
            if previous not in (StatusType.DUE_SOON, StatusType.OVERDUE):
                changed.append(computed)
    return changed


def create_notification_state(
    statuses: Iterable[ComputedStatus], now: Optional[datetime] = None
) -> NotificationState:
    """Fresh state remembering every current status."""
    now = now or datetime.now()
    return NotificationState(
        {computed.item.id: computed.status for computed in statuses},
        now.isoformat(),
    )


def update_notification_state(
    statuses: Iterable[ComputedStatus], state: NotificationState
) -> NotificationState:
    """Copy of state with current statuses recorded. The input is not modified."""
    updated = NotificationState(state.last_notified_status, state.last_weekly_digest)
    for computed in statuses:
        updated.last_notified_status[computed.item.id] = computed.status
    return updated


def format_notification(computed: ComputedStatus) -> Tuple[str, str]:
    """Title and body for an item's notification."""
    name = computed.item.name
    if computed.status == StatusType.OVERDUE:
        return "Overdue", f"{name} is overdue"

    hours = computed.hours_remaining
    days = computed.days_remaining
    if hours is not None and hours >= 0:
        body = f"{name} due in {math.floor(hours + 0.5)}h"
    elif days is not None and days >= 0:
        body = f"{name} due in {days} day{'s' if days != 1 else ''}"
    else:
        body = f"{name} is due"
    return "Due soon", body


def weekly_digest(statuses: Iterable[ComputedStatus], tail: str) -> Tuple[str, str]:
    """Title and body summarizing an aircraft's due and overdue items."""
    statuses = list(statuses)
    overdue = sum(1 for s in statuses if s.status == StatusType.OVERDUE)
    due_soon = sum(1 for s in statuses if s.status == StatusType.DUE_SOON)
    title = f"Weekly Summary: {tail}"

    if not overdue and not due_soon:
        return title, "All maintenance items are current. Great job!"

    parts = []
    if overdue:
        parts.append(f"{overdue} overdue.")
    if due_soon:
        parts.append(f"{due_soon} due soon.")
    return title, " ".join(parts)
