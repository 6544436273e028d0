"""
Aircraft maintenance tracking models.

This package provides data models and the status engine for tracking
aircraft maintenance:
- StatusType: Urgency levels (GOOD, DUE_SOON, OVERDUE)
- RuleType / HourSource / HourMode: How due points are measured
- MaintenanceItem: Maintenance task definitions
- CurrentHours / Thresholds: Per-aircraft meter readings and warning breakpoints
- ComputedStatus: Calculated item status
- Aircraft: Main aggregate combining all data
"""

from .status import StatusType
from .rule import RuleType, HourSource, HourMode
from .maintenance_item import MaintenanceItem
from .current_hours import CurrentHours
from .thresholds import Thresholds
from .computed_status import ComputedStatus
from .status_engine import (
    compute_item_status,
    compute_all_statuses,
    get_overall_status,
    get_status_color,
    get_status_label,
)
from .aircraft import Aircraft
from .gauge import GaugeData, compute_gauge_data, gauge_for
from .notifications import (
    NotificationState,
    get_status_changes,
    create_notification_state,
    update_notification_state,
    format_notification,
    weekly_digest,
)
from .loader import (
    load_aircraft,
    load_notification_state,
    save_current_hours,
    save_thresholds,
    add_maintenance_item,
    update_maintenance_item,
    delete_maintenance_item,
    log_completion,
    save_notification_state,
    create_aircraft,
)

__all__ = [
    "StatusType",
    "RuleType",
    "HourSource",
    "HourMode",
    "MaintenanceItem",
    "CurrentHours",
    "Thresholds",
    "ComputedStatus",
    "Aircraft",
    "compute_item_status",
    "compute_all_statuses",
    "get_overall_status",
    "get_status_color",
    "get_status_label",
    "GaugeData",
    "compute_gauge_data",
    "gauge_for",
    "NotificationState",
    "get_status_changes",
    "create_notification_state",
    "update_notification_state",
    "format_notification",
    "weekly_digest",
    "load_aircraft",
    "load_notification_state",
    "save_current_hours",
    "save_thresholds",
    "add_maintenance_item",
    "update_maintenance_item",
    "delete_maintenance_item",
    "log_completion",
    "save_notification_state",
    "create_aircraft",
]
