"""YAML loading and saving utilities for aircraft data."""

import json
import logging
import uuid
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .aircraft import Aircraft
from .current_hours import CurrentHours
from .maintenance_item import MaintenanceItem
from .notifications import NotificationState
from .rule import HourMode
from .status import StatusType
from .thresholds import Thresholds

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """New opaque maintenance item id."""
    return uuid.uuid4().hex[:12]


def _json_default(value: Any) -> str:
    # Unquoted YAML dates/timestamps come back as date/datetime objects
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Unsupported value in aircraft file: {value!r}")


def plain_data(data: Any) -> Any:
    """YAML data with date and timestamp values turned into ISO strings."""
    return json.loads(json.dumps(data, default=_json_default))


def _as_thresholds(value: Any) -> Thresholds:
    if isinstance(value, Thresholds):
        return value
    return Thresholds()


def _as_current(value: Any) -> CurrentHours:
    if isinstance(value, CurrentHours):
        return value
    return CurrentHours()


def _parse_object(
    dct: Dict[str, Any]
) -> Union[Aircraft, MaintenanceItem, CurrentHours, Thresholds, dict]:
    """Parse dictionary into appropriate object type."""
    # Maintenance item
    if "ruleType" in dct:
        return MaintenanceItem(
            str(dct["id"]),
            dct["name"],
            dct["ruleType"],
            dct.get("intervalDays"),
            dct.get("intervalHours"),
            dct.get("hourSource"),
            dct.get("lastCompletedAt"),
            dct.get("lastCompletedHours"),
            dct.get("notes"),
        )
    # Thresholds (missing lists fall back to defaults)
    elif "dateThresholdDays" in dct or "hourThresholds" in dct:
        return Thresholds(dct.get("dateThresholdDays"), dct.get("hourThresholds"))
    # Current meter readings
    elif "hobbs" in dct or "tach" in dct or "updatedAt" in dct:
        return CurrentHours(dct.get("hobbs"), dct.get("tach"), dct.get("updatedAt"))
    # Top-level aircraft object
    elif "aircraft" in dct and "maintenanceItems" in dct:
        meta = dct["aircraft"]
        return Aircraft(
            meta["tail"],
            meta.get("model", ""),
            meta.get("hourMode") or HourMode.BOTH,
            _as_current(dct.get("current")),
            _as_thresholds(dct.get("thresholds")),
            dct.get("maintenanceItems") or [],
        )
    else:
        # Return dict as-is for unknown structures (like 'notificationState')
        return dct


def _load_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader)


def _dump_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def load_aircraft(filename: Union[str, Path]) -> Aircraft:
    """Load an aircraft from a YAML file."""
    logger.debug("Loading aircraft from %s", filename)
    with open(filename, "rb") as fp:
        json_data = json.dumps(
            yaml.load(fp, Loader=yaml.SafeLoader), default=_json_default
        )
        return json.loads(json_data, object_hook=_parse_object)


def load_notification_state(filename: Union[str, Path]) -> NotificationState:
    """Load the remembered notification state, empty when never saved."""
    data = _load_raw(filename)
    raw = data.get("notificationState") or {}
    statuses = {
        str(item_id): StatusType(value)
        for item_id, value in (raw.get("lastNotifiedStatus") or {}).items()
    }
    return NotificationState(statuses, raw.get("lastWeeklyDigest"))


# =============================================================================
# Serialization
# =============================================================================


def _item_to_dict(item: MaintenanceItem) -> Dict[str, Any]:
    """Serialize a MaintenanceItem to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": item.id,
        "name": item.name,
        "ruleType": item.rule_type.value,
    }
    if item.interval_days is not None:
        d["intervalDays"] = item.interval_days
    if item.interval_hours is not None:
        d["intervalHours"] = item.interval_hours
    if item.uses_hours or item.has_hour_source:
        d["hourSource"] = item.hour_source.value
    if item.last_completed_at is not None:
        d["lastCompletedAt"] = item.last_completed_at
    if item.last_completed_hours is not None:
        d["lastCompletedHours"] = item.last_completed_hours
    if item.notes is not None:
        d["notes"] = item.notes
    return d


def _current_to_dict(current: CurrentHours) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    if current.hobbs is not None:
        d["hobbs"] = current.hobbs
    if current.tach is not None:
        d["tach"] = current.tach
    d["updatedAt"] = current.updated_at or datetime.now().isoformat()
    return d


def _thresholds_to_dict(thresholds: Thresholds) -> Dict[str, Any]:
    return {
        "dateThresholdDays": list(thresholds.date_threshold_days),
        "hourThresholds": list(thresholds.hour_thresholds),
    }


def _find_item_index(data: Dict[str, Any], item_id: str) -> int:
    items = data.get("maintenanceItems") or []
    for index, raw in enumerate(items):
        if str(raw.get("id")) == item_id:
            return index
    raise KeyError(f"Unknown maintenance item '{item_id}'")


# =============================================================================
# Updates
# =============================================================================


def save_current_hours(filename: Union[str, Path], current: CurrentHours) -> None:
    """
    Replace the current meter readings in an aircraft YAML file.

    The snapshot is replaced wholesale; a meter left as None is removed.
    """
    data = _load_raw(filename)
    data["current"] = _current_to_dict(current)
    _dump_raw(filename, data)
    logger.info("Saved hours for %s: hobbs=%s tach=%s", filename, current.hobbs, current.tach)


def save_thresholds(filename: Union[str, Path], thresholds: Thresholds) -> None:
    """Replace the warning thresholds in an aircraft YAML file."""
    data = _load_raw(filename)
    data["thresholds"] = _thresholds_to_dict(thresholds)
    _dump_raw(filename, data)


def add_maintenance_item(
    filename: Union[str, Path], item: MaintenanceItem
) -> MaintenanceItem:
    """
    Append a maintenance item to an aircraft YAML file.

    An item without an id is given a generated one. Returns the stored item.
    """
    data = _load_raw(filename)
    if data.get("maintenanceItems") is None:
        data["maintenanceItems"] = []

    if not item.id:
        item.id = generate_id()
    data["maintenanceItems"].append(_item_to_dict(item))

    _dump_raw(filename, data)
    logger.info("Added maintenance item %s (%s) to %s", item.id, item.name, filename)
    return item


def update_maintenance_item(filename: Union[str, Path], item: MaintenanceItem) -> None:
    """Replace the maintenance item with the same id. KeyError if not found."""
    data = _load_raw(filename)
    index = _find_item_index(data, item.id)
    data["maintenanceItems"][index] = _item_to_dict(item)
    _dump_raw(filename, data)


def delete_maintenance_item(filename: Union[str, Path], item_id: str) -> None:
    """Remove a maintenance item by id. KeyError if not found."""
    data = _load_raw(filename)
    index = _find_item_index(data, item_id)
    del data["maintenanceItems"][index]
    _dump_raw(filename, data)
    logger.info("Deleted maintenance item %s from %s", item_id, filename)


def log_completion(
    filename: Union[str, Path],
    item_id: str,
    completed_at: str,
    hours: Optional[float] = None,
    notes: Optional[str] = None,
) -> MaintenanceItem:
    """
    Record that a maintenance item was completed.

    Sets lastCompletedAt; hours and notes replace the previous values only
    when given. Returns the updated item.
    """
    aircraft = load_aircraft(filename)
    item = aircraft.get_item(item_id)
    if item is None:
        raise KeyError(f"Unknown maintenance item '{item_id}'")

    item.last_completed_at = completed_at
    if hours is not None:
        item.last_completed_hours = hours
    if notes is not None:
        item.notes = notes

    update_maintenance_item(filename, item)
    logger.info("Logged completion of %s on %s", item.name, completed_at)
    return item


def save_notification_state(
    filename: Union[str, Path], state: NotificationState
) -> None:
    """Store the per-item statuses last notified."""
    data = _load_raw(filename)
    raw: Dict[str, Any] = {
        "lastNotifiedStatus": {
            item_id: status.value
            for item_id, status in state.last_notified_status.items()
        },
    }
    if state.last_weekly_digest is not None:
        raw["lastWeeklyDigest"] = state.last_weekly_digest
    data["notificationState"] = raw
    _dump_raw(filename, data)


# =============================================================================
# New aircraft
# =============================================================================


def default_maintenance_items(today: Optional[date] = None) -> List[MaintenanceItem]:
    """Starter items for a new aircraft, completed relative to today."""
    today = today or date.today()

    def days_ago(days: int) -> str:
        return (today - timedelta(days=days)).isoformat()

    return [
        MaintenanceItem("1", "Annual Inspection", "DATE", interval_days=365,
                        last_completed_at=days_ago(342)),
        MaintenanceItem("2", "Oil Change", "HOURS", interval_hours=50,
                        hour_source="HOBBS", last_completed_hours=0),
        MaintenanceItem("3", "ELT Battery", "DATE", interval_days=730,
                        last_completed_at=days_ago(600)),
        MaintenanceItem("4", "Transponder Check", "DATE", interval_days=730,
                        last_completed_at=days_ago(365)),
        MaintenanceItem("5", "Pitot-Static Check", "DATE", interval_days=730,
                        last_completed_at=days_ago(400)),
    ]


def create_aircraft(
    filename: Union[str, Path],
    tail: str,
    model: str,
    hour_mode: Union[HourMode, str] = HourMode.BOTH,
    current: Optional[CurrentHours] = None,
    with_default_items: bool = False,
    today: Optional[date] = None,
) -> None:
    """
    Create a new aircraft YAML file.

    Starts with default thresholds and either no items or the starter items.
    """
    items = default_maintenance_items(today) if with_default_items else []
    data: Dict[str, Any] = {
        "aircraft": {
            "tail": tail,
            "model": model,
            "hourMode": HourMode(hour_mode).value,
        },
        "current": _current_to_dict(current or CurrentHours(0, 0)),
        "thresholds": _thresholds_to_dict(Thresholds()),
        "maintenanceItems": [_item_to_dict(item) for item in items],
        "notificationState": {"lastNotifiedStatus": {}},
    }
    _dump_raw(filename, data)
    logger.info("Created aircraft %s at %s", tail, filename)
