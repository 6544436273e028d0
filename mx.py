#!/usr/bin/env python3
"""
Unified CLI for aircraft maintenance tracking.

Commands:
  init         - Create a new aircraft file
  status       - Show what maintenance is due, overdue, or good
  items        - List maintenance items and their intervals
  add-item     - Add a maintenance item
  edit-item    - Change a maintenance item
  delete-item  - Remove a maintenance item
  thresholds   - Show or change due-soon thresholds
  update-hours - Update current Hobbs/Tach readings
  log          - Record completion of a maintenance item
  notify       - Show notifications for items whose status changed
  digest       - Show the weekly summary
"""

import argparse
import logging
import math
import sys
from datetime import date, datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from airmx import (
    ComputedStatus,
    CurrentHours,
    HourMode,
    HourSource,
    MaintenanceItem,
    RuleType,
    StatusType,
    Thresholds,
    add_maintenance_item,
    create_aircraft,
    delete_maintenance_item,
    format_notification,
    get_overall_status,
    get_status_changes,
    get_status_label,
    load_aircraft,
    load_notification_state,
    log_completion,
    save_current_hours,
    save_notification_state,
    save_thresholds,
    update_maintenance_item,
    update_notification_state,
    weekly_digest,
)

logger = logging.getLogger("mx")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_hours(hours: Optional[float]) -> str:
    """Format meter hours for display."""
    return f"{hours:,.1f}" if hours is not None else "-"


def format_due(svc: ComputedStatus) -> str:
    """Format due date and/or due hours (e.g. '2025-06-01 / 1,250.0 h')."""
    parts = []
    if svc.due_date is not None:
        parts.append(svc.due_date.date().isoformat())
    if svc.due_hours is not None:
        parts.append(f"{svc.due_hours:,.1f} h")
    return " / ".join(parts) if parts else "-"


def format_remaining(svc: ComputedStatus) -> str:
    """Format remaining days/hours for display (e.g. '23d / 6.4h' or '-35d')."""
    parts = []
    if svc.days_remaining is not None:
        parts.append(f"{svc.days_remaining}d")
    if svc.hours_remaining is not None:
        parts.append(f"{svc.hours_remaining:.1f}h")
    return " / ".join(parts) if parts else "-"


def parse_day(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (expected YYYY-MM-DD)")


def is_valid_reading(value: Optional[float]) -> bool:
    """Meter readings must be finite and non-negative (None means not given)."""
    return value is None or (math.isfinite(value) and value >= 0)


def is_valid_interval(value: Optional[float]) -> bool:
    """Intervals must be finite and positive (None means not given)."""
    return value is None or (math.isfinite(value) and value > 0)


def check_item(item: MaintenanceItem) -> Optional[str]:
    """Error message for an item the engine cannot schedule, else None."""
    if item.uses_date and item.interval_days is None:
        return f"--interval-days is required for {item.rule_type.value} items"
    if item.uses_hours and item.interval_hours is None:
        return f"--interval-hours is required for {item.rule_type.value} items"
    if not is_valid_interval(item.interval_days) or not is_valid_interval(item.interval_hours):
        return "Intervals must be positive"
    if not is_valid_reading(item.last_completed_hours):
        return "Last completed hours must be non-negative"
    return None


def print_unknown_item(aircraft, item_id: str) -> None:
    print(f"Error: Unknown maintenance item '{item_id}'")
    print("\nAvailable items:")
    for i in aircraft.maintenance_items:
        print(f"  {i.id}: {i.name}")


def print_item(item: MaintenanceItem) -> None:
    print(f"  Item:     {item.name} ({item.id or 'new'})")
    print(f"  Interval: {item.interval_text}")
    if item.uses_hours:
        print(f"  Meter:    {item.hour_source.value}")
    if item.last_completed_at:
        print(f"  Last:     {item.last_completed_at}")
    if item.last_completed_hours is not None:
        print(f"  Hours:    {format_hours(item.last_completed_hours)}")
    if item.notes:
        print(f"  Notes:    {item.notes}")


# =============================================================================
# Init command
# =============================================================================


def cmd_init(args):
    """Create a new aircraft file."""
    if args.aircraft_file.exists() and not args.force:
        print(f"Error: File already exists: {args.aircraft_file}")
        return 1
    if not is_valid_reading(args.hobbs) or not is_valid_reading(args.tach):
        print("Error: Hobbs and Tach readings must be non-negative")
        return 1

    current = CurrentHours(
        hobbs=args.hobbs,
        tach=args.tach,
        updated_at=datetime.now().isoformat(timespec="seconds"),
    )
    create_aircraft(
        args.aircraft_file,
        args.tail,
        args.model,
        args.hour_mode,
        current,
        with_default_items=args.default_items,
    )

    aircraft = load_aircraft(args.aircraft_file)
    print(f"Created {aircraft.name} in {args.aircraft_file}")
    print(f"Items: {len(aircraft.maintenance_items)}")

    return 0


# =============================================================================
# Status command
# =============================================================================


def make_status_table(statuses: List[ComputedStatus]) -> List[List[str]]:
    """Convert computed statuses to table rows."""
    rows = []
    for svc in statuses:
        rows.append(
            [
                svc.item.name,
                get_status_label(svc.status),
                format_due(svc),
                format_remaining(svc),
                svc.due_text,
            ]
        )
    return rows


def cmd_status(args):
    """Show what maintenance is due, overdue, or good."""
    aircraft = load_aircraft(args.aircraft_file)
    today = args.today or date.today()
    statuses = aircraft.get_all_statuses(today)

    print(f"Aircraft: {aircraft.name}")
    print(
        f"Hobbs: {format_hours(aircraft.current.hobbs)}  "
        f"Tach: {format_hours(aircraft.current.tach)}  "
        f"(updated {aircraft.current.updated_at or '-'})"
    )
    print(f"As of: {today.isoformat()}")
    print(f"Overall: {get_status_label(get_overall_status(statuses))}")
    print()

    if not statuses:
        print("No maintenance items.")
        return 0

    headers = ["Item", "Status", "Due", "Remaining", ""]
    print(tabulate(make_status_table(statuses), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Items command
# =============================================================================


def cmd_items(args):
    """List maintenance items and their intervals."""
    aircraft = load_aircraft(args.aircraft_file)

    print(f"Aircraft: {aircraft.name}")
    print(f"Items: {len(aircraft.maintenance_items)}")
    print()

    rows = []
    for item in aircraft.maintenance_items:
        last_done = []
        if item.last_completed_at:
            last_done.append(item.last_completed_at)
        if item.last_completed_hours is not None:
            last_done.append(f"{item.last_completed_hours:,.1f} h")
        rows.append(
            [
                item.id,
                item.name,
                item.interval_text,
                item.hour_source.value if item.uses_hours else "-",
                " @ ".join(last_done) or "-",
            ]
        )

    headers = ["ID", "Item", "Interval", "Meter", "Last Done"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Item commands
# =============================================================================


def cmd_add_item(args):
    """Add a maintenance item."""
    aircraft = load_aircraft(args.aircraft_file)
    if args.id and aircraft.get_item(args.id) is not None:
        print(f"Error: Maintenance item '{args.id}' already exists")
        return 1

    item = MaintenanceItem(
        args.id or "",
        args.name,
        args.rule_type,
        args.interval_days,
        args.interval_hours,
        args.hour_source,
        args.last_done.isoformat() if args.last_done else None,
        args.last_hours,
        args.notes,
    )
    error = check_item(item)
    if error:
        print(f"Error: {error}")
        return 1

    print(f"Adding to {aircraft.name}:")
    print_item(item)
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    item = add_maintenance_item(args.aircraft_file, item)
    print(f"Added item {item.id}.")

    return 0


def cmd_edit_item(args):
    """Change the fields given for an existing maintenance item."""
    aircraft = load_aircraft(args.aircraft_file)
    item = aircraft.get_item(args.item_id)
    if item is None:
        print_unknown_item(aircraft, args.item_id)
        return 1

    if args.name is not None:
        item.name = args.name
    if args.rule_type is not None:
        item.rule_type = RuleType(args.rule_type)
    if args.interval_days is not None:
        item.interval_days = args.interval_days
    if args.interval_hours is not None:
        item.interval_hours = args.interval_hours
    if args.hour_source is not None:
        item.hour_source = args.hour_source
    if args.notes is not None:
        item.notes = args.notes

    error = check_item(item)
    if error:
        print(f"Error: {error}")
        return 1

    print(f"Updating {aircraft.name}:")
    print_item(item)
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    update_maintenance_item(args.aircraft_file, item)
    print("Item updated.")

    return 0


def cmd_delete_item(args):
    """Remove a maintenance item."""
    aircraft = load_aircraft(args.aircraft_file)
    item = aircraft.get_item(args.item_id)
    if item is None:
        print_unknown_item(aircraft, args.item_id)
        return 1

    print(f"Deleting from {aircraft.name}: {item.name} ({item.id})")

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    delete_maintenance_item(args.aircraft_file, item.id)
    print("Item deleted.")

    return 0


# =============================================================================
# Thresholds command
# =============================================================================


def format_thresholds(values, unit: str) -> str:
    return ", ".join(f"{v:g}" for v in sorted(values, reverse=True)) + f" {unit}"


def cmd_thresholds(args):
    """Show the due-soon thresholds, or replace them when values are given."""
    aircraft = load_aircraft(args.aircraft_file)
    old = aircraft.thresholds

    print(f"Aircraft: {aircraft.name}")
    if args.days is None and args.hours is None:
        print(f"Date thresholds: {format_thresholds(old.date_threshold_days, 'days')}")
        print(f"Hour thresholds: {format_thresholds(old.hour_thresholds, 'hours')}")
        return 0

    values = (args.days or []) + (args.hours or [])
    if not all(is_valid_interval(v) for v in values):
        print("Error: Thresholds must be positive")
        return 1

    new = Thresholds(
        args.days if args.days is not None else old.date_threshold_days,
        args.hours if args.hours is not None else old.hour_thresholds,
    )
    print(
        f"Date thresholds: {format_thresholds(old.date_threshold_days, 'days')} -> "
        f"{format_thresholds(new.date_threshold_days, 'days')}"
    )
    print(
        f"Hour thresholds: {format_thresholds(old.hour_thresholds, 'hours')} -> "
        f"{format_thresholds(new.hour_thresholds, 'hours')}"
    )
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_thresholds(args.aircraft_file, new)
    print("Thresholds updated.")

    return 0


# =============================================================================
# Update Hours command
# =============================================================================


def cmd_update_hours(args):
    """Replace current Hobbs/Tach readings."""
    if not is_valid_reading(args.hobbs) or not is_valid_reading(args.tach):
        print("Error: Hobbs and Tach readings must be non-negative")
        return 1

    aircraft = load_aircraft(args.aircraft_file)
    current = CurrentHours(
        hobbs=args.hobbs,
        tach=args.tach,
        updated_at=datetime.now().isoformat(timespec="seconds"),
    )

    print(f"Aircraft: {aircraft.name}")
    print(f"Hobbs: {format_hours(aircraft.current.hobbs)} -> {format_hours(current.hobbs)}")
    print(f"Tach:  {format_hours(aircraft.current.tach)} -> {format_hours(current.tach)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_current_hours(args.aircraft_file, current)
    print("Hours updated.")

    return 0


# =============================================================================
# Log command
# =============================================================================


def cmd_log(args):
    """Record completion of a maintenance item."""
    aircraft = load_aircraft(args.aircraft_file)
    item = aircraft.get_item(args.item_id)

    if item is None:
        print_unknown_item(aircraft, args.item_id)
        return 1
    if not is_valid_reading(args.hours):
        print("Error: Hours must be non-negative")
        return 1

    completed_at = (args.date or date.today()).isoformat()

    print(f"Logging completion in {args.aircraft_file}:")
    print(f"  Item:  {item.name}")
    print(f"  Date:  {completed_at}")
    if args.hours is not None:
        print(f"  Hours: {args.hours:,.1f}")
    if args.notes:
        print(f"  Notes: {args.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    log_completion(args.aircraft_file, item.id, completed_at, args.hours, args.notes)
    print("Completion saved.")

    return 0


# =============================================================================
# Notify command
# =============================================================================


def cmd_notify(args):
    """Show notifications for status transitions and remember the new statuses."""
    aircraft = load_aircraft(args.aircraft_file)
    state = load_notification_state(args.aircraft_file)
    statuses = aircraft.get_all_statuses(args.today or date.today())

    changed = get_status_changes(statuses, state)
    if not changed:
        print("No new notifications.")
    for svc in changed:
        title, body = format_notification(svc)
        print(f"[{title}] {body}")

    if args.dry_run:
        print("(dry run - notification state not saved)")
        return 0

    save_notification_state(args.aircraft_file, update_notification_state(statuses, state))
    logger.debug("Saved notification state for %d items", len(statuses))

    return 0


# =============================================================================
# Digest command
# =============================================================================


def cmd_digest(args):
    """Show the weekly summary of due and overdue items."""
    aircraft = load_aircraft(args.aircraft_file)
    statuses = aircraft.get_all_statuses(args.today or date.today())

    title, body = weekly_digest(statuses, aircraft.tail)
    print(title)
    print(body)
    for svc in statuses:
        if svc.status != StatusType.GOOD:
            print(f"  {get_status_label(svc.status):<9} {svc.item.name}: {svc.due_text}")

    return 0


# =============================================================================
# Main
# =============================================================================


def add_item_arguments(item_parser: argparse.ArgumentParser, required: bool) -> None:
    """Item fields shared by add-item and edit-item."""
    item_parser.add_argument("--name", type=str, required=required, help="Item name")
    item_parser.add_argument(
        "--rule-type",
        choices=[r.value for r in RuleType],
        required=required,
        help="Calendar, hours, or whichever comes first",
    )
    item_parser.add_argument("--interval-days", type=int, help="Calendar interval")
    item_parser.add_argument("--interval-hours", type=float, help="Hours interval")
    item_parser.add_argument(
        "--hour-source",
        choices=[s.value for s in HourSource],
        help="Meter for the hours interval (default: HOBBS)",
    )
    item_parser.add_argument("--notes", type=str, help="Notes about the item")
    item_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be saved without saving",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Aircraft maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s aircraft/n28pa.yaml init --tail N28PA --model "Piper PA-28" --default-items
  %(prog)s aircraft/n28pa.yaml status
  %(prog)s aircraft/n28pa.yaml status --today 2025-06-01
  %(prog)s aircraft/n28pa.yaml items
  %(prog)s aircraft/n28pa.yaml add-item --name "Oil Change" --rule-type HOURS --interval-hours 50
  %(prog)s aircraft/n28pa.yaml thresholds --days 30 10 3
  %(prog)s aircraft/n28pa.yaml update-hours --hobbs 1250.3 --tach 1195.0
  %(prog)s aircraft/n28pa.yaml log 2 --hours 1250.3 --notes "Aeroshell 15W-50"
  %(prog)s aircraft/n28pa.yaml notify
""",
    )
    parser.add_argument(
        "aircraft_file",
        type=Path,
        help="Path to aircraft YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Init subcommand
    init_parser = subparsers.add_parser("init", help="Create a new aircraft file")
    init_parser.add_argument("--tail", type=str, required=True, help="Tail number")
    init_parser.add_argument("--model", type=str, default="", help="Aircraft model")
    init_parser.add_argument(
        "--hour-mode",
        choices=[m.value for m in HourMode],
        default=HourMode.BOTH.value,
        help="Meters tracked (default: BOTH)",
    )
    init_parser.add_argument("--hobbs", type=float, default=0.0, help="Hobbs reading")
    init_parser.add_argument("--tach", type=float, default=0.0, help="Tach reading")
    init_parser.add_argument(
        "--default-items",
        action="store_true",
        help="Start with the common inspection items",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file",
    )

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show what maintenance is due, overdue, or good"
    )
    status_parser.add_argument(
        "--today",
        type=parse_day,
        help="Evaluate as of this date (YYYY-MM-DD, default: today)",
    )

    # Items subcommand
    subparsers.add_parser("items", help="List maintenance items and intervals")

    # Add Item subcommand
    add_parser = subparsers.add_parser("add-item", help="Add a maintenance item")
    add_parser.add_argument("--id", type=str, help="Item id (default: generated)")
    add_item_arguments(add_parser, required=True)
    add_parser.add_argument(
        "--last-done",
        type=parse_day,
        help="Date last completed (YYYY-MM-DD)",
    )
    add_parser.add_argument(
        "--last-hours",
        type=float,
        help="Meter reading when last completed",
    )

    # Edit Item subcommand
    edit_parser = subparsers.add_parser("edit-item", help="Change a maintenance item")
    edit_parser.add_argument("item_id", type=str, help="Maintenance item id")
    add_item_arguments(edit_parser, required=False)

    # Delete Item subcommand
    delete_parser = subparsers.add_parser(
        "delete-item", help="Remove a maintenance item"
    )
    delete_parser.add_argument("item_id", type=str, help="Maintenance item id")
    delete_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be deleted without saving",
    )

    # Thresholds subcommand
    thresholds_parser = subparsers.add_parser(
        "thresholds", help="Show or change due-soon thresholds"
    )
    thresholds_parser.add_argument(
        "--days",
        type=int,
        nargs="+",
        help="Day counts that start the due-soon warning",
    )
    thresholds_parser.add_argument(
        "--hours",
        type=float,
        nargs="+",
        help="Hour margins that start the due-soon warning",
    )
    thresholds_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Update Hours subcommand
    hours_parser = subparsers.add_parser(
        "update-hours", help="Update current Hobbs/Tach readings"
    )
    hours_parser.add_argument("--hobbs", type=float, required=True, help="Hobbs reading")
    hours_parser.add_argument("--tach", type=float, required=True, help="Tach reading")
    hours_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Record completion of an item")
    log_parser.add_argument("item_id", type=str, help="Maintenance item id")
    log_parser.add_argument(
        "--date",
        type=parse_day,
        help="Completion date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument(
        "--hours",
        type=float,
        help="Meter reading at completion",
    )
    log_parser.add_argument(
        "--notes",
        type=str,
        help="Notes about the work",
    )
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be saved without saving",
    )

    # Notify subcommand
    notify_parser = subparsers.add_parser(
        "notify", help="Show notifications for status changes"
    )
    notify_parser.add_argument("--today", type=parse_day, help="Evaluate as of date")
    notify_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not save the notification state",
    )

    # Digest subcommand
    digest_parser = subparsers.add_parser("digest", help="Show the weekly summary")
    digest_parser.add_argument("--today", type=parse_day, help="Evaluate as of date")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate aircraft file exists
    if args.command != "init" and not args.aircraft_file.exists():
        print(f"Error: File not found: {args.aircraft_file}")
        return 1

    handlers = {
        "init": cmd_init,
        "status": cmd_status,
        "items": cmd_items,
        "add-item": cmd_add_item,
        "edit-item": cmd_edit_item,
        "delete-item": cmd_delete_item,
        "thresholds": cmd_thresholds,
        "update-hours": cmd_update_hours,
        "log": cmd_log,
        "notify": cmd_notify,
        "digest": cmd_digest,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)
