"""Flask JSON API for aircraft maintenance tracking."""

import logging
import math
import os
from datetime import date, datetime
from pathlib import Path

from flask import Flask, jsonify, request

# Add parent directory to path for model imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from airmx.computed_status import ComputedStatus
from airmx.current_hours import CurrentHours
from airmx.gauge import gauge_for
from airmx.loader import load_aircraft, log_completion, save_current_hours
from airmx.status import StatusType
from airmx.status_engine import get_overall_status, get_status_color, get_status_label

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Directory of aircraft YAML files (relative to project root by default)
app.config["AIRCRAFT_DIR"] = Path(
    os.environ.get("AIRCRAFT_DIR", Path(__file__).parent.parent / "aircraft")
)


class BadRequest(ValueError):
    """Invalid client input."""


def get_aircraft_files():
    """Get all aircraft YAML files."""
    return sorted(Path(app.config["AIRCRAFT_DIR"]).glob("*.yaml"))


def get_aircraft_path(aircraft_id: str) -> Path:
    """Get full path for an aircraft ID (filename without extension)."""
    return Path(app.config["AIRCRAFT_DIR"]) / f"{aircraft_id}.yaml"


def parse_today():
    """Optional ?today=YYYY-MM-DD override, for reproducible views."""
    value = request.args.get("today")
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise BadRequest(f"Invalid date '{value}'")


def parse_float(payload, field: str):
    value = payload.get(field)
    if value is None or value == "":
        raise BadRequest(f"Missing {field}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid {field} value")
    if not math.isfinite(number):
        raise BadRequest(f"{field} must be a finite number")
    if number < 0:
        raise BadRequest(f"{field} must be non-negative")
    return number


def request_payload():
    """Form fields or JSON body, whichever was sent."""
    return request.get_json(silent=True) or request.form


def status_counts(statuses):
    return {
        s.value: sum(1 for c in statuses if c.status == s) for s in StatusType
    }


def status_to_dict(svc: ComputedStatus) -> dict:
    """Serialize a computed status for the API."""
    gauge = gauge_for(svc)
    return {
        "id": svc.item.id,
        "name": svc.item.name,
        "ruleType": svc.item.rule_type.value,
        "status": svc.status.value,
        "label": get_status_label(svc.status),
        "color": get_status_color(svc.status),
        "dueDate": svc.due_date.date().isoformat() if svc.due_date else None,
        "dueHours": svc.due_hours,
        "daysRemaining": svc.days_remaining,
        "hoursRemaining": svc.hours_remaining,
        "dueText": svc.due_text,
        "gauge": {
            "label": gauge.label,
            "percent": gauge.percent,
            "status": gauge.gauge_status,
        },
    }


def aircraft_response(aircraft_id: str, today):
    aircraft = load_aircraft(get_aircraft_path(aircraft_id))
    statuses = aircraft.get_all_statuses(today)
    overall = get_overall_status(statuses)
    return jsonify({
        "id": aircraft_id,
        "tail": aircraft.tail,
        "model": aircraft.model,
        "hourMode": aircraft.hour_mode.value,
        "current": {
            "hobbs": aircraft.current.hobbs,
            "tach": aircraft.current.tach,
            "updatedAt": aircraft.current.updated_at,
        },
        "overall": overall.value,
        "overallLabel": get_status_label(overall),
        "counts": status_counts(statuses),
        "items": [status_to_dict(s) for s in statuses],
    })


def not_found(aircraft_id: str):
    return jsonify({"error": f"Aircraft '{aircraft_id}' not found"}), 404


@app.errorhandler(BadRequest)
def handle_bad_request(error):
    return jsonify({"error": str(error)}), 400


@app.route("/")
def index():
    """Summary of all aircraft."""
    today = parse_today()
    aircraft_list = []
    for path in get_aircraft_files():
        aircraft = load_aircraft(path)
        statuses = aircraft.get_all_statuses(today)
        overall = get_overall_status(statuses)
        aircraft_list.append({
            "id": path.stem,
            "name": aircraft.name,
            "overall": overall.value,
            "overallLabel": get_status_label(overall),
            "counts": status_counts(statuses),
            "totalItems": len(statuses),
        })
    return jsonify({"aircraft": aircraft_list})


@app.route("/aircraft/<aircraft_id>")
def aircraft_detail(aircraft_id: str):
    """Prioritized maintenance statuses for one aircraft."""
    if not get_aircraft_path(aircraft_id).exists():
        return not_found(aircraft_id)
    return aircraft_response(aircraft_id, parse_today())


@app.route("/aircraft/<aircraft_id>/hours", methods=["POST"])
def update_hours(aircraft_id: str):
    """Replace the Hobbs/Tach readings."""
    today = parse_today()
    path = get_aircraft_path(aircraft_id)
    if not path.exists():
        return not_found(aircraft_id)

    payload = request_payload()
    current = CurrentHours(
        hobbs=parse_float(payload, "hobbs"),
        tach=parse_float(payload, "tach"),
        updated_at=datetime.now().isoformat(timespec="seconds"),
    )
    save_current_hours(path, current)
    logger.info("Updated hours for %s", aircraft_id)

    return aircraft_response(aircraft_id, today)


@app.route("/aircraft/<aircraft_id>/items/<item_id>/complete", methods=["POST"])
def complete_item(aircraft_id: str, item_id: str):
    """Record completion of a maintenance item."""
    today = parse_today()
    path = get_aircraft_path(aircraft_id)
    if not path.exists():
        return not_found(aircraft_id)

    payload = request_payload()
    completed_at = payload.get("date") or date.today().isoformat()
    try:
        date.fromisoformat(completed_at)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid date '{completed_at}'")
    hours = parse_float(payload, "hours") if payload.get("hours") not in (None, "") else None
    notes = payload.get("notes") or None

    try:
        log_completion(path, item_id, completed_at, hours, notes)
    except KeyError:
        return jsonify({"error": f"Maintenance item '{item_id}' not found"}), 404

    return aircraft_response(aircraft_id, today)


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, host="0.0.0.0", port=5001)
