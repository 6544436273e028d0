#!/usr/bin/env python3
"""
Validate aircraft YAML files.

Checks each file against schema.yaml, then checks what the schema cannot
express: unique item ids and parseable timestamps.
"""
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml
from dateutil.parser import isoparse
from jsonschema import Draft7Validator

from airmx.loader import plain_data

AIRCRAFT_DIR = Path(__file__).parent / "aircraft"


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def _path_of(error) -> str:
    return ".".join(str(p) for p in error.absolute_path)


def check_item_consistency(data: Dict[str, Any]) -> List[str]:
    """Duplicate item ids and unparseable timestamps."""
    errors = []
    seen = set()
    for index, item in enumerate(data.get("maintenanceItems") or []):
        item_id = str(item.get("id"))
        if item_id in seen:
            errors.append(f"Duplicate item id '{item_id}'")
            errors.append(f"  at path: maintenanceItems.{index}.id")
        seen.add(item_id)

        completed_at = item.get("lastCompletedAt")
        if isinstance(completed_at, str):
            try:
                isoparse(completed_at)
            except ValueError:
                errors.append(f"Invalid lastCompletedAt '{completed_at}'")
                errors.append(f"  at path: maintenanceItems.{index}.lastCompletedAt")
    return errors


def validate_aircraft_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single aircraft YAML file. Returns list of errors."""
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: {e}"]

    # Unquoted dates load as date objects; the loader reads them as strings
    try:
        data = plain_data(data)
    except TypeError as e:
        return [f"Error: {e}"]

    errors = []
    validator = Draft7Validator(schema)
    schema_errors = sorted(
        validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path]
    )
    for error in schema_errors:
        errors.append(f"Schema validation error: {error.message}")
        if error.absolute_path:
            errors.append(f"  at path: {_path_of(error)}")

    # Consistency checks assume the basic shape is right
    if not errors:
        errors.extend(check_item_consistency(data))
    return errors


def main(argv=None):
    """Validate the given files, or every aircraft file in aircraft/."""
    parser = argparse.ArgumentParser(description="Validate aircraft YAML files")
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="Files to validate (default: aircraft/*.yaml)",
    )
    args = parser.parse_args(argv)
    schema = load_schema()

    yaml_files = args.files
    if not yaml_files:
        if not AIRCRAFT_DIR.exists():
            print(f"Error: aircraft directory not found: {AIRCRAFT_DIR}")
            return 1
        yaml_files = sorted(
            list(AIRCRAFT_DIR.glob("*.yaml")) + list(AIRCRAFT_DIR.glob("*.yml"))
        )

    if not yaml_files:
        print(f"Warning: No YAML files found in {AIRCRAFT_DIR}")
        return 0

    all_valid = True
    for filepath in yaml_files:
        errors = validate_aircraft_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
