"""Shared fixtures: a sample aircraft file evaluated as of 2025-06-01."""

import pytest

SAMPLE_AIRCRAFT_YAML = """
aircraft:
  tail: N28PA
  model: Piper PA-28
  hourMode: BOTH

current:
  hobbs: 1243.6
  tach: 1189.2
  updatedAt: '2025-05-30T12:00:00'

thresholds:
  dateThresholdDays: [30, 10, 3]
  hourThresholds: [10, 5, 1]

maintenanceItems:
  - id: '1'
    name: Annual Inspection
    ruleType: DATE
    intervalDays: 365
    lastCompletedAt: '2024-06-24'
  - id: '2'
    name: Oil Change
    ruleType: HOURS
    intervalHours: 50
    hourSource: HOBBS
    lastCompletedHours: 1200
  - id: '3'
    name: ELT Battery
    ruleType: DATE
    intervalDays: 365
    lastCompletedAt: '2024-04-27'
  - id: '4'
    name: Transponder Check
    ruleType: DATE
    intervalDays: 730
    lastCompletedAt: '2024-06-01'
"""


@pytest.fixture
def sample_file(tmp_path):
    """Aircraft with one overdue, two due soon and one good item on 2025-06-01."""
    path = tmp_path / "n28pa.yaml"
    path.write_text(SAMPLE_AIRCRAFT_YAML)
    return path
