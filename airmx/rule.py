"""Enums describing how a maintenance item's due point is measured."""

from enum import Enum


class RuleType(Enum):
    """Which due calculations apply to an item."""

    DATE = "DATE"
    HOURS = "HOURS"
    DATE_OR_HOURS = "DATE_OR_HOURS"  # Whichever comes first


class HourSource(Enum):
    """Meter an hour-based interval is measured against."""

    HOBBS = "HOBBS"
    TACH = "TACH"


class HourMode(Enum):
    """Which meters the owner tracks for an aircraft."""

    HOBBS = "HOBBS"
    TACH = "TACH"
    BOTH = "BOTH"
