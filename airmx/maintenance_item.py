"""MaintenanceItem class for maintenance task definitions."""
from typing import Optional, Union

from .rule import RuleType, HourSource


class MaintenanceItem:
    """A maintenance task and the markers of its last completion."""

    def __init__(
            self,
            id: str,
            name: str,
            rule_type: Union[RuleType, str],
            interval_days: Optional[int] = None,
            interval_hours: Optional[float] = None,
            hour_source: Optional[Union[HourSource, str]] = None,
            last_completed_at: Optional[str] = None,
            last_completed_hours: Optional[float] = None,
            notes: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.rule_type = RuleType(rule_type)
        self.interval_days = interval_days
        self.interval_hours = interval_hours
        self.hour_source = hour_source
        self.last_completed_at = last_completed_at
        self.last_completed_hours = last_completed_hours
        self.notes = notes

    @property
    def hour_source(self) -> HourSource:
        """Meter the hours axis reads; Hobbs unless set."""
        return self._hour_source or HourSource.HOBBS

    @hour_source.setter
    def hour_source(self, value: Optional[Union[HourSource, str]]) -> None:
        self._hour_source = HourSource(value) if value else None

    @property
    def has_hour_source(self) -> bool:
        return self._hour_source is not None

    @property
    def uses_date(self) -> bool:
        return self.rule_type in (RuleType.DATE, RuleType.DATE_OR_HOURS)

    @property
    def uses_hours(self) -> bool:
        return self.rule_type in (RuleType.HOURS, RuleType.DATE_OR_HOURS)

    @property
    def interval_text(self) -> str:
        """Human-readable interval, e.g. '365 days or 50 hours'."""
        days = _format_interval(self.interval_days)
        hours = _format_interval(self.interval_hours)
        if self.rule_type == RuleType.DATE:
            return f"Every {days} days"
        if self.rule_type == RuleType.HOURS:
            return f"Every {hours} hours"
        return f"{days} days or {hours} hours"


def _format_interval(value: Optional[float]) -> str:
    return "?" if value is None else f"{value:g}"
